# routers/units.py
"""
Unit API routes.

Ownership is checked through the unit's property. Occupancy changes only
through /assign and /unassign, which keep tenant_id and is_available in step.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from dependencies import get_gateway
from errors import ValidationError
from schemas.rows import UnitRow
from schemas.unit import UnitAssignment, UnitCreate, UnitUpdate
from services.gateway import PersistenceGateway
from services import unit_service

router = APIRouter(prefix="/api/units", tags=["units"])


@router.get("", response_model=List[UnitRow], summary="List units")
async def list_units(
     property_id: Optional[str] = Query(None, description="Filter by property ID"),
     gateway: PersistenceGateway = Depends(get_gateway),
):
     filters = {"property_id": property_id} if property_id else None
     return await gateway.select("units", filters, order_by=["unit_number"])


@router.post("", response_model=UnitRow, status_code=status.HTTP_201_CREATED, summary="Create a unit")
async def create_unit(body: UnitCreate, gateway: PersistenceGateway = Depends(get_gateway)):
     return await unit_service.create_unit(gateway, body.model_dump())


@router.patch("/{unit_id}", response_model=UnitRow, summary="Update a unit")
async def update_unit(unit_id: str, body: UnitUpdate, gateway: PersistenceGateway = Depends(get_gateway)):
     patch = body.model_dump(exclude_unset=True)
     cleared = [name for name, value in patch.items() if value is None]
     if cleared:
          raise ValidationError(f"Cannot clear required fields: {', '.join(cleared)}")
     return await unit_service.update_unit(gateway, unit_id, patch)


@router.delete("/{unit_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a unit")
async def delete_unit(unit_id: str, gateway: PersistenceGateway = Depends(get_gateway)):
     await gateway.delete("units", unit_id)


@router.post("/{unit_id}/assign", response_model=UnitRow, summary="Assign a tenant to a unit")
async def assign_tenant(
     unit_id: str,
     body: UnitAssignment,
     gateway: PersistenceGateway = Depends(get_gateway),
):
     return await unit_service.assign_tenant(gateway, unit_id, body.tenant_id, body.rent_amount)


@router.post("/{unit_id}/unassign", response_model=UnitRow, summary="Free a unit")
async def unassign_tenant(unit_id: str, gateway: PersistenceGateway = Depends(get_gateway)):
     return await unit_service.unassign_tenant(gateway, unit_id)
