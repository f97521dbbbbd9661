# routers/properties.py
"""
Property API routes.

Units are created separately through /api/units once the property exists.
"""
from typing import List

from fastapi import APIRouter, Depends, status

from dependencies import get_gateway
from errors import ValidationError
from schemas.property import PropertyCreate, PropertyUpdate
from schemas.rows import PropertyRow
from services.gateway import PersistenceGateway
from services.unit_service import delete_property

router = APIRouter(prefix="/api/properties", tags=["properties"])


@router.get("", response_model=List[PropertyRow], summary="List properties")
async def list_properties(gateway: PersistenceGateway = Depends(get_gateway)):
     return await gateway.select("properties", order_by=["name"])


@router.post("", response_model=PropertyRow, status_code=status.HTTP_201_CREATED, summary="Create a property")
async def create_property(body: PropertyCreate, gateway: PersistenceGateway = Depends(get_gateway)):
     created = await gateway.insert("properties", [body.model_dump()])
     return created[0]


@router.patch("/{property_id}", response_model=PropertyRow, summary="Update a property")
async def update_property(
     property_id: str,
     body: PropertyUpdate,
     gateway: PersistenceGateway = Depends(get_gateway),
):
     patch = body.model_dump(exclude_unset=True)
     cleared = [name for name in ("name", "address", "total_units") if name in patch and patch[name] is None]
     if cleared:
          raise ValidationError(f"Cannot clear required fields: {', '.join(cleared)}")
     return await gateway.update("properties", property_id, patch)


@router.delete("/{property_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a property")
async def remove_property(property_id: str, gateway: PersistenceGateway = Depends(get_gateway)):
     """Deletes the property and its units. Refused (409) while a unit has a tenant."""
     await delete_property(gateway, property_id)
