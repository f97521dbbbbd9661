# routers/tenants.py
"""
Tenant API routes.

Writes are validated before they reach the gateway. Deleting a tenant also
removes its receipt rows and frees any unit pointing back at it.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, status

from dependencies import get_gateway
from errors import ValidationError
from schemas.rows import TenantRow
from schemas.tenant import TenantCreate, TenantUpdate
from services.gateway import PersistenceGateway
from services.receipt_service import remove_tenant_receipts
from services.validation import validate_deposit_amount, validate_lease_dates, validate_rent_amount

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tenants", tags=["tenants"])

# Columns the tenants table stores as NOT NULL
REQUIRED_FIELDS = ("name", "email", "rent_amount", "deposit_amount", "status", "move_in_date")


@router.get("", response_model=List[TenantRow], summary="List tenants")
async def list_tenants(gateway: PersistenceGateway = Depends(get_gateway)):
     return await gateway.select("tenants", order_by=["name"])


@router.post("", response_model=TenantRow, status_code=status.HTTP_201_CREATED, summary="Create a tenant")
async def create_tenant(body: TenantCreate, gateway: PersistenceGateway = Depends(get_gateway)):
     validate_rent_amount(body.rent_amount)
     validate_deposit_amount(body.deposit_amount)
     validate_lease_dates(body.move_in_date, body.lease_end_date)

     values = body.model_dump()
     values["status"] = body.status.value
     created = await gateway.insert("tenants", [values])
     return created[0]


@router.patch("/{tenant_id}", response_model=TenantRow, summary="Update a tenant")
async def update_tenant(
     tenant_id: str,
     body: TenantUpdate,
     gateway: PersistenceGateway = Depends(get_gateway),
):
     patch = body.model_dump(exclude_unset=True)
     cleared = [name for name in REQUIRED_FIELDS if name in patch and patch[name] is None]
     if cleared:
          raise ValidationError(f"Cannot clear required fields: {', '.join(cleared)}")
     if "rent_amount" in patch:
          patch["rent_amount"] = validate_rent_amount(patch["rent_amount"])
     if "deposit_amount" in patch:
          patch["deposit_amount"] = validate_deposit_amount(patch["deposit_amount"])
     if "status" in patch:
          patch["status"] = patch["status"].value

     if "move_in_date" in patch or "lease_end_date" in patch:
          current = await gateway.select("tenants", {"id": tenant_id})
          if current:
               validate_lease_dates(
                    patch.get("move_in_date", current[0].move_in_date),
                    patch.get("lease_end_date", current[0].lease_end_date),
               )
     return await gateway.update("tenants", tenant_id, patch)


@router.delete("/{tenant_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a tenant")
async def delete_tenant(tenant_id: str, gateway: PersistenceGateway = Depends(get_gateway)):
     # Read before the delete; the foreign key clears units.tenant_id on its own
     occupied = await gateway.select("units", {"tenant_id": tenant_id})
     await gateway.delete("tenants", tenant_id)

     for unit in occupied:
          await gateway.update("units", unit.id, {"tenant_id": None, "is_available": True})

     # Leftovers from a failed call are picked up by cleanup_orphaned_receipts
     removed = await remove_tenant_receipts(gateway, tenant_id)
     logger.info("Deleted tenant %s and %d receipt rows", tenant_id, removed)
