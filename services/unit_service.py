# services/unit_service.py
"""
Property and unit management on top of the persistence gateway.

A unit's tenant_id and is_available always move together: a unit with a
tenant is not available, a unit without one is. Assigning a tenant also
points the tenant's unit_number at the unit, which is the reference the
consistency checker matches on.
"""
import logging
from typing import Optional

from errors import ConflictError, NotFoundError
from schemas.rows import PropertyRow, TenantRow, UnitRow
from services.gateway import PersistenceGateway
from services.validation import validate_unit_rent

logger = logging.getLogger(__name__)


async def _get_one(gateway: PersistenceGateway, table: str, record_id: str):
     rows = await gateway.select(table, {"id": record_id})
     if not rows:
          raise NotFoundError(table, record_id)
     return rows[0]


async def _ensure_unit_number_free(
     gateway: PersistenceGateway, property_id: str, unit_number: str, exclude_id: Optional[str] = None
) -> None:
     clashes = await gateway.select("units", {"property_id": property_id, "unit_number": unit_number})
     if any(unit.id != exclude_id for unit in clashes):
          raise ConflictError(f"Unit {unit_number} already exists in this property")


async def create_unit(gateway: PersistenceGateway, values: dict) -> UnitRow:
     """Create a vacant unit in one of the owner's properties."""
     await _get_one(gateway, "properties", values["property_id"])
     await _ensure_unit_number_free(gateway, values["property_id"], values["unit_number"])
     row = dict(values, rent_amount=validate_unit_rent(values.get("rent_amount", 0)))
     row.update(tenant_id=None, is_available=True)
     created = await gateway.insert("units", [row])
     logger.info("Created unit %s in property %s", row["unit_number"], row["property_id"])
     return created[0]


async def update_unit(gateway: PersistenceGateway, unit_id: str, patch: dict) -> UnitRow:
     unit = await _get_one(gateway, "units", unit_id)
     if "rent_amount" in patch:
          patch["rent_amount"] = validate_unit_rent(patch["rent_amount"])
     if "property_id" in patch or "unit_number" in patch:
          await _ensure_unit_number_free(
               gateway,
               patch.get("property_id", unit.property_id),
               patch.get("unit_number", unit.unit_number),
               exclude_id=unit.id,
          )
     return await gateway.update("units", unit_id, patch)


async def assign_tenant(
     gateway: PersistenceGateway, unit_id: str, tenant_id: str, rent_amount=None
) -> UnitRow:
     """
     Put a tenant in a unit.

     Args:
          rent_amount: new unit rent; the tenant's rent when omitted

     Raises:
          NotFoundError: unit or tenant is not the owner's
          ConflictError: the unit is occupied by another tenant
     """
     unit: UnitRow = await _get_one(gateway, "units", unit_id)
     tenant: TenantRow = await _get_one(gateway, "tenants", tenant_id)
     if unit.tenant_id and unit.tenant_id != tenant.id:
          raise ConflictError(f"Unit {unit.unit_number} is already occupied")

     rent = validate_unit_rent(rent_amount if rent_amount is not None else tenant.rent_amount)
     updated = await gateway.update("units", unit.id, {
          "tenant_id": tenant.id,
          "is_available": False,
          "rent_amount": rent,
     })
     if tenant.unit_number != unit.unit_number:
          await gateway.update("tenants", tenant.id, {"unit_number": unit.unit_number})
     logger.info("Assigned tenant %s to unit %s", tenant.id, unit.unit_number)
     return updated


async def unassign_tenant(gateway: PersistenceGateway, unit_id: str) -> UnitRow:
     """Free a unit; the former tenant loses the unit reference if it still points here."""
     unit: UnitRow = await _get_one(gateway, "units", unit_id)
     updated = await gateway.update("units", unit.id, {"tenant_id": None, "is_available": True})
     if unit.tenant_id:
          tenants = await gateway.select("tenants", {"id": unit.tenant_id})
          if tenants and tenants[0].unit_number == unit.unit_number:
               await gateway.update("tenants", unit.tenant_id, {"unit_number": None})
     logger.info("Unassigned unit %s", unit.unit_number)
     return updated


async def delete_property(gateway: PersistenceGateway, property_id: str) -> None:
     """Delete a property and its units; refused while any unit is occupied."""
     prop: PropertyRow = await _get_one(gateway, "properties", property_id)
     units = await gateway.select("units", {"property_id": prop.id})
     if any(unit.tenant_id for unit in units):
          raise ConflictError("Cannot delete a property with assigned tenants")
     for unit in units:
          await gateway.delete("units", unit.id)
     await gateway.delete("properties", prop.id)
     logger.info("Deleted property %s with %d units", prop.name, len(units))
