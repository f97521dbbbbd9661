# services/consistency_service.py
"""
Consistency Checker - detects drift between tenant and unit records.

A scan loads the landlord's tenants and units, runs four detectors and
returns the findings ordered by severity (high, medium, low). The sort is
stable, so ties keep detector order and then detection order.

Detectors are pure functions of (tenants, units). A failed read or a
failing detector only removes that detector's findings; a scan never raises.
Rent mismatches can be auto-fixed with a single field update.
"""
import asyncio
import logging
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Sequence

from errors import DataAccessError, NotFoundError, ValidationError
from schemas.inconsistency import (
     AffectedEntities,
     DataInconsistency,
     FixAction,
     InconsistencyType,
     Severity,
     SuggestedFix,
)
from schemas.rows import TenantRow, UnitRow
from services.gateway import PersistenceGateway
from services.validation import validate_rent_amount

logger = logging.getLogger(__name__)

# Differences up to this amount are treated as rounding noise
RENT_TOLERANCE = Decimal("1")
HIGH_RENT_DIFFERENCE = Decimal("100")
MEDIUM_RENT_DIFFERENCE = Decimal("50")


def _money(value: Decimal) -> str:
     return f"€{value:.2f}"


def _units_by_number(units: Sequence[UnitRow]) -> Dict[str, UnitRow]:
     # First unit wins when two properties share a unit number
     index: Dict[str, UnitRow] = {}
     for unit in units:
          index.setdefault(unit.unit_number, unit)
     return index


def rent_mismatch_severity(difference: Decimal) -> Severity:
     if difference > HIGH_RENT_DIFFERENCE:
          return Severity.HIGH
     if difference > MEDIUM_RENT_DIFFERENCE:
          return Severity.MEDIUM
     return Severity.LOW


def check_rent_mismatches(tenants: Sequence[TenantRow], units: Sequence[UnitRow]) -> List[DataInconsistency]:
     findings = []
     units_by_number = _units_by_number(units)
     for tenant in tenants:
          if not tenant.has_unit:
               continue
          unit = units_by_number.get(tenant.unit_number)
          if unit is None:
               continue
          tenant_rent = tenant.rent_amount
          unit_rent = unit.rent_amount
          difference = abs(tenant_rent - unit_rent)
          if difference <= RENT_TOLERANCE:
               continue

          # The higher figure is taken as the authoritative one
          if tenant_rent > unit_rent:
               fix = SuggestedFix(
                    action=FixAction.UPDATE_UNIT_RENT,
                    description=f"Update unit {unit.unit_number} rent to {_money(tenant_rent)}",
                    auto_fixable=True,
               )
          else:
               fix = SuggestedFix(
                    action=FixAction.UPDATE_TENANT_RENT,
                    description=f"Update {tenant.name}'s rent to {_money(unit_rent)}",
                    auto_fixable=True,
               )
          findings.append(DataInconsistency(
               id=f"rent_mismatch_{tenant.id}_{unit.id}",
               type=InconsistencyType.RENT_MISMATCH,
               severity=rent_mismatch_severity(difference),
               title="Rent mismatch",
               description=(
                    f"{tenant.name} ({_money(tenant_rent)}) vs unit {unit.unit_number} ({_money(unit_rent)})"
               ),
               affected_entities=AffectedEntities(
                    tenant={"id": tenant.id, "name": tenant.name, "rent": tenant_rent, "unit": tenant.unit_number},
                    unit={"id": unit.id, "number": unit.unit_number, "rent": unit_rent, "property_id": unit.property_id},
               ),
               suggested_fix=fix,
          ))
     return findings


def check_unit_assignments(tenants: Sequence[TenantRow], units: Sequence[UnitRow]) -> List[DataInconsistency]:
     findings = []
     units_by_number = _units_by_number(units)
     for tenant in tenants:
          if not tenant.has_unit or tenant.unit_number in units_by_number:
               continue
          findings.append(DataInconsistency(
               id=f"missing_unit_{tenant.id}",
               type=InconsistencyType.UNIT_ASSIGNMENT,
               severity=Severity.MEDIUM,
               title="Unit not found",
               description=f"{tenant.name} is assigned to a unit that does not exist: {tenant.unit_number}",
               affected_entities=AffectedEntities(
                    tenant={"id": tenant.id, "name": tenant.name, "unit": tenant.unit_number},
               ),
               suggested_fix=SuggestedFix(
                    action=FixAction.FIX_UNIT_ASSIGNMENT,
                    description="Correct the tenant's unit or create the missing unit",
               ),
          ))
     return findings


def check_missing_data(tenants: Sequence[TenantRow], units: Sequence[UnitRow] = ()) -> List[DataInconsistency]:
     findings = []
     for tenant in tenants:
          if tenant.rent_amount <= 0:
               findings.append(DataInconsistency(
                    id=f"missing_rent_{tenant.id}",
                    type=InconsistencyType.MISSING_DATA,
                    severity=Severity.MEDIUM,
                    title="Rent not set",
                    description=f"{tenant.name} has no rent amount",
                    affected_entities=AffectedEntities(
                         tenant={"id": tenant.id, "name": tenant.name, "rent": tenant.rent_amount},
                    ),
                    suggested_fix=SuggestedFix(
                         action=FixAction.SET_RENT_AMOUNT,
                         description="Set a rent amount for the tenant",
                    ),
               ))
          if not tenant.has_unit:
               findings.append(DataInconsistency(
                    id=f"missing_unit_assignment_{tenant.id}",
                    type=InconsistencyType.MISSING_DATA,
                    severity=Severity.LOW,
                    title="No unit assigned",
                    description=f"{tenant.name} has no unit assigned",
                    affected_entities=AffectedEntities(
                         tenant={"id": tenant.id, "name": tenant.name, "unit": tenant.unit_number},
                    ),
                    suggested_fix=SuggestedFix(
                         action=FixAction.ASSIGN_UNIT,
                         description="Assign a unit to the tenant",
                    ),
               ))
     return findings


def check_duplicate_assignments(
     tenants: Sequence[TenantRow], units: Sequence[UnitRow] = ()
) -> List[DataInconsistency]:
     findings = []
     assignments: Dict[str, List[TenantRow]] = {}
     for tenant in tenants:
          if tenant.has_unit:
               assignments.setdefault(tenant.unit_number, []).append(tenant)

     for unit_number, assigned in assignments.items():
          if len(assigned) < 2:
               continue
          findings.append(DataInconsistency(
               id=f"duplicate_assignment_{unit_number}",
               type=InconsistencyType.DUPLICATE_ASSIGNMENT,
               severity=Severity.HIGH,
               title="Duplicate assignment",
               description=f"Unit {unit_number} is assigned to {len(assigned)} tenants",
               affected_entities=AffectedEntities(
                    unit={"number": unit_number},
                    tenants=[{"id": t.id, "name": t.name} for t in assigned],
               ),
               suggested_fix=SuggestedFix(
                    action=FixAction.RESOLVE_DUPLICATE_ASSIGNMENT,
                    description="Resolve which tenant occupies the unit",
               ),
          ))
     return findings


def sort_by_severity(findings: Sequence[DataInconsistency]) -> List[DataInconsistency]:
     return sorted(findings, key=lambda finding: finding.severity.rank, reverse=True)


Detector = Callable[[Sequence[TenantRow], Sequence[UnitRow]], List[DataInconsistency]]

# (name, detector, needs unit records)
DETECTORS: List[tuple] = [
     ("rent_mismatch", check_rent_mismatches, True),
     ("unit_assignment", check_unit_assignments, True),
     ("missing_data", check_missing_data, False),
     ("duplicate_assignment", check_duplicate_assignments, False),
]


class ConsistencyChecker:
     """Scans one landlord's tenants and units; holds no cache between scans."""

     def __init__(self, gateway: PersistenceGateway, detectors: Optional[List[tuple]] = None):
          self.gateway = gateway
          self.detectors = detectors if detectors is not None else DETECTORS

     async def _load(self):
          tenants, units = await asyncio.gather(
               self.gateway.select("tenants"),
               self.gateway.select("units"),
               return_exceptions=True,
          )
          if isinstance(tenants, BaseException):
               logger.warning("Consistency scan could not read tenants: %s", tenants)
               tenants = None
          if isinstance(units, BaseException):
               logger.warning("Consistency scan could not read units: %s", units)
               units = None
          return tenants, units

     async def check_all_inconsistencies(self) -> List[DataInconsistency]:
          """Run every detector and return the findings, most severe first."""
          findings: List[DataInconsistency] = []
          try:
               tenants, units = await self._load()
          except Exception:
               logger.exception("Consistency scan failed to load data for %s", self.gateway.owner_id)
               return findings

          for name, detector, needs_units in self.detectors:
               # Cancellation point between detectors
               await asyncio.sleep(0)
               if tenants is None or (needs_units and units is None):
                    logger.info("Skipping %s detector: input data unavailable", name)
                    continue
               try:
                    findings.extend(detector(tenants, units if units is not None else []))
               except Exception:
                    logger.exception("Detector %s failed", name)

          logger.debug("Consistency scan for %s found %d issues", self.gateway.owner_id, len(findings))
          return sort_by_severity(findings)

     async def auto_fix_inconsistency(self, inconsistency: DataInconsistency) -> bool:
          """
          Apply the suggested fix with a single field update.

          Returns True iff the write succeeded. Non auto-fixable findings,
          invalid amounts, missing records and store failures return False.
          The caller re-scans afterwards.
          """
          fix = inconsistency.suggested_fix
          if not fix.auto_fixable:
               return False

          entities = inconsistency.affected_entities
          try:
               if fix.action == FixAction.UPDATE_UNIT_RENT:
                    table, record_id, rent = "units", entities.unit["id"], entities.tenant["rent"]
               elif fix.action == FixAction.UPDATE_TENANT_RENT:
                    table, record_id, rent = "tenants", entities.tenant["id"], entities.unit["rent"]
               else:
                    return False
          except (KeyError, TypeError):
               logger.warning("Inconsistency %s lacks the entities needed for %s", inconsistency.id, fix.action.value)
               return False

          try:
               rent = validate_rent_amount(rent)
               await self.gateway.update(table, record_id, {"rent_amount": rent})
          except ValidationError as e:
               logger.warning("Refusing auto-fix %s: %s", inconsistency.id, e)
               return False
          except NotFoundError as e:
               logger.warning("Auto-fix %s target missing: %s", inconsistency.id, e)
               return False
          except DataAccessError as e:
               logger.error("Auto-fix %s failed: %s", inconsistency.id, e)
               return False

          logger.info("Applied %s for %s (%s=%s)", fix.action.value, inconsistency.id, record_id, rent)
          return True


def create_consistency_checker(gateway: PersistenceGateway) -> ConsistencyChecker:
     """Factory used by the composition root and request dependencies."""
     return ConsistencyChecker(gateway)
