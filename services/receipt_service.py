# services/receipt_service.py
"""
Rent Ledger - per tenant/month "paid" tracking and receipt flags.

For one landlord and one year the ledger answers "is tenant T marked paid
for month M?" and "is there proof of payment for month M?", and toggles
that state in the payment_receipts table.

Month convention:
- In memory, tracking records use a 0-indexed month (0 = January), the
  index the month grid works with.
- Persisted receipt rows use a 1-indexed month (1 = January).
- to_stored_month / to_month_index are the only places the two meet.

Writes are optimistic: the in-memory projection changes before the store
confirms, and is restored if the write fails.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from typing import Dict, Iterable, List, Optional, Tuple

from errors import DataAccessError, ValidationError
from schemas.receipt import LedgerCell, LedgerTenantRow, LegacyPaymentRecord, TrackedPayment
from schemas.rows import ReceiptRow, TenantRow
from services.gateway import PersistenceGateway

logger = logging.getLogger(__name__)

MONTHS_PER_YEAR = 12
RECEIPT_TABLE = "payment_receipts"
RECEIPT_CONFLICT_KEYS = ("user_id", "tenant_id", "year", "month")

# The month grid offers this many years either side of the current one
YEAR_WINDOW = 3


def to_stored_month(month_index: int) -> int:
     """0-indexed month (grid) -> 1-indexed month (receipt row)."""
     if not 0 <= month_index < MONTHS_PER_YEAR:
          raise ValidationError(f"Month index must be 0-11, got {month_index}")
     return month_index + 1


def to_month_index(month: int) -> int:
     """1-indexed month (receipt row) -> 0-indexed month (grid)."""
     if not 1 <= month <= MONTHS_PER_YEAR:
          raise ValidationError(f"Stored month must be 1-12, got {month}")
     return month - 1


def selectable_years(today: Optional[date] = None) -> List[int]:
     current = (today or date.today()).year
     return list(range(current - YEAR_WINDOW, current + YEAR_WINDOW + 1))


@dataclass
class YearLedger:
     """Snapshot returned by RentLedger.load_year."""
     year: int
     tracked_payments: List[TrackedPayment] = field(default_factory=list)
     receipts: List[ReceiptRow] = field(default_factory=list)


class RentLedger:
     """Paid/receipt grid for one landlord, one year at a time."""

     def __init__(self, gateway: PersistenceGateway, landlord_id: Optional[str] = None):
          self.gateway = gateway
          self.landlord_id = landlord_id or gateway.owner_id
          self.year: Optional[int] = None
          self._tenants: Dict[str, TenantRow] = {}
          # (tenant_id, month_index) -> tracking record
          self._tracked: Dict[Tuple[str, int], TrackedPayment] = {}
          # (tenant_id, stored month) -> receipt row
          self._receipts: Dict[Tuple[str, int], ReceiptRow] = {}
          self._locks: Dict[Tuple[str, int, int], asyncio.Lock] = {}

     # ------------------------------------------------------------------
     # Loading
     # ------------------------------------------------------------------

     async def load_year(self, year: int) -> YearLedger:
          """
          Load receipts for `year` and the landlord's tenants.

          Raises:
               DataAccessError: a read failed; the projection is left empty.
          """
          self.year = int(year)
          self._tenants = {}
          self._tracked = {}
          self._receipts = {}

          tenants, receipts = await asyncio.gather(
               self.gateway.select("tenants"),
               self.gateway.select(RECEIPT_TABLE, {"year": self.year}, order_by=["month"]),
               return_exceptions=True,
          )
          for result in (tenants, receipts):
               if isinstance(result, BaseException):
                    logger.error("Could not load rent ledger %s for %s: %s", self.year, self.landlord_id, result)
                    raise result

          self._tenants = {tenant.id: tenant for tenant in tenants}
          for row in receipts:
               self._apply_row(row)
          logger.debug("Loaded %d receipt rows for %s/%s", len(receipts), self.landlord_id, self.year)
          return self.snapshot()

     def snapshot(self) -> YearLedger:
          return YearLedger(
               year=self._require_loaded(),
               tracked_payments=sorted(self._tracked.values(), key=lambda t: (t.tenant_id, t.month_index)),
               receipts=sorted(self._receipts.values(), key=lambda r: (r.tenant_id, r.month)),
          )

     def _require_loaded(self) -> int:
          if self.year is None:
               raise RuntimeError("load_year() must be called before using the ledger")
          return self.year

     def _apply_row(self, row: ReceiptRow) -> None:
          month_index = to_month_index(row.month)
          self._receipts[(row.tenant_id, row.month)] = row
          self._tracked[(row.tenant_id, month_index)] = TrackedPayment(
               tenant_id=row.tenant_id,
               year=row.year,
               month_index=month_index,
               paid=True,
               amount=row.amount,
          )

     def _forget(self, tenant_id: str, month_index: int) -> None:
          self._tracked.pop((tenant_id, month_index), None)
          self._receipts.pop((tenant_id, to_stored_month(month_index)), None)

     def _restore(self, tenant_id: str, month_index: int, tracked, receipt) -> None:
          self._forget(tenant_id, month_index)
          if tracked is not None:
               self._tracked[(tenant_id, month_index)] = tracked
          if receipt is not None:
               self._receipts[(tenant_id, receipt.month)] = receipt

     def _lock_for(self, tenant_id: str, month_index: int) -> asyncio.Lock:
          key = (tenant_id, self._require_loaded(), month_index)
          lock = self._locks.get(key)
          if lock is None:
               lock = self._locks[key] = asyncio.Lock()
          return lock

     # ------------------------------------------------------------------
     # Queries
     # ------------------------------------------------------------------

     def is_paid(self, tenant_id: str, month_index: int) -> bool:
          to_stored_month(month_index)
          tracked = self._tracked.get((tenant_id, month_index))
          return bool(tracked and tracked.paid)

     def has_receipt(self, tenant_id: str, month_index: int) -> bool:
          receipt = self._receipts.get((tenant_id, to_stored_month(month_index)))
          return bool(receipt and receipt.has_receipt)

     def grid(self) -> List[LedgerTenantRow]:
          """One row per tenant (by name) with the twelve month cells."""
          self._require_loaded()
          rows = []
          for tenant in sorted(self._tenants.values(), key=lambda t: (t.name.lower(), t.id)):
               cells = [
                    LedgerCell(
                         month_index=month_index,
                         paid=self.is_paid(tenant.id, month_index),
                         has_receipt=self.has_receipt(tenant.id, month_index),
                    )
                    for month_index in range(MONTHS_PER_YEAR)
               ]
               rows.append(LedgerTenantRow(
                    tenant_id=tenant.id,
                    tenant_name=tenant.name,
                    rent_amount=tenant.rent_amount,
                    months=cells,
               ))
          return rows

     # ------------------------------------------------------------------
     # Mutations
     # ------------------------------------------------------------------

     async def set_paid(self, tenant_id: str, month_index: int, paid: bool) -> bool:
          """
          Mark a tenant/month as paid (upsert its receipt row) or unpaid (delete it).

          Returns False without touching the store when the tenant is unknown.

          Raises:
               ValidationError: month_index outside 0-11.
               DataAccessError: the write failed; local state was rolled back.
          """
          year = self._require_loaded()
          month = to_stored_month(month_index)
          tenant = self._tenants.get(tenant_id)
          if tenant is None:
               logger.debug("Ignoring paid toggle for unknown tenant %s", tenant_id)
               return False

          async with self._lock_for(tenant_id, month_index):
               previous_tracked = self._tracked.get((tenant_id, month_index))
               previous_receipt = self._receipts.get((tenant_id, month))
               try:
                    if paid:
                         row = {
                              "user_id": self.landlord_id,
                              "tenant_id": tenant_id,
                              "year": year,
                              "month": month,
                              "amount": tenant.rent_amount,
                              "paid_at": datetime.now(timezone.utc),
                         }
                         # Re-marking a paid month keeps its stored receipt flag
                         if previous_receipt is None:
                              row["has_receipt"] = True
                         optimistic = dict(row, has_receipt=previous_receipt.has_receipt if previous_receipt else True)
                         self._apply_row(ReceiptRow(id=previous_receipt.id if previous_receipt else "", **optimistic))
                         stored = await self.gateway.upsert(RECEIPT_TABLE, [row], RECEIPT_CONFLICT_KEYS)
                         self._apply_row(stored[0])
                    else:
                         self._forget(tenant_id, month_index)
                         await self._delete_key(tenant_id, year, month, previous_receipt)
               except DataAccessError:
                    self._restore(tenant_id, month_index, previous_tracked, previous_receipt)
                    logger.warning(
                         "Rolled back paid=%s for tenant %s %s-%02d", paid, tenant_id, year, month
                    )
                    raise
          return True

     async def _delete_key(self, tenant_id: str, year: int, month: int, known: Optional[ReceiptRow]) -> None:
          if known is not None and known.id:
               await self.gateway.delete(RECEIPT_TABLE, known.id)
               return
          # Not in the projection; make sure the store has no row either
          rows = await self.gateway.select(RECEIPT_TABLE, {"tenant_id": tenant_id, "year": year, "month": month})
          for row in rows:
               await self.gateway.delete(RECEIPT_TABLE, row.id)

     async def set_receipt(self, tenant_id: str, month_index: int, has_receipt: bool) -> bool:
          """
          Flag whether proof of payment is on file for an already-paid month.

          Returns False when the tenant is unknown or the month is not marked paid.
          """
          self._require_loaded()
          month = to_stored_month(month_index)
          if tenant_id not in self._tenants:
               return False

          async with self._lock_for(tenant_id, month_index):
               previous = self._receipts.get((tenant_id, month))
               if previous is None or not previous.id:
                    return False
               self._receipts[(tenant_id, month)] = previous.model_copy(update={"has_receipt": has_receipt})
               try:
                    stored = await self.gateway.update(RECEIPT_TABLE, previous.id, {"has_receipt": has_receipt})
               except DataAccessError:
                    self._receipts[(tenant_id, month)] = previous
                    logger.warning("Rolled back receipt flag for tenant %s %s-%02d", tenant_id, self.year, month)
                    raise
               self._apply_row(stored)
          return True

     async def migrate_legacy_records(self, year: int, records: Iterable[LegacyPaymentRecord]) -> int:
          """
          One-time import of the legacy payment_records_{userId}_{year} overlay.

          Only paid entries for `year` whose tenant still exists and whose month
          is not already tracked are written. The legacy source is left untouched.
          Legacy entries carry no proof, so they arrive with has_receipt=False.
          """
          if self.year != year:
               await self.load_year(year)

          rows = {}
          skipped = 0
          for record in records:
               if not record.paid or record.year != year:
                    continue
               tenant = self._tenants.get(record.tenantId)
               if tenant is None:
                    skipped += 1
                    continue
               if (record.tenantId, record.month) in self._tracked:
                    continue
               paid_at = (
                    datetime.combine(record.paymentDate, time.min, tzinfo=timezone.utc)
                    if record.paymentDate else None
               )
               rows[(record.tenantId, record.month)] = {
                    "user_id": self.landlord_id,
                    "tenant_id": record.tenantId,
                    "year": year,
                    "month": to_stored_month(record.month),
                    "has_receipt": False,
                    "amount": record.amount if record.amount is not None else tenant.rent_amount,
                    "paid_at": paid_at,
               }

          if skipped:
               logger.warning("Skipped %d legacy records for deleted tenants", skipped)
          if not rows:
               logger.info("No legacy payment records to migrate for %s/%s", self.landlord_id, year)
               return 0

          stored = await self.gateway.upsert(RECEIPT_TABLE, list(rows.values()), RECEIPT_CONFLICT_KEYS)
          for row in stored:
               self._apply_row(row)
          logger.info("Migrated %d legacy payment records for %s/%s", len(stored), self.landlord_id, year)
          return len(stored)


async def remove_tenant_receipts(gateway: PersistenceGateway, tenant_id: str) -> int:
     """Delete every receipt row of a tenant, across all years."""
     rows = await gateway.select(RECEIPT_TABLE, {"tenant_id": tenant_id})
     for row in rows:
          await gateway.delete(RECEIPT_TABLE, row.id)
     return len(rows)


async def cleanup_orphaned_receipts(gateway: PersistenceGateway) -> int:
     """Delete receipt rows that belong to tenants which no longer exist."""
     tenants, receipts = await asyncio.gather(
          gateway.select("tenants"),
          gateway.select(RECEIPT_TABLE),
     )
     tenant_ids = {tenant.id for tenant in tenants}
     orphaned = [row for row in receipts if row.tenant_id not in tenant_ids]
     for row in orphaned:
          await gateway.delete(RECEIPT_TABLE, row.id)
     if orphaned:
          logger.info("Cleaned up %d orphaned receipt rows for %s", len(orphaned), gateway.owner_id)
     return len(orphaned)


def create_rent_ledger(gateway: PersistenceGateway) -> RentLedger:
     """Factory used by the composition root and request dependencies."""
     return RentLedger(gateway)
