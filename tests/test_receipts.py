"""Test the rent ledger: paid toggles, receipt flags, legacy migration and cleanup."""
import asyncio
from datetime import date
from decimal import Decimal

import pytest

from errors import DataAccessError, ValidationError
from schemas.receipt import LegacyPaymentRecord
from services.receipt_service import (
    RentLedger,
    cleanup_orphaned_receipts,
    create_rent_ledger,
    remove_tenant_receipts,
    selectable_years,
    to_month_index,
    to_stored_month,
)
from tests.conftest import seed_portfolio

YEAR = 2026


class FailingWrites:
    """Wraps a gateway; reads pass through, every write raises DataAccessError."""

    def __init__(self, gateway):
        self._gateway = gateway
        self.owner_id = gateway.owner_id

    async def select(self, table, filters=None, order_by=None):
        return await self._gateway.select(table, filters, order_by)

    async def _fail(self, table, *args, **kwargs):
        raise DataAccessError("store offline", table=table)

    insert = update = delete = upsert = _fail


@pytest.fixture
async def seeded(gateway):
    return await seed_portfolio(gateway)


@pytest.fixture
async def ledger(gateway, seeded):
    ledger = create_rent_ledger(gateway)
    await ledger.load_year(YEAR)
    return ledger


def test_month_conversion_round_trip():
    for month_index in range(12):
        assert to_month_index(to_stored_month(month_index)) == month_index
    assert to_stored_month(0) == 1
    assert to_stored_month(11) == 12


@pytest.mark.parametrize("month_index", [-1, 12])
def test_stored_month_rejects_out_of_range(month_index):
    with pytest.raises(ValidationError):
        to_stored_month(month_index)


@pytest.mark.parametrize("month", [0, 13])
def test_month_index_rejects_out_of_range(month):
    with pytest.raises(ValidationError):
        to_month_index(month)


def test_selectable_years_window():
    assert selectable_years(date(2026, 10, 19)) == list(range(2023, 2030))


@pytest.mark.asyncio
async def test_set_paid_writes_one_row_with_stored_month(ledger, gateway, seeded):
    ana = seeded["tenants"][0]

    assert await ledger.set_paid(ana.id, 0, True) is True
    assert ledger.is_paid(ana.id, 0)
    assert ledger.has_receipt(ana.id, 0)

    rows = await gateway.select("payment_receipts")
    assert len(rows) == 1
    assert rows[0].month == 1
    assert rows[0].year == YEAR
    assert rows[0].amount == Decimal("1000")


@pytest.mark.asyncio
async def test_set_paid_is_idempotent(ledger, gateway, seeded):
    ana = seeded["tenants"][0]
    await ledger.set_paid(ana.id, 4, True)
    await ledger.set_paid(ana.id, 4, True)
    assert len(await gateway.select("payment_receipts")) == 1


@pytest.mark.asyncio
async def test_concurrent_toggles_for_same_month_leave_one_row(ledger, gateway, seeded):
    ana = seeded["tenants"][0]
    await asyncio.gather(*(ledger.set_paid(ana.id, 2, True) for _ in range(3)))
    assert len(await gateway.select("payment_receipts")) == 1


@pytest.mark.asyncio
async def test_set_unpaid_deletes_row(ledger, gateway, seeded):
    ana = seeded["tenants"][0]
    await ledger.set_paid(ana.id, 5, True)
    assert await ledger.set_paid(ana.id, 5, False) is True
    assert not ledger.is_paid(ana.id, 5)
    assert await gateway.select("payment_receipts") == []


@pytest.mark.asyncio
async def test_set_unpaid_without_row_is_noop(ledger, gateway, seeded):
    ana = seeded["tenants"][0]
    assert await ledger.set_paid(ana.id, 7, False) is True
    assert not ledger.is_paid(ana.id, 7)
    assert await gateway.select("payment_receipts") == []


@pytest.mark.asyncio
async def test_unknown_tenant_is_ignored(ledger, gateway):
    assert await ledger.set_paid("no-such-tenant", 0, True) is False
    assert await gateway.select("payment_receipts") == []


@pytest.mark.asyncio
async def test_invalid_month_is_rejected(ledger, seeded):
    with pytest.raises(ValidationError):
        await ledger.set_paid(seeded["tenants"][0].id, 12, True)


@pytest.mark.asyncio
async def test_failed_write_rolls_back_projection(gateway, seeded):
    ana = seeded["tenants"][0]
    ledger = RentLedger(FailingWrites(gateway))
    await ledger.load_year(YEAR)

    with pytest.raises(DataAccessError):
        await ledger.set_paid(ana.id, 3, True)
    assert not ledger.is_paid(ana.id, 3)
    assert not ledger.has_receipt(ana.id, 3)


@pytest.mark.asyncio
async def test_failed_unpaid_restores_paid_state(gateway, seeded):
    ana = seeded["tenants"][0]
    working = create_rent_ledger(gateway)
    await working.load_year(YEAR)
    await working.set_paid(ana.id, 3, True)

    ledger = RentLedger(FailingWrites(gateway))
    await ledger.load_year(YEAR)
    with pytest.raises(DataAccessError):
        await ledger.set_paid(ana.id, 3, False)
    assert ledger.is_paid(ana.id, 3)


@pytest.mark.asyncio
async def test_load_year_reflects_stored_rows(gateway, seeded):
    bruno = seeded["tenants"][1]
    writer = create_rent_ledger(gateway)
    await writer.load_year(YEAR)
    await writer.set_paid(bruno.id, 11, True)

    reader = create_rent_ledger(gateway)
    snapshot = await reader.load_year(YEAR)
    assert [(t.tenant_id, t.month_index) for t in snapshot.tracked_payments] == [(bruno.id, 11)]
    assert snapshot.receipts[0].month == 12

    other_year = await reader.load_year(YEAR - 1)
    assert other_year.tracked_payments == []


@pytest.mark.asyncio
async def test_set_receipt_requires_paid_month(ledger, gateway, seeded):
    ana = seeded["tenants"][0]
    assert await ledger.set_receipt(ana.id, 1, False) is False

    await ledger.set_paid(ana.id, 1, True)
    assert await ledger.set_receipt(ana.id, 1, False) is True
    assert ledger.is_paid(ana.id, 1)
    assert not ledger.has_receipt(ana.id, 1)

    rows = await gateway.select("payment_receipts")
    assert rows[0].has_receipt is False


@pytest.mark.asyncio
async def test_grid_lists_tenants_by_name(ledger, seeded):
    ana = seeded["tenants"][0]
    await ledger.set_paid(ana.id, 0, True)

    grid = ledger.grid()
    assert [row.tenant_name for row in grid] == ["Ana Lopez", "Bruno Diaz"]
    assert len(grid[0].months) == 12
    assert grid[0].months[0].paid is True
    assert grid[1].months[0].paid is False


@pytest.mark.asyncio
async def test_migrate_legacy_records(ledger, gateway, seeded):
    ana, bruno = seeded["tenants"]
    await ledger.set_paid(ana.id, 0, True)

    records = [
        LegacyPaymentRecord(tenantId=ana.id, year=YEAR, month=0, paid=True),
        LegacyPaymentRecord(tenantId=ana.id, year=YEAR, month=1, paid=True, amount=Decimal("990")),
        LegacyPaymentRecord(tenantId=ana.id, year=YEAR, month=1, paid=True, amount=Decimal("990")),
        LegacyPaymentRecord(tenantId=bruno.id, year=YEAR, month=2, paid=False),
        LegacyPaymentRecord(tenantId=bruno.id, year=YEAR - 1, month=2, paid=True),
        LegacyPaymentRecord(tenantId="deleted-tenant", year=YEAR, month=3, paid=True),
    ]
    assert await ledger.migrate_legacy_records(YEAR, records) == 1

    rows = {row.month: row for row in await gateway.select("payment_receipts")}
    assert set(rows) == {1, 2}
    assert rows[1].has_receipt is True
    assert rows[2].has_receipt is False
    assert rows[2].amount == Decimal("990")
    assert ledger.is_paid(ana.id, 1)

    assert await ledger.migrate_legacy_records(YEAR, records) == 0


@pytest.mark.asyncio
async def test_remove_and_cleanup_receipts(ledger, gateway, seeded):
    ana, bruno = seeded["tenants"]
    await ledger.set_paid(ana.id, 0, True)
    await ledger.set_paid(ana.id, 1, True)
    await ledger.set_paid(bruno.id, 0, True)

    assert await remove_tenant_receipts(gateway, ana.id) == 2
    assert len(await gateway.select("payment_receipts")) == 1

    await gateway.delete("tenants", bruno.id)
    assert await cleanup_orphaned_receipts(gateway) == 1
    assert await gateway.select("payment_receipts") == []


@pytest.mark.asyncio
async def test_remarking_paid_month_keeps_receipt_flag(ledger, gateway, seeded):
    ana = seeded["tenants"][0]
    await ledger.set_paid(ana.id, 6, True)
    await ledger.set_receipt(ana.id, 6, False)

    await ledger.set_paid(ana.id, 6, True)
    assert ledger.is_paid(ana.id, 6)
    assert not ledger.has_receipt(ana.id, 6)

    reloaded = create_rent_ledger(gateway)
    await reloaded.load_year(YEAR)
    assert not reloaded.has_receipt(ana.id, 6)


@pytest.mark.parametrize("month_index", range(12))
@pytest.mark.asyncio
async def test_stored_rows_map_to_grid_month(gateway, seeded, month_index):
    ana = seeded["tenants"][0]
    await gateway.insert("payment_receipts", [
        {"tenant_id": ana.id, "year": YEAR, "month": month_index + 1, "has_receipt": True},
    ])

    ledger = create_rent_ledger(gateway)
    await ledger.load_year(YEAR)
    assert ledger.is_paid(ana.id, month_index)
    assert ledger.has_receipt(ana.id, month_index)
    others = [m for m in range(12) if m != month_index]
    assert not any(ledger.is_paid(ana.id, m) for m in others)
