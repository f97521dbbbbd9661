"""Test dashboard stats aggregation."""
from datetime import date, timedelta
from decimal import Decimal

import pytest

from errors import DataAccessError
from schemas.rows import PaymentRow, TenantRow, UnitRow
from services.stats_service import compute_stats, load_dashboard_stats
from tests.conftest import TODAY, seed_portfolio, tenant_row


def make_tenant(tenant_id, status="active", move_in=date(2025, 1, 1), lease_end=None):
    return TenantRow(
        id=tenant_id,
        landlord_id="landlord-1",
        name=tenant_id,
        email=f"{tenant_id}@example.com",
        rent_amount=Decimal("1000"),
        status=status,
        move_in_date=move_in,
        lease_end_date=lease_end,
    )


def make_payment(payment_id, tenant_id, amount, payment_date, status="completed"):
    return PaymentRow(
        id=payment_id,
        user_id="landlord-1",
        tenant_id=tenant_id,
        amount=Decimal(str(amount)),
        payment_date=payment_date,
        status=status,
    )


def test_empty_portfolio_has_zero_rates():
    stats = compute_stats([], [], [], [], today=TODAY)
    assert stats.total_units == 0
    assert stats.occupancy_rate == 0
    assert stats.collection_rate == 0
    assert stats.expected_monthly_revenue == 0


def test_occupancy_and_expected_revenue():
    units = [
        UnitRow(id="u1", property_id="p1", unit_number="101", rent_amount=Decimal("1000"), is_available=False),
        UnitRow(id="u2", property_id="p1", unit_number="102", rent_amount=Decimal("1200"), is_available=False),
        UnitRow(id="u3", property_id="p1", unit_number="103", rent_amount=Decimal("900")),
        UnitRow(id="u4", property_id="p2", unit_number="201", rent_amount=Decimal("800")),
        UnitRow(id="u5", property_id="p2", unit_number="202", rent_amount=Decimal("850")),
    ]
    stats = compute_stats([], [], units, [], today=TODAY)
    assert stats.occupied_units == 2
    assert stats.vacant_units == 3
    assert stats.expected_monthly_revenue == Decimal("2200")
    assert stats.occupancy_rate == pytest.approx(40.0)


def test_collection_counts_completed_payments_this_month():
    tenants = [make_tenant("t1"), make_tenant("t2"), make_tenant("t3", status="inactive")]
    payments = [
        make_payment("p1", "t1", 1000, TODAY.replace(day=1)),
        make_payment("p2", "t2", 1000, TODAY.replace(day=2), status="pending"),
        make_payment("p3", "t2", 1000, date(2026, 9, 30)),
        make_payment("p4", "t3", 500, TODAY.replace(day=3)),
    ]
    stats = compute_stats(tenants, [], [], payments, today=TODAY)
    assert stats.active_tenants == 2
    assert stats.total_tenants == 3
    assert stats.collection_rate == pytest.approx(50.0)
    assert stats.overdue_payments == 1
    assert stats.collected_monthly_revenue == Decimal("1500")


def test_upcoming_windows_are_inclusive():
    tenants = [
        make_tenant("today", move_in=TODAY),
        make_tenant("edge", move_in=TODAY + timedelta(days=30)),
        make_tenant("late", move_in=TODAY + timedelta(days=31)),
        make_tenant("past", move_in=TODAY - timedelta(days=1), lease_end=TODAY + timedelta(days=10)),
        make_tenant("ended", lease_end=TODAY - timedelta(days=1)),
    ]
    stats = compute_stats(tenants, [], [], [], today=TODAY)
    assert stats.upcoming_move_ins == 2
    assert stats.upcoming_move_outs == 1

    narrow = compute_stats(tenants, [], [], [], today=TODAY, move_in_horizon_days=0, move_out_horizon_days=5)
    assert narrow.upcoming_move_ins == 1
    assert narrow.upcoming_move_outs == 0


def test_inputs_are_not_modified():
    tenants = [make_tenant("t1")]
    compute_stats(tenants, [], [], [], today=TODAY)
    assert tenants == [make_tenant("t1")]


@pytest.mark.asyncio
async def test_load_dashboard_stats_from_store(gateway):
    await seed_portfolio(gateway)
    stats = await load_dashboard_stats(gateway, today=TODAY)
    assert stats.total_properties == 2
    assert stats.total_units == 5
    assert stats.occupied_units == 2
    assert stats.expected_monthly_revenue == Decimal("2200")
    assert stats.occupancy_rate == pytest.approx(40.0)


@pytest.mark.asyncio
async def test_failed_read_counts_as_empty(gateway, monkeypatch):
    await gateway.insert("tenants", [tenant_row("Ana Lopez")])
    original_select = gateway.select

    async def select(table, filters=None, order_by=None):
        if table == "payments":
            raise DataAccessError("payments unavailable", table="payments")
        return await original_select(table, filters, order_by)

    monkeypatch.setattr(gateway, "select", select)

    stats = await load_dashboard_stats(gateway, today=TODAY)
    assert stats.total_tenants == 1
    assert stats.collected_monthly_revenue == 0
    assert stats.overdue_payments == 1
