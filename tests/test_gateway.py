"""Test the owner-scoped persistence gateway."""
from decimal import Decimal

import pytest

from errors import DataAccessError, NotFoundError
from schemas.rows import ReceiptRow, TenantRow, UnitRow
from tests.conftest import LANDLORD_ID, seed_portfolio, tenant_row


@pytest.mark.asyncio
async def test_insert_stamps_owner_and_returns_typed_rows(gateway):
    created = await gateway.insert("tenants", [tenant_row("Ana Lopez", "101", 950)])
    assert len(created) == 1
    tenant = created[0]
    assert isinstance(tenant, TenantRow)
    assert tenant.landlord_id == LANDLORD_ID
    assert tenant.rent_amount == Decimal("950")
    assert tenant.id


@pytest.mark.asyncio
async def test_insert_ignores_caller_supplied_owner(gateway):
    created = await gateway.insert("tenants", [tenant_row("Ana Lopez", landlord_id="someone-else")])
    assert created[0].landlord_id == LANDLORD_ID


@pytest.mark.asyncio
async def test_select_is_scoped_to_owner(gateway, other_gateway):
    await seed_portfolio(gateway)
    await other_gateway.insert("tenants", [tenant_row("Carla Ruiz", "101")])

    mine = await gateway.select("tenants")
    theirs = await other_gateway.select("tenants")
    assert {t.name for t in mine} == {"Ana Lopez", "Bruno Diaz"}
    assert [t.name for t in theirs] == ["Carla Ruiz"]


@pytest.mark.asyncio
async def test_units_are_scoped_through_their_property(gateway, other_gateway):
    await seed_portfolio(gateway)
    assert len(await gateway.select("units")) == 5
    assert await other_gateway.select("units") == []


@pytest.mark.asyncio
async def test_unit_insert_requires_owned_property(gateway, other_gateway):
    seeded = await seed_portfolio(gateway)
    with pytest.raises(NotFoundError):
        await other_gateway.insert("units", [
            {"property_id": seeded["properties"][0].id, "unit_number": "999"},
        ])


@pytest.mark.asyncio
async def test_select_filters_and_order(gateway):
    await seed_portfolio(gateway)
    vacant = await gateway.select("units", {"is_available": True}, order_by=["unit_number"])
    assert [u.unit_number for u in vacant] == ["103", "201", "202"]
    assert all(isinstance(u, UnitRow) for u in vacant)

    some = await gateway.select("units", {"unit_number": ["101", "202"]})
    assert {u.unit_number for u in some} == {"101", "202"}

    unassigned = await gateway.select("units", {"tenant_id": None})
    assert len(unassigned) == 3


@pytest.mark.asyncio
async def test_unknown_table_or_column_is_data_access_error(gateway):
    with pytest.raises(DataAccessError):
        await gateway.select("leases")
    with pytest.raises(DataAccessError):
        await gateway.select("tenants", {"favourite_colour": "blue"})


@pytest.mark.asyncio
async def test_update_returns_row_and_rejects_foreign_ids(gateway, other_gateway):
    seeded = await seed_portfolio(gateway)
    ana = seeded["tenants"][0]

    updated = await gateway.update("tenants", ana.id, {"rent_amount": Decimal("1050")})
    assert updated.rent_amount == Decimal("1050")

    with pytest.raises(NotFoundError):
        await other_gateway.update("tenants", ana.id, {"rent_amount": Decimal("1")})
    with pytest.raises(NotFoundError):
        await gateway.update("tenants", "missing-id", {"rent_amount": Decimal("1")})


@pytest.mark.asyncio
async def test_update_refuses_protected_columns(gateway):
    seeded = await seed_portfolio(gateway)
    with pytest.raises(DataAccessError):
        await gateway.update("tenants", seeded["tenants"][0].id, {"landlord_id": "thief"})


@pytest.mark.asyncio
async def test_delete_is_noop_for_missing_rows(gateway):
    seeded = await seed_portfolio(gateway)
    await gateway.delete("tenants", "missing-id")
    await gateway.delete("tenants", seeded["tenants"][0].id)
    assert len(await gateway.select("tenants")) == 1


@pytest.mark.asyncio
async def test_upsert_updates_on_conflict_key(gateway):
    keys = ("user_id", "tenant_id", "year", "month")
    row = {"tenant_id": "t-1", "year": 2026, "month": 3, "has_receipt": True, "amount": Decimal("900")}

    first = await gateway.upsert("payment_receipts", [row], keys)
    second = await gateway.upsert("payment_receipts", [dict(row, has_receipt=False)], keys)

    assert isinstance(first[0], ReceiptRow)
    assert first[0].id == second[0].id
    assert second[0].has_receipt is False
    assert len(await gateway.select("payment_receipts")) == 1


@pytest.mark.asyncio
async def test_upsert_with_mixed_columns_keeps_unsupplied_values(gateway):
    keys = ("user_id", "tenant_id", "year", "month")
    await gateway.upsert("payment_receipts", [
        {"tenant_id": "ana", "year": 2026, "month": 1, "amount": Decimal("5")},
        {"tenant_id": "bruno", "year": 2026, "month": 1, "amount": Decimal("5")},
    ], keys)

    await gateway.upsert("payment_receipts", [
        {"tenant_id": "bruno", "year": 2026, "month": 1, "amount": Decimal("7")},
        {"tenant_id": "ana", "year": 2026, "month": 1, "has_receipt": False},
    ], keys)

    rows = {row.tenant_id: row for row in await gateway.select("payment_receipts")}
    assert rows["ana"].amount == Decimal("5")
    assert rows["ana"].has_receipt is False
    assert rows["bruno"].amount == Decimal("7")


@pytest.mark.asyncio
async def test_upsert_requires_conflict_keys_on_every_row(gateway):
    with pytest.raises(DataAccessError):
        await gateway.upsert(
            "payment_receipts",
            [{"tenant_id": "ana", "year": 2026, "has_receipt": True}],
            ("user_id", "tenant_id", "year", "month"),
        )


@pytest.mark.asyncio
async def test_unit_cannot_move_to_foreign_property(gateway, other_gateway):
    seeded = await seed_portfolio(gateway)
    [foreign] = await other_gateway.insert("properties", [{"name": "Elsewhere", "address": "Somewhere 1"}])
    unit = seeded["units"][2]

    with pytest.raises(NotFoundError):
        await gateway.update("units", unit.id, {"property_id": foreign.id})

    assert (await gateway.select("units", {"id": unit.id}))[0].property_id == unit.property_id
    assert await other_gateway.select("units") == []

    moved = await gateway.update("units", unit.id, {"property_id": seeded["properties"][1].id})
    assert moved.property_id == seeded["properties"][1].id
