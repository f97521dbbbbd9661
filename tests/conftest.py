"""
Test fixtures for the RentaFlux backend tests.

Each test gets a fresh SQLite database in a temporary directory, and the app's
session factory dependency is overridden so tests never touch rentaflux.db.
"""
import os
from datetime import date
from decimal import Decimal

os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import pytest
from httpx import AsyncClient, ASGITransport
from jose import jwt

from config import JWT_ALGORITHM, JWT_SECRET
from database import build_engine, build_session_factory, get_session_factory, init_db
from main import app
from services.gateway import SqlAlchemyGateway


# ── Seed data ──────────────────────────────────────────────────────────

LANDLORD_ID = "landlord-1"
OTHER_LANDLORD_ID = "landlord-2"
TODAY = date(2026, 10, 19)


def tenant_row(name, unit_number=None, rent=1000, **extra):
    """Insert payload for a tenant; defaults to an active tenant who moved in last year."""
    row = {
        "name": name,
        "email": f"{name.lower().replace(' ', '.')}@example.com",
        "unit_number": unit_number,
        "rent_amount": Decimal(str(rent)),
        "deposit_amount": Decimal("0"),
        "status": "active",
        "move_in_date": date(2025, 1, 1),
    }
    row.update(extra)
    return row


async def seed_portfolio(gateway):
    """
    Two properties with five units; units 101 and 102 are occupied at 1000
    and 1200, the other three are vacant.
    """
    properties = await gateway.insert("properties", [
        {"name": "Calle Mayor 1", "address": "Calle Mayor 1, Madrid", "total_units": 3},
        {"name": "Gran Via 20", "address": "Gran Via 20, Madrid", "total_units": 2},
    ])
    first, second = properties
    tenants = await gateway.insert("tenants", [
        tenant_row("Ana Lopez", "101", 1000),
        tenant_row("Bruno Diaz", "102", 1200),
    ])
    ana, bruno = tenants
    units = await gateway.insert("units", [
        {"property_id": first.id, "unit_number": "101", "rent_amount": Decimal("1000"),
         "tenant_id": ana.id, "is_available": False},
        {"property_id": first.id, "unit_number": "102", "rent_amount": Decimal("1200"),
         "tenant_id": bruno.id, "is_available": False},
        {"property_id": first.id, "unit_number": "103", "rent_amount": Decimal("900")},
        {"property_id": second.id, "unit_number": "201", "rent_amount": Decimal("800")},
        {"property_id": second.id, "unit_number": "202", "rent_amount": Decimal("850")},
    ])
    return {"properties": properties, "tenants": tenants, "units": units}


# ── Fixtures ───────────────────────────────────────────────────────────

@pytest.fixture
async def engine(tmp_path):
    """Async engine on a throwaway SQLite file with every table created."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'rentaflux_test.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def gateway(session_factory):
    """Gateway scoped to the test landlord."""
    return SqlAlchemyGateway(session_factory, LANDLORD_ID)


@pytest.fixture
def other_gateway(session_factory):
    """Gateway scoped to a second landlord sharing the same database."""
    return SqlAlchemyGateway(session_factory, OTHER_LANDLORD_ID)


def make_token(user_id=LANDLORD_ID):
    return jwt.encode({"id": user_id}, JWT_SECRET, algorithm=JWT_ALGORITHM)


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
async def client(session_factory):
    """Async test client for the FastAPI app."""
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
