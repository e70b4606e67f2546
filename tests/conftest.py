"""Shared test configuration and fixtures.

Uses a transactional rollback strategy per test for full isolation:
- Each test gets its own engine, schema, and outer transaction that rolls back.
- ``TEST_DATABASE_URL`` selects the backend; it defaults to an in-memory
  SQLite database (aiosqlite) so the suite runs without a server. Point it at
  a PostgreSQL database to exercise row locks for real.
"""

import os
from collections.abc import AsyncGenerator
from datetime import date
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from staybook.auth.dependencies import Principal
from staybook.auth.jwt import create_access_token
from staybook.config import settings
from staybook.database import Base, get_db
from staybook.main import app
from staybook.models.property import Property
from staybook.models.reservation import Reservation
from staybook.services import property_service, reservation_service

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

OWNER = Principal(sub="owner-1", email="owner@example.com")
TENANT = Principal(sub="tenant-1", email="tenant@example.com")
STRANGER = Principal(sub="stranger-1", email="stranger@example.com")


def _make_engine():
    if TEST_DATABASE_URL.startswith("sqlite"):
        # One shared connection so the in-memory database survives across checkouts.
        return create_async_engine(
            TEST_DATABASE_URL,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_async_engine(TEST_DATABASE_URL, echo=False, pool_pre_ping=True)


# ---------------------------------------------------------------------------
# Settings overrides
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep bcrypt at its minimum cost factor so the suite stays fast."""
    monkeypatch.setattr(settings, "access_code_bcrypt_rounds", 4)


# ---------------------------------------------------------------------------
# Per-test: fresh schema and transactional rollback for isolation
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_engine():
    engine = _make_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async session wrapped in a transaction that always rolls back."""
    async with test_engine.connect() as connection:
        transaction = await connection.begin()
        session = AsyncSession(bind=connection, expire_on_commit=False)

        try:
            yield session
        finally:
            await session.close()
            if transaction.is_active:
                await transaction.rollback()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Provide an httpx AsyncClient wired to use the test DB session."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Convenience fixtures: principals and tokens
# ---------------------------------------------------------------------------


def _bearer(principal: Principal) -> dict[str, str]:
    claims: dict[str, str] = {"sub": principal.sub}
    if principal.email is not None:
        claims[settings.jwt_email_claim] = principal.email
    return {"Authorization": f"Bearer {create_access_token(claims)}"}


@pytest.fixture
def owner() -> Principal:
    return OWNER


@pytest.fixture
def tenant() -> Principal:
    return TENANT


@pytest.fixture
def stranger() -> Principal:
    return STRANGER


@pytest.fixture
def headers_for():
    """Factory: Authorization headers for an arbitrary principal."""
    return _bearer


@pytest.fixture
def owner_headers() -> dict[str, str]:
    return _bearer(OWNER)


@pytest.fixture
def tenant_headers() -> dict[str, str]:
    return _bearer(TENANT)


@pytest.fixture
def stranger_headers() -> dict[str, str]:
    return _bearer(STRANGER)


# ---------------------------------------------------------------------------
# Convenience fixtures: property and reservation helpers
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_property(db_session: AsyncSession) -> Property:
    """An ACTIVE property owned by ``OWNER`` at 100.00 per night."""
    return await property_service.create_property(
        db_session,
        owner_id=OWNER.sub,
        title="Harbour Loft",
        price_per_night=Decimal("100.00"),
        description="Two rooms above the harbour.",
        city="Lisbon",
    )


@pytest_asyncio.fixture
async def pending_reservation(db_session: AsyncSession, test_property: Property) -> Reservation:
    """A PENDING 9-night reservation by ``TENANT`` on ``test_property``."""
    return await reservation_service.create(
        db_session,
        property_id=test_property.id,
        tenant_id=TENANT.sub,
        start=date(2026, 3, 1),
        end=date(2026, 3, 10),
    )
