"""Seed the database with a demo owner, tenant, properties and bookings.

Prints Bearer tokens for both demo principals so the API can be exercised
right away, plus one access code issued to the demo tenant.

Run from the repository root after ``alembic upgrade head``:
    python -m scripts.seed_data
"""

import asyncio
import sys
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path

# Add the repository root to the path so imports work when run as a script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import delete, select

from staybook.auth.jwt import create_access_token
from staybook.config import settings
from staybook.database import async_session_factory, engine
from staybook.models.access_code import PropertyAccessCode
from staybook.models.property import Property
from staybook.models.reservation import Reservation
from staybook.services import access_code_service, property_service, reservation_service

# ---------------------------------------------------------------------------
# Seed data definitions
# ---------------------------------------------------------------------------

DEMO_OWNER = {"sub": "demo-owner", "email": "owner@staybook.dev"}
DEMO_TENANT = {"sub": "demo-tenant", "email": "tenant@staybook.dev"}

PROPERTIES = [
    {
        "title": "Alfama Rooftop Apartment",
        "description": "Two bedrooms under a terrace overlooking the Tagus.",
        "city": "Lisbon",
        "price_per_night": Decimal("120.00"),
    },
    {
        "title": "Ribeira Riverside Studio",
        "description": "Compact studio steps from the Douro quays.",
        "city": "Porto",
        "price_per_night": Decimal("85.00"),
    },
    {
        "title": "Sintra Garden Cottage",
        "description": "Stone cottage with a walled garden near the palaces.",
        "city": "Sintra",
        "price_per_night": Decimal("150.00"),
    },
]


async def _clear_demo_data(session) -> None:
    """Delete everything owned by the demo owner so the seed can be re-run."""
    result = await session.execute(select(Property.id).where(Property.owner_id == DEMO_OWNER["sub"]))
    property_ids = list(result.scalars().all())
    if not property_ids:
        return

    print(f"⚠️  Demo owner already has {len(property_ids)} properties. Deleting and re-seeding...")
    await session.execute(delete(PropertyAccessCode).where(PropertyAccessCode.property_id.in_(property_ids)))
    await session.execute(delete(Reservation).where(Reservation.property_id.in_(property_ids)))
    await session.execute(delete(Property).where(Property.id.in_(property_ids)))
    await session.flush()


async def seed() -> None:
    """Populate the database with demo data. Idempotent for the demo owner."""
    async with async_session_factory() as session:
        await _clear_demo_data(session)

        # ------------------------------------------------------------------
        # 1. Properties
        # ------------------------------------------------------------------
        created: list[Property] = []
        for prop_data in PROPERTIES:
            prop = await property_service.create_property(session, owner_id=DEMO_OWNER["sub"], **prop_data)
            created.append(prop)
            print(f"   🏠 {prop.title} ({prop.city}, {prop.price_per_night}/night)")

        # ------------------------------------------------------------------
        # 2. Reservations across the lifecycle
        # ------------------------------------------------------------------
        today = date.today()
        lisbon, porto, sintra = created

        pending = await reservation_service.create(
            session, lisbon.id, DEMO_TENANT["sub"], today + timedelta(days=14), today + timedelta(days=18)
        )
        confirmed = await reservation_service.create(
            session, porto.id, DEMO_TENANT["sub"], today + timedelta(days=30), today + timedelta(days=33)
        )
        await reservation_service.apply_discount(
            session, confirmed.id, Decimal("70.00"), "Returning guest", DEMO_OWNER["sub"]
        )
        await reservation_service.confirm(session, confirmed.id)
        cancelled = await reservation_service.create(
            session, sintra.id, DEMO_TENANT["sub"], today + timedelta(days=7), today + timedelta(days=9)
        )
        await reservation_service.cancel(session, cancelled.id)

        print(f"✅ Created 3 reservations (pending {pending.id}, confirmed {confirmed.id}, cancelled)")

        # ------------------------------------------------------------------
        # 3. Access code for the tenant
        # ------------------------------------------------------------------
        issued = await access_code_service.create(
            session, sintra.id, DEMO_TENANT["email"], DEMO_OWNER["sub"], expires_at=None
        )

        await session.commit()

    await engine.dispose()

    print()
    print("=" * 60)
    print("📊 Seed Summary")
    print("=" * 60)
    print(f"   Properties:   {len(created)}")
    print("   Reservations: 3")
    print(f"   Access code:  {issued.raw_code}  (for {DEMO_TENANT['email']})")
    print()
    print(f"   Owner token:  {create_access_token({'sub': DEMO_OWNER['sub'], settings.jwt_email_claim: DEMO_OWNER['email']})}")
    print(f"   Tenant token: {create_access_token({'sub': DEMO_TENANT['sub'], settings.jwt_email_claim: DEMO_TENANT['email']})}")
    print("=" * 60)
    print("🎉 Done! Tokens expire after JWT_ACCESS_TOKEN_EXPIRE_MINUTES.")


if __name__ == "__main__":
    asyncio.run(seed())
