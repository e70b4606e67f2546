"""Property service: inventory CRUD and the ACTIVE/INACTIVE toggle."""

import logging
import uuid
from decimal import Decimal

from sqlalchemy import delete, exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from staybook.exceptions import ConflictError, InvalidStateError, NotFoundError
from staybook.models.access_code import PropertyAccessCode
from staybook.models.property import Property, PropertyStatus
from staybook.models.reservation import ACTIVE_STATUSES, Reservation
from staybook.services.persistence import flush_and_refresh, flush_or_conflict, paginate
from staybook.services.pricing import require_money

logger = logging.getLogger(__name__)


async def get_property(db: AsyncSession, property_id: uuid.UUID, *, lock: bool = False) -> Property:
    """Fetch a property by id, optionally with a row lock (SELECT ... FOR UPDATE).

    Raises:
        NotFoundError: If no such property exists.
    """
    query = select(Property).where(Property.id == property_id)
    if lock:
        query = query.with_for_update().execution_options(populate_existing=True)
    result = await db.execute(query)
    prop = result.scalar_one_or_none()
    if prop is None:
        raise NotFoundError.for_entity("Property", property_id)
    return prop


async def list_active_properties(
    db: AsyncSession,
    city: str | None = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Property], int]:
    """Return a page of bookable properties, optionally filtered by city (case-insensitive)."""
    query = select(Property).where(Property.status == PropertyStatus.ACTIVE)
    if city:
        query = query.where(func.lower(Property.city) == city.strip().lower())
    query = query.order_by(Property.created_at.desc(), Property.id)
    return await paginate(db, query, skip, limit)


async def list_owner_properties(
    db: AsyncSession,
    owner_id: str,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Property], int]:
    """Return a page of the owner's properties in any status."""
    query = (
        select(Property)
        .where(Property.owner_id == owner_id)
        .order_by(Property.created_at.desc(), Property.id)
    )
    return await paginate(db, query, skip, limit)


async def create_property(
    db: AsyncSession,
    owner_id: str,
    title: str,
    price_per_night: Decimal,
    description: str | None = None,
    city: str | None = None,
) -> Property:
    """Create an ACTIVE property owned by ``owner_id``."""
    prop = Property(
        owner_id=owner_id,
        title=title,
        description=description,
        city=city,
        price_per_night=require_money(price_per_night, "price_per_night"),
        status=PropertyStatus.ACTIVE,
    )
    db.add(prop)
    await flush_and_refresh(db, prop)
    logger.info("Created property %s for owner %s", prop.id, owner_id)
    return prop


async def update_property(
    db: AsyncSession,
    property_id: uuid.UUID,
    title: str | None = None,
    description: str | None = None,
    city: str | None = None,
    price_per_night: Decimal | None = None,
) -> Property:
    """Partially update a property. Only non-None fields are changed.

    Existing reservations keep the unit price they were booked at.
    """
    prop = await get_property(db, property_id, lock=True)

    if price_per_night is not None:
        prop.price_per_night = require_money(price_per_night, "price_per_night")
    if title is not None:
        prop.title = title
    if description is not None:
        prop.description = description
    if city is not None:
        prop.city = city

    await flush_and_refresh(db, prop)
    logger.info("Updated property %s", prop.id)
    return prop


async def activate(db: AsyncSession, property_id: uuid.UUID) -> Property:
    prop = await get_property(db, property_id, lock=True)
    if prop.status == PropertyStatus.ACTIVE:
        raise InvalidStateError("Property is already active")

    prop.status = PropertyStatus.ACTIVE
    await flush_and_refresh(db, prop)
    logger.info("Activated property %s", prop.id)
    return prop


async def deactivate(db: AsyncSession, property_id: uuid.UUID) -> Property:
    prop = await get_property(db, property_id, lock=True)
    if prop.status == PropertyStatus.INACTIVE:
        raise InvalidStateError("Property is already inactive")

    prop.status = PropertyStatus.INACTIVE
    await flush_and_refresh(db, prop)
    logger.info("Deactivated property %s", prop.id)
    return prop


async def has_active_reservations(db: AsyncSession, property_id: uuid.UUID) -> bool:
    result = await db.execute(
        select(
            exists().where(
                Reservation.property_id == property_id,
                Reservation.status.in_(ACTIVE_STATUSES),
            )
        )
    )
    return bool(result.scalar())


async def delete_property(db: AsyncSession, property_id: uuid.UUID) -> None:
    """Hard-delete a property together with its past reservations and access codes.

    Raises:
        NotFoundError: If the property does not exist.
        ConflictError: If a PENDING or CONFIRMED reservation still references it.
    """
    prop = await get_property(db, property_id, lock=True)

    if await has_active_reservations(db, property_id):
        raise ConflictError("Property has active reservations and cannot be deleted")

    await db.execute(delete(PropertyAccessCode).where(PropertyAccessCode.property_id == property_id))
    await db.execute(delete(Reservation).where(Reservation.property_id == property_id))
    await db.delete(prop)
    await flush_or_conflict(db)
    logger.info("Deleted property %s", property_id)
