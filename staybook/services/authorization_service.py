"""Authorization predicates over the stores.

Each predicate raises ``NotFoundError`` when the referenced entity does not
exist and otherwise answers True/False; "no" is never an exception here.
``staybook.auth.gate`` turns a False into ``ForbiddenError``.
"""

import uuid

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from staybook.exceptions import NotFoundError
from staybook.models.access_code import PropertyAccessCode
from staybook.models.property import Property
from staybook.models.reservation import Reservation


async def _exists(db: AsyncSession, *criteria) -> bool:
    result = await db.execute(select(exists().where(*criteria)))
    return bool(result.scalar())


async def _require(db: AsyncSession, model, entity: str, entity_id: uuid.UUID) -> None:
    if not await _exists(db, model.id == entity_id):
        raise NotFoundError.for_entity(entity, entity_id)


async def is_property_owner(db: AsyncSession, property_id: uuid.UUID, user_id: str) -> bool:
    await _require(db, Property, "Property", property_id)
    return await _exists(db, Property.id == property_id, Property.owner_id == user_id)


async def is_tenant(db: AsyncSession, reservation_id: uuid.UUID, user_id: str) -> bool:
    await _require(db, Reservation, "Reservation", reservation_id)
    return await _exists(db, Reservation.id == reservation_id, Reservation.tenant_id == user_id)


async def is_reservation_property_owner(
    db: AsyncSession,
    reservation_id: uuid.UUID,
    user_id: str,
) -> bool:
    await _require(db, Reservation, "Reservation", reservation_id)
    return await _exists(
        db,
        Reservation.id == reservation_id,
        Reservation.property_id == Property.id,
        Property.owner_id == user_id,
    )


async def can_access_reservation(
    db: AsyncSession,
    reservation_id: uuid.UUID,
    user_id: str,
) -> bool:
    """Tenant or owner of the reserved property."""
    return await is_tenant(db, reservation_id, user_id) or await is_reservation_property_owner(
        db, reservation_id, user_id
    )


async def is_access_code_creator(db: AsyncSession, code_id: uuid.UUID, user_id: str) -> bool:
    await _require(db, PropertyAccessCode, "Access code", code_id)
    return await _exists(
        db,
        PropertyAccessCode.id == code_id,
        PropertyAccessCode.created_by == user_id,
    )
