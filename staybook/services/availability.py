"""Availability checking for a property's calendar.

Overlap rule (inclusive endpoints):

    existing.end_date >= candidate.start AND existing.start_date <= candidate.end

so a booking ending on day 15 collides with one starting on day 15. Only
PENDING and CONFIRMED reservations occupy calendar space.
"""

import uuid
from datetime import date

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from staybook.models.reservation import ACTIVE_STATUSES, Reservation


def _overlap_filter(property_id: uuid.UUID, start: date, end: date) -> tuple:
    return (
        Reservation.property_id == property_id,
        Reservation.status.in_(ACTIVE_STATUSES),
        Reservation.end_date >= start,
        Reservation.start_date <= end,
    )


async def overlaps(
    db: AsyncSession,
    property_id: uuid.UUID,
    start: date,
    end: date,
) -> bool:
    """Return True if any active reservation of the property intersects [start, end].

    The caller validates ``end > start``. Run inside the same transaction as
    the insert it guards, after locking the property row.
    """
    result = await db.execute(select(exists().where(*_overlap_filter(property_id, start, end))))
    return bool(result.scalar())


async def find_overlapping(
    db: AsyncSession,
    property_id: uuid.UUID,
    start: date,
    end: date,
) -> list[Reservation]:
    """Return the active reservations intersecting [start, end], earliest first."""
    result = await db.execute(
        select(Reservation)
        .where(*_overlap_filter(property_id, start, end))
        .order_by(Reservation.start_date, Reservation.id)
    )
    return list(result.scalars().all())
