"""Reservation lifecycle engine.

State machine::

    create()  -> PENDING
    confirm() :  PENDING   -> CONFIRMED
    complete():  CONFIRMED -> COMPLETED
    cancel()  :  PENDING | CONFIRMED -> CANCELLED

CANCELLED and COMPLETED are terminal. Pricing overrides (discount, free stay)
are only allowed while PENDING.

Every mutation re-reads the reservation with a row lock inside the caller's
transaction, validates, then writes; the version column turns any lost race
into a retryable ``ConflictError``.
"""

import logging
import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from staybook.exceptions import ConflictError, InvalidInputError, InvalidStateError, NotFoundError
from staybook.models.property import Property
from staybook.models.reservation import PricingType, Reservation, ReservationStatus
from staybook.services import availability
from staybook.services.persistence import flush_and_refresh, paginate
from staybook.services.pricing import require_money, total_for
from staybook.services.property_service import get_property

logger = logging.getLogger(__name__)

_OVERLAP_MESSAGE = "Requested dates overlap an existing reservation"
_MAX_REASON_LENGTH = 255


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


async def get_reservation(
    db: AsyncSession,
    reservation_id: uuid.UUID,
    *,
    lock: bool = False,
) -> Reservation:
    """Fetch a reservation by id.

    With ``lock=True`` the row is selected FOR UPDATE and any cached copy in
    the session is overwritten with the current database state.

    Raises:
        NotFoundError: If the reservation does not exist.
    """
    query = select(Reservation).where(Reservation.id == reservation_id)
    if lock:
        query = query.with_for_update().execution_options(populate_existing=True)
    result = await db.execute(query)
    reservation = result.scalar_one_or_none()
    if reservation is None:
        raise NotFoundError.for_entity("Reservation", reservation_id)
    return reservation


async def list_tenant_reservations(
    db: AsyncSession,
    tenant_id: str,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Reservation], int]:
    query = (
        select(Reservation)
        .where(Reservation.tenant_id == tenant_id)
        .order_by(Reservation.start_date.desc(), Reservation.id)
    )
    return await paginate(db, query, skip, limit)


async def list_property_reservations(
    db: AsyncSession,
    property_id: uuid.UUID,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Reservation], int]:
    query = (
        select(Reservation)
        .where(Reservation.property_id == property_id)
        .order_by(Reservation.start_date, Reservation.id)
    )
    return await paginate(db, query, skip, limit)


async def list_owner_reservations(
    db: AsyncSession,
    owner_id: str,
    status: ReservationStatus | None = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Reservation], int]:
    """Reservations on any property owned by ``owner_id``, newest stay first."""
    query = (
        select(Reservation)
        .join(Property, Reservation.property_id == Property.id)
        .where(Property.owner_id == owner_id)
    )
    if status is not None:
        query = query.where(Reservation.status == status)
    query = query.order_by(Reservation.start_date.desc(), Reservation.id)
    return await paginate(db, query, skip, limit)


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


async def create(
    db: AsyncSession,
    property_id: uuid.UUID,
    tenant_id: str,
    start: date,
    end: date,
) -> Reservation:
    """Book ``property_id`` for ``tenant_id`` from ``start`` to ``end``.

    The property row is locked for the rest of the transaction, so two
    concurrent bookings of the same property serialize on the overlap check.
    On PostgreSQL the exclusion constraint backs this up at the storage level.

    Raises:
        InvalidInputError: If ``end`` is not after ``start``.
        NotFoundError: If the property does not exist.
        InvalidStateError: If the property is not ACTIVE.
        ConflictError: If an active reservation overlaps the range.
    """
    if end <= start:
        raise InvalidInputError("end_date must be after start_date")

    prop = await get_property(db, property_id, lock=True)
    if not prop.is_bookable:
        raise InvalidStateError("Property is not available for booking")

    if await availability.overlaps(db, property_id, start, end):
        raise ConflictError(_OVERLAP_MESSAGE)

    nights = (end - start).days
    unit_price = prop.price_per_night
    reservation = Reservation(
        property_id=property_id,
        tenant_id=tenant_id,
        start_date=start,
        end_date=end,
        status=ReservationStatus.PENDING,
        unit_price_applied=unit_price,
        total_price=total_for(unit_price, nights),
        pricing_type=PricingType.NORMAL,
    )
    db.add(reservation)
    await flush_and_refresh(db, reservation, _OVERLAP_MESSAGE)
    logger.info(
        "Created reservation %s on property %s (%s -> %s, %d nights)",
        reservation.id,
        property_id,
        start,
        end,
        nights,
    )
    return reservation


async def confirm(db: AsyncSession, reservation_id: uuid.UUID) -> Reservation:
    reservation = await get_reservation(db, reservation_id, lock=True)
    if reservation.status != ReservationStatus.PENDING:
        raise InvalidStateError("Only a pending reservation can be confirmed")

    return await _transition(db, reservation, ReservationStatus.CONFIRMED)


async def cancel(db: AsyncSession, reservation_id: uuid.UUID) -> Reservation:
    """Cancel a PENDING or CONFIRMED reservation, freeing its dates."""
    reservation = await get_reservation(db, reservation_id, lock=True)
    if reservation.status == ReservationStatus.CANCELLED:
        raise InvalidStateError("Reservation is already cancelled")
    if reservation.status == ReservationStatus.COMPLETED:
        raise InvalidStateError("A completed reservation cannot be cancelled")

    return await _transition(db, reservation, ReservationStatus.CANCELLED)


async def complete(db: AsyncSession, reservation_id: uuid.UUID) -> Reservation:
    reservation = await get_reservation(db, reservation_id, lock=True)
    if reservation.status != ReservationStatus.CONFIRMED:
        raise InvalidStateError("Only a confirmed reservation can be completed")

    return await _transition(db, reservation, ReservationStatus.COMPLETED)


async def _transition(
    db: AsyncSession,
    reservation: Reservation,
    new_status: ReservationStatus,
) -> Reservation:
    old_status = reservation.status
    reservation.status = new_status
    await flush_and_refresh(db, reservation)
    logger.info(
        "Reservation %s: %s -> %s",
        reservation.id,
        old_status.value,
        new_status.value,
    )
    return reservation


# ---------------------------------------------------------------------------
# Pricing overrides
# ---------------------------------------------------------------------------


async def apply_discount(
    db: AsyncSession,
    reservation_id: uuid.UUID,
    new_unit_price: Decimal,
    reason: str | None,
    actor_id: str,
) -> Reservation:
    """Lower the nightly price of a pending reservation.

    Raises:
        NotFoundError: If the reservation does not exist.
        InvalidStateError: Unless the reservation is PENDING.
        InvalidInputError: If the price is negative, has sub-cent precision,
            or exceeds the current unit price, or the reason is too long.
    """
    reservation = await _get_for_repricing(db, reservation_id)

    unit_price = require_money(new_unit_price, "unit_price", allow_zero=True)
    if unit_price > reservation.unit_price_applied:
        raise InvalidInputError("Discounted unit price cannot exceed the current unit price")

    reservation.unit_price_applied = unit_price
    reservation.total_price = total_for(unit_price, reservation.nights)
    reservation.pricing_type = PricingType.DISCOUNT
    reservation.pricing_reason = _clean_reason(reason)
    reservation.priced_by = actor_id

    await flush_and_refresh(db, reservation)
    logger.info("Discount applied to reservation %s by %s", reservation.id, actor_id)
    return reservation


async def apply_free_stay(
    db: AsyncSession,
    reservation_id: uuid.UUID,
    reason: str | None,
    actor_id: str,
) -> Reservation:
    """Make a pending reservation free of charge. A reason is mandatory."""
    reservation = await _get_for_repricing(db, reservation_id)

    cleaned = _clean_reason(reason)
    if cleaned is None:
        raise InvalidInputError("A reason is required for a free stay")

    reservation.unit_price_applied = Decimal("0.00")
    reservation.total_price = Decimal("0.00")
    reservation.pricing_type = PricingType.FREE
    reservation.pricing_reason = cleaned
    reservation.priced_by = actor_id

    await flush_and_refresh(db, reservation)
    logger.info("Free stay applied to reservation %s by %s", reservation.id, actor_id)
    return reservation


async def _get_for_repricing(db: AsyncSession, reservation_id: uuid.UUID) -> Reservation:
    reservation = await get_reservation(db, reservation_id, lock=True)
    if reservation.status != ReservationStatus.PENDING:
        raise InvalidStateError("Pricing can only be changed on a pending reservation")
    return reservation


def _clean_reason(reason: str | None) -> str | None:
    if reason is None or not reason.strip():
        return None
    cleaned = reason.strip()
    if len(cleaned) > _MAX_REASON_LENGTH:
        raise InvalidInputError(f"reason must be at most {_MAX_REASON_LENGTH} characters")
    return cleaned
