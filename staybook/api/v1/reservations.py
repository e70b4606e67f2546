"""Reservations API routes.

Tenants book and cancel; owners of the reserved property confirm, complete,
cancel and reprice. Access is decided by ``staybook.auth.gate`` before the
lifecycle engine is called.
"""

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from staybook.api.deps import Page, Principal, get_current_principal, get_db, get_page
from staybook.auth import gate
from staybook.models.reservation import Reservation, ReservationStatus
from staybook.schemas.reservation import (
    DiscountRequest,
    FreeStayRequest,
    ReservationCreate,
    ReservationListResponse,
    ReservationResponse,
)
from staybook.services import reservation_service

router = APIRouter(prefix="/api/v1/reservations", tags=["reservations"])


def _page_response(items: list[Reservation], total: int, page: Page) -> ReservationListResponse:
    return ReservationListResponse(
        items=[ReservationResponse.model_validate(r) for r in items],
        total=total,
        skip=page.skip,
        limit=page.limit,
    )


# ---------------------------------------------------------------------------
# Tenant
# ---------------------------------------------------------------------------


@router.post(
    "",
    response_model=ReservationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Book a property",
)
async def create_reservation(
    body: ReservationCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> ReservationResponse:
    """Create a PENDING reservation for the caller. 409 if the dates are taken."""
    reservation = await reservation_service.create(
        db,
        property_id=body.property_id,
        tenant_id=principal.sub,
        start=body.start_date,
        end=body.end_date,
    )
    return ReservationResponse.model_validate(reservation)


@router.get(
    "/mine",
    response_model=ReservationListResponse,
    summary="List the caller's reservations",
)
async def list_my_reservations(
    page: Page = Depends(get_page),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> ReservationListResponse:
    items, total = await reservation_service.list_tenant_reservations(db, principal.sub, page.skip, page.limit)
    return _page_response(items, total, page)


# ---------------------------------------------------------------------------
# Owner
# ---------------------------------------------------------------------------


@router.get(
    "/owner",
    response_model=ReservationListResponse,
    summary="List reservations on the caller's properties",
)
async def list_owner_reservations(
    status_filter: ReservationStatus | None = Query(None, alias="status"),
    page: Page = Depends(get_page),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> ReservationListResponse:
    items, total = await reservation_service.list_owner_reservations(
        db, principal.sub, status_filter, page.skip, page.limit
    )
    return _page_response(items, total, page)


@router.get(
    "/owner/pending",
    response_model=ReservationListResponse,
    summary="List pending reservations awaiting the caller's confirmation",
)
async def list_owner_pending_reservations(
    page: Page = Depends(get_page),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> ReservationListResponse:
    items, total = await reservation_service.list_owner_reservations(
        db, principal.sub, ReservationStatus.PENDING, page.skip, page.limit
    )
    return _page_response(items, total, page)


@router.get(
    "/property/{property_id}",
    response_model=ReservationListResponse,
    summary="List all reservations of one of the caller's properties",
)
async def list_property_reservations(
    property_id: uuid.UUID,
    page: Page = Depends(get_page),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> ReservationListResponse:
    await gate.require_property_owner(db, property_id, principal)
    items, total = await reservation_service.list_property_reservations(db, property_id, page.skip, page.limit)
    return _page_response(items, total, page)


@router.post("/{reservation_id}/confirm", response_model=ReservationResponse, summary="Confirm a reservation")
async def confirm_reservation(
    reservation_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> ReservationResponse:
    await gate.require_reservation_property_owner(db, reservation_id, principal)
    reservation = await reservation_service.confirm(db, reservation_id)
    return ReservationResponse.model_validate(reservation)


@router.post("/{reservation_id}/complete", response_model=ReservationResponse, summary="Complete a reservation")
async def complete_reservation(
    reservation_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> ReservationResponse:
    await gate.require_reservation_property_owner(db, reservation_id, principal)
    reservation = await reservation_service.complete(db, reservation_id)
    return ReservationResponse.model_validate(reservation)


@router.post(
    "/{reservation_id}/discount",
    response_model=ReservationResponse,
    summary="Apply a discounted nightly price",
)
async def apply_discount(
    reservation_id: uuid.UUID,
    body: DiscountRequest,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> ReservationResponse:
    await gate.require_reservation_property_owner(db, reservation_id, principal)
    reservation = await reservation_service.apply_discount(
        db, reservation_id, body.unit_price, body.reason, principal.sub
    )
    return ReservationResponse.model_validate(reservation)


@router.post(
    "/{reservation_id}/free",
    response_model=ReservationResponse,
    summary="Make a reservation free of charge",
)
async def apply_free_stay(
    reservation_id: uuid.UUID,
    body: FreeStayRequest,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> ReservationResponse:
    await gate.require_reservation_property_owner(db, reservation_id, principal)
    reservation = await reservation_service.apply_free_stay(db, reservation_id, body.reason, principal.sub)
    return ReservationResponse.model_validate(reservation)


# ---------------------------------------------------------------------------
# Tenant or owner
# ---------------------------------------------------------------------------


@router.post("/{reservation_id}/cancel", response_model=ReservationResponse, summary="Cancel a reservation")
async def cancel_reservation(
    reservation_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> ReservationResponse:
    await gate.require_reservation_access(db, reservation_id, principal)
    reservation = await reservation_service.cancel(db, reservation_id)
    return ReservationResponse.model_validate(reservation)


@router.get("/{reservation_id}", response_model=ReservationResponse, summary="Get a reservation")
async def get_reservation(
    reservation_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> ReservationResponse:
    await gate.require_reservation_access(db, reservation_id, principal)
    reservation = await reservation_service.get_reservation(db, reservation_id)
    return ReservationResponse.model_validate(reservation)
