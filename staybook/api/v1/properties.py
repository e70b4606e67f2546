"""Properties API routes.

Listing active properties is public; every mutation goes through the
ownership gate first.
"""

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from staybook.api.deps import Page, Principal, get_current_principal, get_db, get_page
from staybook.auth import gate
from staybook.schemas.common import MessageResponse
from staybook.schemas.property import (
    PropertyCreate,
    PropertyListResponse,
    PropertyResponse,
    PropertyUpdate,
)
from staybook.services import property_service

router = APIRouter(prefix="/api/v1/properties", tags=["properties"])


@router.get(
    "",
    response_model=PropertyListResponse,
    summary="List bookable properties",
)
async def list_active_properties(
    city: str | None = Query(None, description="Case-insensitive city filter"),
    page: Page = Depends(get_page),
    db: AsyncSession = Depends(get_db),
) -> PropertyListResponse:
    items, total = await property_service.list_active_properties(db, city, page.skip, page.limit)
    return PropertyListResponse(
        items=[PropertyResponse.model_validate(p) for p in items],
        total=total,
        skip=page.skip,
        limit=page.limit,
    )


@router.get(
    "/mine",
    response_model=PropertyListResponse,
    summary="List properties owned by the caller",
)
async def list_my_properties(
    page: Page = Depends(get_page),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> PropertyListResponse:
    items, total = await property_service.list_owner_properties(db, principal.sub, page.skip, page.limit)
    return PropertyListResponse(
        items=[PropertyResponse.model_validate(p) for p in items],
        total=total,
        skip=page.skip,
        limit=page.limit,
    )


@router.get(
    "/{property_id}",
    response_model=PropertyResponse,
    summary="Get a property by ID",
)
async def get_property(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> PropertyResponse:
    prop = await property_service.get_property(db, property_id)
    return PropertyResponse.model_validate(prop)


@router.post(
    "",
    response_model=PropertyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new property",
)
async def create_property(
    body: PropertyCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> PropertyResponse:
    """Create an ACTIVE property owned by the caller."""
    prop = await property_service.create_property(
        db,
        owner_id=principal.sub,
        title=body.title,
        description=body.description,
        city=body.city,
        price_per_night=body.price_per_night,
    )
    return PropertyResponse.model_validate(prop)


@router.put(
    "/{property_id}",
    response_model=PropertyResponse,
    summary="Update a property",
)
async def update_property(
    property_id: uuid.UUID,
    body: PropertyUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> PropertyResponse:
    """Partially update a property. Only explicitly set fields are changed."""
    await gate.require_property_owner(db, property_id, principal)
    prop = await property_service.update_property(db, property_id, **body.model_dump(exclude_unset=True))
    return PropertyResponse.model_validate(prop)


@router.post(
    "/{property_id}/activate",
    response_model=PropertyResponse,
    summary="Make a property bookable again",
)
async def activate_property(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> PropertyResponse:
    await gate.require_property_owner(db, property_id, principal)
    prop = await property_service.activate(db, property_id)
    return PropertyResponse.model_validate(prop)


@router.post(
    "/{property_id}/deactivate",
    response_model=PropertyResponse,
    summary="Stop accepting bookings for a property",
)
async def deactivate_property(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> PropertyResponse:
    await gate.require_property_owner(db, property_id, principal)
    prop = await property_service.deactivate(db, property_id)
    return PropertyResponse.model_validate(prop)


@router.delete(
    "/{property_id}",
    response_model=MessageResponse,
    summary="Delete a property",
)
async def delete_property(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> MessageResponse:
    """Delete a property. Refused while it has pending or confirmed reservations."""
    await gate.require_property_owner(db, property_id, principal)
    await property_service.delete_property(db, property_id)
    return MessageResponse(message="Property deleted")
