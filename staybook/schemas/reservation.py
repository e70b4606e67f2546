"""Pydantic v2 request/response schemas for reservation endpoints."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from staybook.models.reservation import PricingType, ReservationStatus

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class ReservationCreate(BaseModel):
    """Schema for booking a property. The tenant is the authenticated caller."""

    property_id: uuid.UUID
    start_date: date
    end_date: date


class DiscountRequest(BaseModel):
    """Owner-applied discount on a pending reservation."""

    unit_price: Decimal
    reason: str | None = None


class FreeStayRequest(BaseModel):
    """Owner-granted free stay; the reason is mandatory."""

    reason: str


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class ReservationResponse(BaseModel):
    """Reservation with its pricing snapshot."""

    id: uuid.UUID
    property_id: uuid.UUID
    tenant_id: str
    start_date: date
    end_date: date
    nights: int
    status: ReservationStatus
    unit_price_applied: Decimal
    total_price: Decimal
    pricing_type: PricingType
    pricing_reason: str | None = None
    priced_by: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReservationListResponse(BaseModel):
    """Paginated list of reservations."""

    items: list[ReservationResponse]
    total: int
    skip: int
    limit: int
