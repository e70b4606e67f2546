"""Pydantic v2 request/response schemas for property endpoints."""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from staybook.models.property import PropertyStatus

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class PropertyCreate(BaseModel):
    """Schema for creating a new property."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    city: str | None = Field(None, max_length=120)
    price_per_night: Decimal


class PropertyUpdate(BaseModel):
    """Schema for partially updating a property. All fields optional."""

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    city: str | None = Field(None, max_length=120)
    price_per_night: Decimal | None = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class PropertyResponse(BaseModel):
    """Public property information returned from the API."""

    id: uuid.UUID
    owner_id: str
    title: str
    description: str | None = None
    city: str | None = None
    price_per_night: Decimal
    status: PropertyStatus
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PropertyListResponse(BaseModel):
    """Paginated list of properties."""

    items: list[PropertyResponse]
    total: int
    skip: int
    limit: int
