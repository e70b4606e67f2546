"""Pydantic v2 request/response schemas for access-code endpoints."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from staybook.models.access_code import CodeDisposition, PropertyAccessCode

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class AccessCodeCreate(BaseModel):
    """Schema for issuing a code. ``expires_at`` null means it never expires."""

    property_id: uuid.UUID
    email: EmailStr
    expires_at: datetime | None = None


class RedeemRequest(BaseModel):
    """Schema for redeeming a code received out of band."""

    code: str = Field(..., min_length=1, max_length=256)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class AccessCodeResponse(BaseModel):
    """Access-code metadata. Never includes the raw code or its hashes."""

    id: uuid.UUID
    property_id: uuid.UUID
    issued_to_email: str
    created_by: str
    created_at: datetime
    expires_at: datetime | None = None
    redeemed_at: datetime | None = None
    redeemed_by: str | None = None
    revoked_at: datetime | None = None
    revoked_by: str | None = None
    disposition: CodeDisposition
    active: bool

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_model(cls, code: PropertyAccessCode) -> "AccessCodeResponse":
        disposition = code.disposition()
        return cls.model_validate(
            {
                "id": code.id,
                "property_id": code.property_id,
                "issued_to_email": code.issued_to_email,
                "created_by": code.created_by,
                "created_at": code.created_at,
                "expires_at": code.expires_at,
                "redeemed_at": code.redeemed_at,
                "redeemed_by": code.redeemed_by,
                "revoked_at": code.revoked_at,
                "revoked_by": code.revoked_by,
                "disposition": disposition,
                "active": disposition == CodeDisposition.ACTIVE,
            }
        )


class AccessCodeCreatedResponse(AccessCodeResponse):
    """Returned once, at creation: carries the raw code to hand to the invitee."""

    code: str


class AccessCodeListResponse(BaseModel):
    """Paginated list of access codes."""

    items: list[AccessCodeResponse]
    total: int
    skip: int
    limit: int
