"""Access-code engine: issue, redeem and revoke single-use property invitations.

The raw code exists only in the return value of ``create``. Redemption finds
the row through the SHA-256 lookup hash, then checks, in this order:

1. the issued-to e-mail matches the caller's verified e-mail,
2. the code is still active,
3. the bcrypt hash verifies.

Failures of (1) are indistinguishable from an unknown code, so a caller who
does not own the invitation learns nothing about whether it exists.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from staybook.auth.codes import generate_raw_code, hash_code, lookup_hash, verify_code
from staybook.clock import as_utc, utc_now
from staybook.exceptions import ConflictError, InvalidInputError, NotFoundError
from staybook.models.access_code import PropertyAccessCode
from staybook.services.persistence import flush_or_conflict, paginate
from staybook.services.property_service import get_property

logger = logging.getLogger(__name__)

INVALID_CODE_MESSAGE = "Invalid access code"
INACTIVE_CODE_MESSAGE = "Access code is no longer active"


@dataclass(frozen=True)
class AccessCodeResult:
    """A freshly created code. ``raw_code`` is never retrievable again."""

    access_code: PropertyAccessCode
    raw_code: str


def is_active(code: PropertyAccessCode, now: datetime | None = None) -> bool:
    """Not revoked, not redeemed, and not past its expiry."""
    return code.is_active(now)


def normalize_email(email: str | None) -> str | None:
    if email is None or not email.strip():
        return None
    return email.strip().lower()


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


async def get_access_code(
    db: AsyncSession,
    code_id: uuid.UUID,
    *,
    lock: bool = False,
) -> PropertyAccessCode:
    query = select(PropertyAccessCode).where(PropertyAccessCode.id == code_id)
    if lock:
        query = query.with_for_update().execution_options(populate_existing=True)
    result = await db.execute(query)
    code = result.scalar_one_or_none()
    if code is None:
        raise NotFoundError.for_entity("Access code", code_id)
    return code


async def list_property_codes(
    db: AsyncSession,
    property_id: uuid.UUID,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[PropertyAccessCode], int]:
    query = (
        select(PropertyAccessCode)
        .where(PropertyAccessCode.property_id == property_id)
        .order_by(PropertyAccessCode.created_at.desc(), PropertyAccessCode.id)
    )
    return await paginate(db, query, skip, limit)


async def list_active_codes_for_email(
    db: AsyncSession,
    email: str,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[PropertyAccessCode], int]:
    """Active codes issued to ``email`` (taken from the verified principal)."""
    normalized = normalize_email(email)
    if normalized is None:
        raise InvalidInputError("An e-mail address is required")

    query = (
        select(PropertyAccessCode)
        .where(
            PropertyAccessCode.issued_to_email == normalized,
            PropertyAccessCode.revoked_at.is_(None),
            PropertyAccessCode.redeemed_at.is_(None),
            or_(
                PropertyAccessCode.expires_at.is_(None),
                PropertyAccessCode.expires_at > utc_now(),
            ),
        )
        .order_by(PropertyAccessCode.created_at.desc(), PropertyAccessCode.id)
    )
    return await paginate(db, query, skip, limit)


async def find_by_raw_code(
    db: AsyncSession,
    raw_code: str,
    *,
    lock: bool = False,
) -> PropertyAccessCode | None:
    query = select(PropertyAccessCode).where(PropertyAccessCode.code_lookup == lookup_hash(raw_code))
    if lock:
        query = query.with_for_update().execution_options(populate_existing=True)
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def validate_code(db: AsyncSession, raw_code: str) -> bool:
    """True if ``raw_code`` names an active code and its bcrypt hash verifies. No side effects."""
    code = await find_by_raw_code(db, raw_code)
    return code is not None and code.is_active() and verify_code(raw_code, code.code_hash)


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


async def create(
    db: AsyncSession,
    property_id: uuid.UUID,
    email: str,
    creator_id: str,
    expires_at: datetime | None = None,
) -> AccessCodeResult:
    """Issue a code for ``email`` on ``property_id``.

    Raises:
        NotFoundError: If the property does not exist.
        InvalidInputError: If the e-mail is blank or ``expires_at`` is not in
            the future.
    """
    await get_property(db, property_id)

    normalized = normalize_email(email)
    if normalized is None:
        raise InvalidInputError("An e-mail address is required")

    if expires_at is not None:
        expires_at = as_utc(expires_at)
        if expires_at <= utc_now():
            raise InvalidInputError("expires_at must be in the future")

    raw_code = generate_raw_code()
    access_code = PropertyAccessCode(
        property_id=property_id,
        issued_to_email=normalized,
        code_lookup=lookup_hash(raw_code),
        code_hash=hash_code(raw_code),
        created_by=creator_id,
        expires_at=expires_at,
    )
    db.add(access_code)
    await flush_or_conflict(db)
    logger.info("Issued access code %s for property %s", access_code.id, property_id)
    return AccessCodeResult(access_code=access_code, raw_code=raw_code)


async def redeem(
    db: AsyncSession,
    raw_code: str,
    redeemer_id: str,
    redeemer_email: str | None,
) -> PropertyAccessCode:
    """Consume a code on behalf of the caller whose verified e-mail it was issued to.

    Raises:
        InvalidInputError: If the caller has no e-mail claim.
        NotFoundError: Unknown code, or e-mail mismatch (same message).
        ConflictError: Code no longer active, or hash mismatch (generic message).
    """
    normalized = normalize_email(redeemer_email)
    if normalized is None:
        raise InvalidInputError("The authenticated principal has no e-mail address")

    code = await find_by_raw_code(db, raw_code, lock=True)
    if code is None or not code.is_issued_to(normalized):
        raise NotFoundError(INVALID_CODE_MESSAGE)

    if not code.is_active():
        raise ConflictError(INACTIVE_CODE_MESSAGE)

    if not verify_code(raw_code, code.code_hash):
        raise ConflictError(INVALID_CODE_MESSAGE)

    code.redeemed_at = utc_now()
    code.redeemed_by = redeemer_id
    await flush_or_conflict(db, INACTIVE_CODE_MESSAGE)
    logger.info("Access code %s redeemed by %s", code.id, redeemer_id)
    return code


async def revoke(db: AsyncSession, code_id: uuid.UUID, revoker_id: str) -> PropertyAccessCode:
    """Revoke a code regardless of its redemption or expiry state.

    Raises:
        NotFoundError: If the code does not exist.
        ConflictError: If the code is already revoked.
    """
    code = await get_access_code(db, code_id, lock=True)
    if code.is_revoked:
        raise ConflictError("Access code is already revoked")

    code.revoked_at = utc_now()
    code.revoked_by = revoker_id
    await flush_or_conflict(db)
    logger.info("Access code %s revoked by %s", code.id, revoker_id)
    return code
