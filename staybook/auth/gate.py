"""Authorization gate called by route handlers before they invoke the core.

Each ``require_*`` coroutine evaluates one predicate for the resolved
principal and raises ``ForbiddenError`` when it is False. A missing entity
propagates as ``NotFoundError`` from the predicate.
"""

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from staybook.auth.dependencies import Principal
from staybook.exceptions import ForbiddenError
from staybook.services import authorization_service as authz


async def require_property_owner(db: AsyncSession, property_id: uuid.UUID, principal: Principal) -> None:
    if not await authz.is_property_owner(db, property_id, principal.sub):
        raise ForbiddenError("Only the property owner may perform this action")


async def require_reservation_property_owner(
    db: AsyncSession,
    reservation_id: uuid.UUID,
    principal: Principal,
) -> None:
    if not await authz.is_reservation_property_owner(db, reservation_id, principal.sub):
        raise ForbiddenError("Only the owner of the reserved property may perform this action")


async def require_reservation_access(
    db: AsyncSession,
    reservation_id: uuid.UUID,
    principal: Principal,
) -> None:
    if not await authz.can_access_reservation(db, reservation_id, principal.sub):
        raise ForbiddenError("You do not have access to this reservation")


async def require_access_code_creator(db: AsyncSession, code_id: uuid.UUID, principal: Principal) -> None:
    if not await authz.is_access_code_creator(db, code_id, principal.sub):
        raise ForbiddenError("Only the creator of the access code may perform this action")
