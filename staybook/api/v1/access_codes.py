"""Property access-code API routes.

The raw code appears in exactly one response: the one to ``POST
/access-codes``. Redemption uses the e-mail claim of the verified token,
never an e-mail from the request body.
"""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from staybook.api.deps import Page, Principal, get_current_principal, get_db, get_page
from staybook.auth import gate
from staybook.exceptions import InvalidInputError
from staybook.models.access_code import PropertyAccessCode
from staybook.schemas.access_code import (
    AccessCodeCreate,
    AccessCodeCreatedResponse,
    AccessCodeListResponse,
    AccessCodeResponse,
    RedeemRequest,
)
from staybook.services import access_code_service

router = APIRouter(prefix="/api/v1/access-codes", tags=["access-codes"])


def _page_response(items: list[PropertyAccessCode], total: int, page: Page) -> AccessCodeListResponse:
    return AccessCodeListResponse(
        items=[AccessCodeResponse.from_model(c) for c in items],
        total=total,
        skip=page.skip,
        limit=page.limit,
    )


@router.post(
    "",
    response_model=AccessCodeCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Issue an access code for one of the caller's properties",
)
async def create_access_code(
    body: AccessCodeCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> AccessCodeCreatedResponse:
    await gate.require_property_owner(db, body.property_id, principal)
    result = await access_code_service.create(
        db,
        property_id=body.property_id,
        email=body.email,
        creator_id=principal.sub,
        expires_at=body.expires_at,
    )
    meta = AccessCodeResponse.from_model(result.access_code)
    return AccessCodeCreatedResponse(**meta.model_dump(), code=result.raw_code)


@router.post(
    "/redeem",
    response_model=AccessCodeResponse,
    summary="Redeem an access code issued to the caller's e-mail",
)
async def redeem_access_code(
    body: RedeemRequest,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> AccessCodeResponse:
    code = await access_code_service.redeem(db, body.code, principal.sub, principal.email)
    return AccessCodeResponse.from_model(code)


@router.post(
    "/{code_id}/revoke",
    response_model=AccessCodeResponse,
    summary="Revoke an access code",
)
async def revoke_access_code(
    code_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> AccessCodeResponse:
    await gate.require_access_code_creator(db, code_id, principal)
    code = await access_code_service.revoke(db, code_id, principal.sub)
    return AccessCodeResponse.from_model(code)


@router.get(
    "/property/{property_id}",
    response_model=AccessCodeListResponse,
    summary="List the access codes of one of the caller's properties",
)
async def list_property_access_codes(
    property_id: uuid.UUID,
    page: Page = Depends(get_page),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> AccessCodeListResponse:
    await gate.require_property_owner(db, property_id, principal)
    items, total = await access_code_service.list_property_codes(db, property_id, page.skip, page.limit)
    return _page_response(items, total, page)


@router.get(
    "/mine",
    response_model=AccessCodeListResponse,
    summary="List active codes issued to the caller's e-mail",
)
async def list_my_access_codes(
    page: Page = Depends(get_page),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> AccessCodeListResponse:
    if principal.email is None:
        raise InvalidInputError("The authenticated principal has no e-mail address")
    items, total = await access_code_service.list_active_codes_for_email(
        db, principal.email, page.skip, page.limit
    )
    return _page_response(items, total, page)
