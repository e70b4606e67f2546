"""Identity echo for the authenticated caller."""

from fastapi import APIRouter, Depends

from staybook.api.deps import Principal, get_current_principal
from staybook.schemas.common import PrincipalResponse

router = APIRouter(prefix="/api/v1", tags=["me"])


@router.get("/me", response_model=PrincipalResponse, summary="Who am I")
async def me(principal: Principal = Depends(get_current_principal)) -> PrincipalResponse:
    return PrincipalResponse(sub=principal.sub, email=principal.email)
