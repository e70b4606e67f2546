"""FastAPI dependency resolving the authenticated principal from a Bearer token."""

from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from staybook.auth.jwt import decode_token
from staybook.config import settings

_bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    """The authenticated caller. ``email`` is the verified token claim, if any."""

    sub: str
    email: str | None = None


async def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
) -> Principal:
    """Validate the Bearer token and return the caller's identity.

    Raises:
        HTTPException 401: If the token is missing, invalid, expired, of the
            wrong type, or has no subject.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        raise credentials_exception

    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        raise credentials_exception from None

    # Identity-provider tokens may omit "type"; refresh tokens must not pass.
    token_type: str | None = payload.get("type")
    if token_type is not None and token_type != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type",
            headers={"WWW-Authenticate": "Bearer"},
        )

    sub = payload.get("sub")
    if not sub or not isinstance(sub, str):
        raise credentials_exception

    email = payload.get(settings.jwt_email_claim)
    if not isinstance(email, str) or not email.strip():
        email = None

    return Principal(sub=sub, email=email)
