"""Pydantic v2 schemas shared across endpoints."""

from pydantic import BaseModel


class MessageResponse(BaseModel):
    """Simple acknowledgement body."""

    message: str


class ErrorResponse(BaseModel):
    """Body returned for every domain error."""

    detail: str
    kind: str
    retryable: bool = False


class PrincipalResponse(BaseModel):
    """The caller's identity as resolved from the access token."""

    sub: str
    email: str | None = None
