"""Translate domain errors into HTTP responses."""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from staybook.exceptions import ConflictError, ErrorKind, StaybookError
from staybook.schemas.common import ErrorResponse

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INVALID_STATE: status.HTTP_409_CONFLICT,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
}


async def handle_staybook_error(request: Request, exc: StaybookError) -> JSONResponse:
    body = ErrorResponse(
        detail=exc.message,
        kind=exc.kind.value,
        retryable=isinstance(exc, ConflictError) and exc.retryable,
    )
    return JSONResponse(status_code=STATUS_BY_KIND[exc.kind], content=body.model_dump())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StaybookError, handle_staybook_error)  # type: ignore[arg-type]
