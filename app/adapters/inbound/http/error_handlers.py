"""Map pipeline failures to HTTP responses."""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from app.adapters.inbound.http.schemas import ErrorResponse
from app.domain.errors import (
    Conflict,
    NotFound,
    PermissionDenied,
    SalesConsoleError,
    TransportFailure,
    ValidationFailed,
)
from app.infrastructure.config.settings import settings
from app.infrastructure.logging.logger import logger

STATUS_BY_ERROR: tuple[tuple[type[SalesConsoleError], int], ...] = (
    (PermissionDenied, status.HTTP_403_FORBIDDEN),
    (ValidationFailed, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (NotFound, status.HTTP_404_NOT_FOUND),
    (Conflict, status.HTTP_409_CONFLICT),
    (TransportFailure, status.HTTP_502_BAD_GATEWAY),
)


def status_for(exc: SalesConsoleError) -> int:
    """HTTP status for a pipeline failure (500 for an unmapped kind)."""
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def sales_console_error_handler(request: Request, exc: SalesConsoleError) -> JSONResponse:
    """Render a pipeline failure as an ErrorResponse body."""
    status_code = status_for(exc)
    body = ErrorResponse(
        detail=exc.message,
        kind=exc.kind,
        field_errors=getattr(exc, "field_errors", {}),
    )
    if settings.debug_mode and isinstance(exc, TransportFailure):
        body.upstream_status = exc.status_code

    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.kind}: {exc.message}")

    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


def register_error_handlers(app: FastAPI) -> None:
    """
    Register the pipeline error handler on the application.

    Args:
        app: FastAPI application
    """
    app.add_exception_handler(SalesConsoleError, sales_console_error_handler)
