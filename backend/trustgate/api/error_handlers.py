"""Error Handlers — global exception handlers for the Trustgate API.

Invariants:
    - TrustgateError answers with its own status: 404 not found, 409 duplicate,
      503 database, 500 internal
    - Log level follows the error category; not-found never logs at ERROR
    - Log records carry list_id/item_id from the error's ErrorContext
    - RequestValidationError → 400 with one detail per invalid field
    - Anything else → the same INTERNAL_ERROR envelope the routes return

Design Decisions:
    - Trusted apps routes catch their own failures; these handlers cover
      errors raised outside them (dependency setup, session commit)
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from trustgate.core.errors import (
    ErrorCategory,
    ErrorSeverity,
    InternalServerError,
    TrustgateError,
)
from trustgate.infrastructure.observability import error_log_extra

logger = logging.getLogger(__name__)

LOG_LEVEL_BY_CATEGORY = {
    ErrorCategory.RESOURCE_NOT_FOUND: logging.INFO,
    ErrorCategory.VALIDATION: logging.WARNING,
    ErrorCategory.CONFLICT: logging.WARNING,
    ErrorCategory.DATABASE: logging.ERROR,
    ErrorCategory.INTERNAL: logging.ERROR,
}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    app.add_exception_handler(TrustgateError, trustgate_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


async def trustgate_error_handler(request: Request, exc: TrustgateError):
    level = LOG_LEVEL_BY_CATEGORY.get(exc.category, logging.ERROR)
    logger.log(
        level,
        f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
        extra=error_log_extra(exc, path=request.url.path),
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def validation_error_handler(request: Request, exc: RequestValidationError):
    details = _validation_details(exc)
    logger.warning(
        f"Rejected {request.method} {request.url.path}: "
        f"{', '.join(d['field'] for d in details)}",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid request data",
                "category": ErrorCategory.VALIDATION.value,
                "severity": ErrorSeverity.ERROR.value,
                "details": details,
            },
        },
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    """Catch-all. The response never includes the exception text."""
    error = InternalServerError()
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}",
        exc_info=exc,
        extra=error_log_extra(error, path=request.url.path),
    )
    return JSONResponse(status_code=error.http_status, content=error.to_response())


def _validation_details(exc: RequestValidationError) -> list[dict]:
    """One entry per error; location (body/query/path) split from the field path."""
    details = []
    for e in exc.errors():
        location, *field_path = e["loc"] or ("body",)
        details.append({
            "location": str(location),
            "field": ".".join(str(p) for p in (location, *field_path)),
            "message": e["msg"],
            "type": e["type"],
        })
    return details
