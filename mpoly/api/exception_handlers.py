"""Centralized exception handlers for the FastAPI application.

Every failure leaves the server as::

    {"success": false, "message": "Human-readable error message"}

Store failures and unexpected exceptions are logged with full detail and
answered with a generic message; paths and tracebacks never reach clients.
"""

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from mpoly.errors import MpolyError, StoreError, TokenError
from mpoly.models.response import ErrorResponse

logger = structlog.get_logger(__name__)

ENDPOINT_NOT_FOUND = "Endpoint not found."
UNEXPECTED_ERROR = "Unexpected server error."


def _error_response(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(),
        headers=headers,
    )


async def mpoly_error_handler(request: Request, exc: MpolyError) -> JSONResponse:
    """Map domain errors to their status code and message."""
    if isinstance(exc, StoreError):
        logger.error(
            "store_error",
            code=exc.code,
            detail=exc.message,
            path=request.url.path,
        )
        return _error_response(exc.status_code, exc.public_message)

    headers = None
    if isinstance(exc, TokenError):
        headers = {"WWW-Authenticate": "Bearer"}

    logger.info(
        "request_rejected",
        code=exc.code,
        status_code=exc.status_code,
        path=request.url.path,
    )
    return _error_response(exc.status_code, exc.message, headers)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle malformed request bodies with a 400 and the first problem."""
    errors = exc.errors()
    if errors:
        first_error = errors[0]
        field = ".".join(str(loc) for loc in first_error.get("loc", ["unknown"]))
        message = f"Field '{field}': {first_error.get('msg', 'Validation failed')}"
    else:
        message = "Request validation failed"

    logger.warning("validation_error", detail=message, path=request.url.path)
    return _error_response(status.HTTP_400_BAD_REQUEST, message)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Wrap framework HTTP errors (unknown routes, wrong methods)."""
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        message = ENDPOINT_NOT_FOUND
    else:
        message = str(exc.detail)
    return _error_response(exc.status_code, message, getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_exception", path=request.url.path)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, UNEXPECTED_ERROR)


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the app."""
    app.add_exception_handler(MpolyError, mpoly_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
