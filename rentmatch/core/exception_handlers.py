"""Global exception handlers for consistent error responses.

Design:
- AppError subclasses map to 400/401/403/404/409/429
- AdmissionDeniedError adds a Retry-After header (seconds)
- Unexpected Exception → generic 500 (safety net)
- All responses include request_id for distributed tracing
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from rentmatch.core.errors import (
    AdmissionDeniedError,
    AppError,
    AuthenticationAppError,
    ConcurrentAdmissionError,
    DuplicateIdError,
    NotFoundError,
    PermissionAppError,
    RequestAlreadyResolvedError,
)
from rentmatch.core.logging import get_request_id

logger = logging.getLogger(__name__)


def status_code_for(exc: AppError) -> int:
    """Pick the HTTP status for a domain error (default 400)."""
    if isinstance(exc, AuthenticationAppError):
        return 401
    if isinstance(exc, PermissionAppError):
        return 403
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, (DuplicateIdError, ConcurrentAdmissionError, RequestAlreadyResolvedError)):
        return 409
    if isinstance(exc, AdmissionDeniedError):
        return 429
    return 400


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle domain application errors with consistent JSON format.

    Response body::

        {"error": {"code", "message", "request_id", "details"?}}

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        JSONResponse with the mapped status code.
    """
    status_code = status_code_for(exc)

    logger.warning(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": status_code,
            "has_details": bool(exc.details),
            "request_path": request.url.path,
        },
    )

    error_content = {
        "code": exc.code,
        "message": exc.message,
        "request_id": get_request_id(),
    }
    if exc.details:
        error_content["details"] = exc.details

    headers: dict[str, str] = {}
    if isinstance(exc, AdmissionDeniedError):
        headers["Retry-After"] = str(exc.hours_remaining * 3600)
        error_content["hours_remaining"] = exc.hours_remaining

    return JSONResponse(
        status_code=status_code,
        content={"error": error_content},
        headers=headers or None,
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors.

    Logs the failure for debugging and returns a generic body so no
    implementation details reach the client.
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
        },
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "internal_server_error",
                "message": "An unexpected error occurred. Please try again later.",
                "request_id": get_request_id(),
            }
        },
    )


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance.
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(Exception)(general_exception_handler)
