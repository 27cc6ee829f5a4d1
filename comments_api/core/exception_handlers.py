"""Global exception handlers for consistent error responses.

Every failure leaves the API as JSON with an ``error`` message string, a
machine-readable ``code`` and the ``request_id`` of the call.

Design:
- ValidationAppError / SpamRejectedError → 400
- RateLimitedError → 429 (with Retry-After when known)
- StorageAppError → 500
- Malformed request bodies → 400
- Unexpected Exception → generic 500 (safety net)
"""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from comments_api.core.config import settings
from comments_api.core.errors import AppError, RateLimitedError, StorageAppError
from comments_api.core.logging import get_request_id

logger = logging.getLogger(__name__)


def _status_for(exc: AppError) -> int:
    if isinstance(exc, RateLimitedError):
        return 429
    if isinstance(exc, StorageAppError):
        return 500
    return 400


def _error_body(code: str, message: str) -> dict:
    return {
        "error": message,
        "code": code,
        "request_id": get_request_id(),
    }


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle domain application errors with consistent JSON format.

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        JSONResponse with appropriate status code and error details.
    """
    status_code = _status_for(exc)

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": status_code,
            "has_details": bool(exc.details),
            "request_path": request.url.path,
            "request_method": request.method,
        },
    )

    content = _error_body(exc.code, exc.message)
    if exc.details:
        content["details"] = exc.details

    headers: dict[str, str] | None = None
    if isinstance(exc, RateLimitedError) and settings.app.rate_limit_include_headers:
        retry_after = (exc.details or {}).get("retry_after")
        if retry_after is not None:
            headers = {"Retry-After": str(retry_after)}

    return JSONResponse(status_code=status_code, content=content, headers=headers)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Map malformed bodies/params to a 400 in the same error shape."""
    logger.warning(
        "request_validation_failed",
        extra={
            "error_count": len(exc.errors()),
            "request_path": request.url.path,
            "request_method": request.method,
        },
    )
    return JSONResponse(
        status_code=400,
        content=_error_body("invalid_request", "Invalid request body"),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors (safety net).

    Logs detailed information for debugging while returning a generic message,
    so no stack traces or internals reach the client.
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
            "request_id": get_request_id(),
        }
    )

    return JSONResponse(
        status_code=500,
        content=_error_body(
            "internal_server_error",
            "An unexpected error occurred. Please try again later.",
        ),
    )


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance.
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(RequestValidationError)(request_validation_handler)
    app.exception_handler(Exception)(general_exception_handler)
