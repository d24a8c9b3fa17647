"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and framework
exceptions to the error envelope {success: false, message, error, details?}.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.domain.exceptions import DependencyException, FleetflowException

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status
_ERROR_CODE_STATUS: dict[str, int] = {
    "AUTHENTICATION_ERROR": 401,
    "PERMISSION_DENIED": 403,
    "TENANT_ACCESS_DENIED": 403,
    "SYSTEM_ROLE_PROTECTED": 403,
    "VALIDATION_ERROR": 400,
    "ROLE_ALREADY_EXISTS": 409,
    "DUPLICATE_ASSIGNMENT": 409,
    "ROLE_IN_USE": 409,
    "USER_ALREADY_EXISTS": 409,
    "RESOURCE_NOT_FOUND": 404,
    "DEPENDENCY_FAILURE": 500,
}


def _envelope(
    status_code: int,
    message: str,
    error: str,
    details: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    content: dict[str, Any] = {"success": False, "message": message, "error": error}
    if details:
        content["details"] = jsonable_encoder(details)
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def _fleetflow_exception_handler(request: Request, exc: FleetflowException) -> JSONResponse:
    """Envelope from the exception's message, error_code and details."""
    status = _ERROR_CODE_STATUS.get(exc.error_code, 400)
    headers = {"WWW-Authenticate": "Bearer"} if status == 401 else None
    return _envelope(status, exc.message, exc.error_code, exc.details, headers)


def _dependency_exception_handler(request: Request, exc: DependencyException) -> JSONResponse:
    """Backing store failures: 500 without internal detail."""
    logger.error(
        "Dependency failure (%s) on %s %s",
        exc.details.get("dependency"),
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return _envelope(500, "Service temporarily unavailable", exc.error_code)


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 400 with validation error details."""
    return _envelope(
        400,
        "Request validation failed",
        "VALIDATION_ERROR",
        {"errors": exc.errors()},
    )


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return the envelope for Starlette HTTP exceptions (status + detail)."""
    return _envelope(exc.status_code, str(exc.detail), "HTTP_ERROR", headers=exc.headers)


def _rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return _envelope(429, f"Rate limit exceeded: {exc.detail}", "RATE_LIMITED")


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    message = str(exc) if settings.debug else "Internal server error"
    return _envelope(500, message, "INTERNAL_ERROR")


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Call once after creating the app. Handlers: DependencyException,
    FleetflowException (and subclasses), RequestValidationError,
    RateLimitExceeded, StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(DependencyException, _dependency_exception_handler)
    app.add_exception_handler(FleetflowException, _fleetflow_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
