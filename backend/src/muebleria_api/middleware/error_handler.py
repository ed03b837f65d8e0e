"""Global error handlers.

Every error response has the body ``{"error": <category>, "message": <text>}``.
Messages of unexpected errors are sanitized to prevent information disclosure.
"""

import logging
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from muebleria_api.config import get_settings
from muebleria_api.exceptions import MuebleriaAPIError

logger = logging.getLogger(__name__)

# Safe error categories, by status code
SAFE_ERROR_MESSAGES = {
    400: "Invalid request",
    401: "Authentication required",
    403: "Access denied",
    404: "Resource not found",
    405: "Method not allowed",
    409: "Conflict",
    422: "Invalid input data",
    429: "Too many requests",
    500: "Internal server error",
    503: "Service temporarily unavailable",
}

# Messages that do not reveal implementation details
ALLOWED_ERROR_PATTERNS = [
    "Invalid credentials",
    "Authentication required",
    "Not authenticated",
    "Access denied",
    "Insufficient permissions",
    "Resource not found",
    "Not Found",
    "Method Not Allowed",
    "Invalid or expired token",
]


def error_body(error: str, message: str) -> dict[str, str]:
    """Build the error response body."""
    return {"error": error, "message": message}


def _category(status_code: int) -> str:
    return SAFE_ERROR_MESSAGES.get(status_code, "Request failed")


def is_safe_error_message(message: str) -> bool:
    """Check if an error message is safe to expose to users.

    Args:
        message: Error message to check

    Returns:
        True if message is safe to expose
    """
    message_lower = message.lower()
    return any(pattern.lower() in message_lower for pattern in ALLOWED_ERROR_PATTERNS)


def sanitize_error_detail(detail: Any, status_code: int) -> str:
    """Sanitize error detail to prevent information disclosure.

    Args:
        detail: Original error detail
        status_code: HTTP status code

    Returns:
        Safe error message
    """
    if isinstance(detail, str):
        if is_safe_error_message(detail):
            return detail
    elif isinstance(detail, (list, tuple)):
        # Validation errors: field name and message only
        safe_errors = []
        for error in detail:
            if isinstance(error, dict):
                loc = error.get("loc", [])
                msg = error.get("msg", "Invalid value")
                field = loc[-1] if loc else "field"
                if isinstance(field, str) and not field.startswith("_"):
                    safe_errors.append(f"{field}: {msg}")
        if safe_errors:
            return "; ".join(safe_errors[:3])

    return _category(status_code)


async def muebleria_exception_handler(request: Request, exc: MuebleriaAPIError) -> JSONResponse:
    """Render domain exceptions with their category and message.

    Args:
        request: FastAPI request
        exc: Domain exception

    Returns:
        JSONResponse with the exception's status code
    """
    if exc.status_code >= 500:
        logger.error(f"Domain error for {request.url.path}: {exc.message}")
    else:
        logger.info(f"{exc.status_code} {type(exc).__name__} for {request.url.path}: {exc.message}")

    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.category, exc.message),
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions with sanitized messages.

    Args:
        request: FastAPI request
        exc: HTTP exception

    Returns:
        JSONResponse with sanitized error
    """
    if get_settings().debug:
        message = str(exc.detail)
    else:
        message = sanitize_error_detail(exc.detail, exc.status_code)

    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(_category(exc.status_code), message),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request validation errors with sanitized messages.

    Args:
        request: FastAPI request
        exc: Validation exception

    Returns:
        JSONResponse with sanitized error
    """
    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_body(
            SAFE_ERROR_MESSAGES[422],
            sanitize_error_detail(exc.errors(), status.HTTP_422_UNPROCESSABLE_ENTITY),
        ),
    )


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Handle rate limit violations. Includes a Retry-After header."""
    logger.warning(f"Rate limit exceeded for {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content=error_body(SAFE_ERROR_MESSAGES[429], "Rate limit exceeded"),
        headers={"Retry-After": "60"},
    )


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Handle SQLAlchemy exceptions without leaking database details.

    Unique violations that slipped past the service checks (for example two
    concurrent rules for the same day) surface as 409.

    Args:
        request: FastAPI request
        exc: SQLAlchemy exception

    Returns:
        JSONResponse with safe error
    """
    logger.error(f"Database error for {request.url.path}: {exc}", exc_info=True)

    if isinstance(exc, IntegrityError):
        text = str(exc).lower()
        if "unique" in text or "duplicate" in text:
            return JSONResponse(
                status_code=status.HTTP_409_CONFLICT,
                content=error_body(SAFE_ERROR_MESSAGES[409], "Resource already exists"),
            )
        if "foreign key" in text:
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content=error_body(SAFE_ERROR_MESSAGES[400], "Referenced resource not found"),
            )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(SAFE_ERROR_MESSAGES[500], "Database error occurred"),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions without leaking information.

    Args:
        request: FastAPI request
        exc: Unexpected exception

    Returns:
        JSONResponse with generic error
    """
    logger.error(f"Unhandled exception for {request.url.path}: {exc}", exc_info=True)

    message = f"{type(exc).__name__}: {exc}" if get_settings().debug else SAFE_ERROR_MESSAGES[500]
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(SAFE_ERROR_MESSAGES[500], message),
    )
