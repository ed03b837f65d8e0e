"""FastAPI application entry point."""

import logging

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from muebleria_api import __version__
from muebleria_api.config import get_settings
from muebleria_api.exceptions import MuebleriaAPIError
from muebleria_api.middleware.error_handler import (
    generic_exception_handler,
    http_exception_handler,
    muebleria_exception_handler,
    rate_limit_exceeded_handler,
    sqlalchemy_exception_handler,
    validation_exception_handler,
)
from muebleria_api.routers import access_rules, accounts, auth, branches, categories
from muebleria_api.security.rate_limit import limiter

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to all responses."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if "Cache-Control" not in response.headers:
            response.headers["Cache-Control"] = "no-store, max-age=0"
        response.headers.setdefault("Vary", "Accept, Authorization, Origin")
        if not get_settings().debug:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response


def _allowed_origins() -> list[str]:
    """Validated CORS origins. Wildcards are rejected since credentials are allowed."""
    config = get_settings()
    origins = []
    for origin in config.cors_origins_list:
        if origin == "*":
            raise ValueError(
                "CORS_ORIGINS cannot contain '*' wildcard when allow_credentials=True. "
                "Specify explicit origins."
            )
        if origin.startswith(("http://", "https://")):
            origins.append(origin)
    return origins


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    config = get_settings()

    app = FastAPI(
        title=config.app_name,
        version=__version__,
        description="Muebleria staff accounts, access control and store catalog API",
        docs_url="/docs" if config.debug else None,
        redoc_url="/redoc" if config.debug else None,
    )

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # Domain errors first, then sanitized fallbacks
    app.add_exception_handler(MuebleriaAPIError, muebleria_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    # Middleware runs in reverse order of addition: CORS first on requests
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_allowed_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Requested-With"],
    )

    app.include_router(auth.router, prefix="/api/v1/auth", tags=["Authentication"])
    app.include_router(accounts.router, prefix="/api/v1/accounts", tags=["Accounts"])
    app.include_router(access_rules.router, prefix="/api/v1/accounts", tags=["Access Rules"])
    app.include_router(branches.router, prefix="/api/v1/branches", tags=["Branches"])
    app.include_router(categories.router, prefix="/api/v1/categories", tags=["Categories"])

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    logger.info("Application %s %s configured (%s)", config.app_name, __version__, config.environment)
    return app


app = create_app()
