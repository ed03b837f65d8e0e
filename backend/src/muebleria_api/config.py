"""Application configuration."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, PostgresDsn, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Minimum entropy for secrets (measured by character diversity)
MIN_SECRET_UNIQUE_CHARS = 16


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Muebleria Management API"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"

    # Database (required - no default for security)
    database_url: PostgresDsn = Field(
        description="PostgreSQL connection URL. Must be set via environment variable."
    )
    database_pool_size: int = 5
    database_max_overflow: int = 10

    # Security - JWT
    jwt_secret: str = Field(min_length=32)
    jwt_algorithm: str = "HS256"
    jwt_expiration_minutes: int = 480  # One working shift

    # Security - Password Policy
    password_min_length: int = 8

    # Access windows
    default_access_timezone: str = "America/Mexico_City"

    # CORS settings
    cors_origins: str = "http://localhost:3000"  # Comma-separated list

    # Reverse proxies allowed to set X-Forwarded-For (comma-separated IPs or CIDR ranges)
    trusted_proxies: str = ""

    # Rate limiting settings (requests per minute)
    rate_limit_enabled: bool = True
    rate_limit_default: int = 100
    rate_limit_auth_login: int = 5
    rate_limit_auth_password_change: int = 3
    rate_limit_account_create: int = 10

    @model_validator(mode="after")
    def validate_settings(self) -> "Settings":
        """Validate settings for security requirements."""
        if self.environment == "production" and self.debug:
            raise ValueError(
                "DEBUG mode cannot be enabled in production environment. "
                "This would expose API documentation and detailed error messages."
            )

        url = str(self.database_url)
        if not url.startswith(("postgresql://", "postgres://", "postgresql+asyncpg://")):
            raise ValueError(
                "DATABASE_URL must be a PostgreSQL URL starting with 'postgresql://' or 'postgres://'"
            )

        if self.environment == "production":
            if len(set(self.jwt_secret)) < MIN_SECRET_UNIQUE_CHARS:
                raise ValueError(
                    f"JWT_SECRET must contain at least {MIN_SECRET_UNIQUE_CHARS} unique characters "
                    "for sufficient entropy. Use a cryptographically random value."
                )

        return self

    @property
    def async_database_url(self) -> str:
        """Get async database URL for SQLAlchemy with asyncpg.

        Converts sslmode parameter to ssl for asyncpg compatibility.
        """
        url = str(self.database_url)
        if "+asyncpg" not in url:
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
            url = url.replace("postgres://", "postgresql+asyncpg://", 1)
        url = url.replace("sslmode=", "ssl=")
        return url

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def trusted_proxies_list(self) -> list[str]:
        """Get trusted proxies as a list."""
        return [proxy.strip() for proxy in self.trusted_proxies.split(",") if proxy.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
