"""Application configuration with Pydantic Settings.

This module provides centralized configuration management using pydantic-settings.
Settings are loaded from environment variables and .env files.

Examples:
    >>> from draftboard.config import get_settings
    >>> settings = get_settings()
    >>> settings.SIGNED_URL_TTL_SECONDS
    3600

Tests:
    - tests/unit/test_config.py::TestSettings
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from draftboard.storage.config import StorageConfig

DEFAULT_JWT_SECRET = "change-me-in-production"


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class StorageBackendType(str, Enum):
    """Supported blob store backends."""

    LOCAL = "local"
    MEMORY = "memory"


class Settings(BaseSettings):
    """Application settings.

    Settings are loaded from environment variables and .env file.

    Attributes:
        DATABASE_URL: Database connection string (SQLite or PostgreSQL)
        JWT_SECRET_KEY: Secret for access tokens (and image URLs if no signing key)
        ADMIN_API_KEY: Enables the dev token endpoint when set
        STORAGE_BACKEND: Blob store backend (local or memory)
        SIGNED_URL_TTL_SECONDS: Lifetime of signed image URLs
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Database
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./draftboard.db",
        description="Database connection string",
    )

    # Application Settings
    ENVIRONMENT: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )
    DEBUG: bool = Field(
        default=True,
        description="Enable debug mode",
    )
    CORS_ORIGINS: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins",
    )

    # Auth
    JWT_SECRET_KEY: str = Field(
        default=DEFAULT_JWT_SECRET,
        description="HS256 secret for access tokens",
    )
    JWT_ACCESS_EXPIRE_MINUTES: int = Field(
        default=60,
        description="Access token lifetime in minutes",
    )
    ADMIN_API_KEY: str = Field(
        default="",
        description="Admin key for dev token issuance (empty disables)",
    )

    # Blob storage
    STORAGE_BACKEND: StorageBackendType = Field(
        default=StorageBackendType.LOCAL,
        description="Blob store backend",
    )
    STORAGE_ROOT: str = Field(
        default="./output/blobs",
        description="Root directory for the local blob store",
    )
    STORAGE_BUCKET: str = Field(
        default="post-images",
        description="Bucket (subdirectory) holding post images",
    )
    SIGNING_SECRET_KEY: str | None = Field(
        default=None,
        description="Secret for signed image URLs (defaults to JWT_SECRET_KEY)",
    )
    SIGNED_URL_TTL_SECONDS: int = Field(
        default=3600,
        ge=1,
        description="Signed image URL lifetime in seconds",
    )
    PUBLIC_BASE_URL: str = Field(
        default="http://localhost:8000",
        description="Base URL used when minting signed image URLs",
    )
    MAX_IMAGE_BYTES: int = Field(
        default=10 * 1024 * 1024,
        ge=1,
        description="Maximum accepted image upload size",
    )

    # Notifications
    NOTIFICATION_DURATION_MS: int = Field(
        default=3000,
        ge=0,
        description="Default notification lifetime in milliseconds",
    )

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL format."""
        valid_prefixes = ("sqlite", "postgresql", "postgres")
        if not any(v.startswith(prefix) for prefix in valid_prefixes):
            raise ValueError(
                f"DATABASE_URL must start with one of: {valid_prefixes}"
            )
        return v

    @field_validator("PUBLIC_BASE_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @model_validator(mode="after")
    def require_secret_in_production(self) -> "Settings":
        """Refuse to sign tokens and image URLs with the placeholder secret in production."""
        if self.is_production and self.JWT_SECRET_KEY == DEFAULT_JWT_SECRET:
            raise ValueError("JWT_SECRET_KEY must be set in production")
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT == Environment.PRODUCTION

    @property
    def is_sqlite(self) -> bool:
        """Check if using SQLite database."""
        return self.DATABASE_URL.startswith("sqlite")

    def get_storage_config(self) -> StorageConfig:
        """Build the blob storage configuration.

        Returns:
            StorageConfig with the signing secret resolved.
        """
        return StorageConfig(
            root=self.STORAGE_ROOT,
            bucket=self.STORAGE_BUCKET,
            signing_secret=self.SIGNING_SECRET_KEY or self.JWT_SECRET_KEY,
            signed_url_ttl_seconds=self.SIGNED_URL_TTL_SECONDS,
            public_base_url=self.PUBLIC_BASE_URL,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: The application settings.
    """
    return Settings()
