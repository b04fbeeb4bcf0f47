"""
==============================================================================
Application Settings Module
==============================================================================

Configuration management using Pydantic Settings.

A single cached Settings instance is shared by the whole application and
is handed to the managers that need it at construction time.

Configuration Priority (highest to lowest):
------------------------------------------
1. Environment variables
2. .env file
3. Default values

Security Considerations:
-----------------------
- Never commit .env files to version control
- Use a strong JWT_SECRET_KEY in production
- Change the default admin credentials immediately

==============================================================================
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Module logger
logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        app_name: Display name for the application
        app_env: Environment mode (development/staging/production)
        debug: Enable debug mode for verbose logging
        host: Server bind address
        port: Server port number
        database_url: SQLAlchemy connection string for the catalog store
        jwt_secret_key: Secret key for JWT token signing
        jwt_algorithm: Algorithm for JWT signing (e.g., HS256)
        access_token_expire_minutes: Access token lifetime in minutes
        refresh_token_expire_days: Refresh token lifetime in days
        default_admin_email: Initial back-office account email
        default_admin_password: Initial back-office account password
        create_default_admin: Seed the default admin on startup
        import_default_category: Category used for import rows without one
        import_default_price: Price used for import rows without one
        import_job_retention_minutes: How long finished import jobs stay pollable
        catalog_page_size: Default page size of the catalog listing
        variant_preview_count: Variants shown before "+N more"
        placeholder_image_url: Image shown when a product has none
        cors_origins: Allowed CORS origins (JSON array string)

    Example:
        >>> settings = Settings()
        >>> print(settings.app_name)
        'Storefront Catalog API'
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )

    # =========================================================================
    # APPLICATION SETTINGS
    # =========================================================================
    app_name: str = Field(
        default="Storefront Catalog API",
        description="Display name for the application"
    )

    app_env: str = Field(
        default="development",
        description="Environment mode: development, staging, production"
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode for verbose logging"
    )

    # =========================================================================
    # SERVER SETTINGS
    # =========================================================================
    host: str = Field(default="0.0.0.0", description="Server bind address")

    port: int = Field(default=8000, ge=1, le=65535, description="Server port number")

    # =========================================================================
    # DATABASE SETTINGS
    # =========================================================================
    database_url: str = Field(
        default="sqlite:///./storage/db/catalog.db",
        description="SQLAlchemy database connection string"
    )

    # =========================================================================
    # JWT AUTHENTICATION SETTINGS
    # =========================================================================
    jwt_secret_key: str = Field(
        default="change-this-in-production",
        min_length=16,
        description="Secret key for JWT token signing"
    )

    jwt_algorithm: str = Field(default="HS256", description="Algorithm for JWT signing")

    access_token_expire_minutes: int = Field(
        default=60,
        ge=1,
        le=1440,
        description="Access token lifetime in minutes"
    )

    refresh_token_expire_days: int = Field(
        default=7,
        ge=1,
        le=90,
        description="Refresh token lifetime in days"
    )

    # =========================================================================
    # DEFAULT ADMIN SETTINGS
    # =========================================================================
    default_admin_email: str = Field(
        default="admin@example.com",
        min_length=3,
        max_length=255,
        description="Initial back-office account email"
    )

    default_admin_password: str = Field(
        default="admin123",
        min_length=6,
        description="Initial back-office account password"
    )

    create_default_admin: bool = Field(
        default=True,
        description="Create the default admin account on startup"
    )

    # =========================================================================
    # CATALOG SETTINGS
    # =========================================================================
    import_default_category: str = Field(
        default="edit",
        min_length=1,
        description="Category name for import rows that carry none"
    )

    import_default_price: float = Field(
        default=10,
        ge=0,
        description="Price for import rows that carry none"
    )

    import_job_retention_minutes: int = Field(
        default=60,
        ge=1,
        description="Minutes a finished import job is kept for polling"
    )

    catalog_page_size: int = Field(
        default=32,
        ge=1,
        le=100,
        description="Default number of products per catalog page"
    )

    variant_preview_count: int = Field(
        default=2,
        ge=0,
        le=20,
        description="Variants listed before the '+N more' marker"
    )

    placeholder_image_url: str = Field(
        default="https://images.unsplash.com/photo-1542291026-7eec264c27ff",
        description="Image shown for products without one"
    )

    # =========================================================================
    # CORS SETTINGS
    # =========================================================================
    cors_origins: str = Field(
        default='["*"]',
        description="Allowed CORS origins as JSON array string"
    )

    # =========================================================================
    # VALIDATORS
    # =========================================================================
    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, value: str) -> str:
        """Normalize the environment name, falling back to development."""
        valid_envs = {"development", "staging", "production"}
        normalized = value.lower().strip()

        if normalized not in valid_envs:
            logger.warning(
                f"Unknown environment '{value}', defaulting to 'development'"
            )
            return "development"

        return normalized

    @field_validator("jwt_algorithm")
    @classmethod
    def validate_jwt_algorithm(cls, value: str) -> str:
        """
        Validate JWT algorithm is supported.

        Raises:
            ValueError: If algorithm is not supported
        """
        supported = {"HS256", "HS384", "HS512"}

        if value.upper() not in supported:
            raise ValueError(
                f"Unsupported JWT algorithm: {value}. "
                f"Supported: {', '.join(sorted(supported))}"
            )

        return value.upper()

    @field_validator("default_admin_email")
    @classmethod
    def normalize_admin_email(cls, value: str) -> str:
        return value.lower().strip()

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================
    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"

    @property
    def cors_origins_list(self) -> List[str]:
        """
        Parse CORS origins from JSON string to list.

        Returns:
            List of allowed origin strings
        """
        try:
            origins = json.loads(self.cors_origins)
            if isinstance(origins, list):
                return origins
            return ["*"]
        except json.JSONDecodeError:
            logger.warning(
                f"Invalid CORS origins JSON: {self.cors_origins}, "
                "defaulting to ['*']"
            )
            return ["*"]

    @property
    def access_token_expire_seconds(self) -> int:
        """Get access token expiry in seconds."""
        return self.access_token_expire_minutes * 60

    # =========================================================================
    # UTILITY METHODS
    # =========================================================================
    def get_database_path(self) -> Optional[Path]:
        """
        Extract database file path for SQLite databases.

        Returns:
            Path to database file, or None for non-SQLite or in-memory databases
        """
        if not self.database_url.startswith("sqlite:///"):
            return None
        db_path = self.database_url.replace("sqlite:///", "", 1)
        if db_path.startswith("./"):
            db_path = db_path[2:]
        return Path(db_path)

    def ensure_directories(self) -> None:
        """Create the SQLite database directory if needed."""
        db_path = self.get_database_path()
        if db_path:
            db_path.parent.mkdir(parents=True, exist_ok=True)

        logger.debug("Required directories created/verified")

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"Settings(app_name={self.app_name!r}, "
            f"app_env={self.app_env!r}, "
            f"debug={self.debug})"
        )


# =============================================================================
# SINGLETON INSTANCE MANAGEMENT
# =============================================================================

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get the global Settings instance.

    Uses lru_cache so only one Settings instance is created for the
    application lifecycle.

    Returns:
        Global Settings instance
    """
    settings = Settings()
    settings.ensure_directories()

    if settings.debug:
        logger.info(f"Configuration loaded: {settings}")

    return settings
