# =============================================================================
# axel/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from axel.config import get_settings
#   settings = get_settings()
#   print(settings.PORT)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in the working directory (if exists)
#
# Settings are read once at process start and frozen. The app factory takes
# the instance as an argument instead of importing a module-level global.
# =============================================================================

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

WILDCARD_ORIGIN = "*"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses pydantic-settings to:
    - Automatically load from .env file
    - Validate types and constraints
    - Provide sensible defaults for development

    Instances are immutable; assigning to a field raises a ValidationError.
    """

    # -------------------------------------------------------------------------
    # Listener
    # -------------------------------------------------------------------------

    PORT: int = Field(
        default=3000,
        ge=1,
        le=65535,
        description="TCP port the HTTP server binds to"
    )

    HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the HTTP server to"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    # Free-form label, only logged at startup
    NODE_ENV: str = Field(
        default="development",
        description="Current environment name"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug logging"
    )

    # -------------------------------------------------------------------------
    # Security
    # -------------------------------------------------------------------------

    # Comma-separated; unset means any origin is allowed
    ALLOWED_ORIGINS: str | None = Field(
        default=None,
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Request Limits
    # -------------------------------------------------------------------------

    MAX_BODY_SIZE_MB: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum request body size in MB"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        # Load from .env file in the working directory
        env_file=".env",
        env_file_encoding="utf-8",
        # Treat PORT= (empty) as unset so the default applies
        env_ignore_empty=True,
        # Case-sensitive environment variable names
        case_sensitive=True,
        # Unrelated variables in .env are not an error
        extra="ignore",
        frozen=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def allowed_origins_list(self) -> list[str]:
        """
        Parse ALLOWED_ORIGINS string into a list.

        Handles comma-separated values and strips whitespace. Falls back to
        the wildcard when nothing usable is configured.
        Example: "http://localhost:3000, https://myapp.com" -> ["http://localhost:3000", "https://myapp.com"]
        """
        if not self.ALLOWED_ORIGINS:
            return [WILDCARD_ORIGIN]
        origins = [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]
        return [origin for origin in origins if origin] or [WILDCARD_ORIGIN]

    @property
    def max_body_size_bytes(self) -> int:
        """
        Convert MB to bytes for request body size validation.
        """
        return self.MAX_BODY_SIZE_MB * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access. This is the recommended pattern for
    pydantic-settings.

    Returns:
        Settings: The application settings instance
    """
    return Settings()
