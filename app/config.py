# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.SUPABASE_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# Supabase credentials are optional at load time: the API still starts without
# them and the auth endpoints answer with a configuration error instead.
# =============================================================================

from functools import lru_cache
from typing import Literal, Optional
from urllib.parse import urlparse

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses pydantic-settings to:
    - Automatically load from .env file
    - Validate types and constraints
    - Provide sensible defaults for development

    Route handlers receive settings through the `get_settings` dependency.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # Checked on every auth request before anything else is processed

    SUPABASE_URL: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: Optional[str] = Field(
        default=None,
        description="Supabase anon/public API key"
    )

    # -------------------------------------------------------------------------
    # Session Cookies
    # -------------------------------------------------------------------------

    SESSION_COOKIE_MAX_AGE: int = Field(
        default=60 * 60 * 24 * 7,
        ge=0,
        description="Default lifetime of session cookies in seconds (7 days)"
    )

    COOKIE_SECURE: Optional[bool] = Field(
        default=None,
        description="Force the Secure cookie flag (defaults to on in production only)"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging)"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:4321",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        # Blank variables count as unset
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def is_supabase_configured(self) -> bool:
        """True when both the project URL and the anon key are present."""
        return bool(self.SUPABASE_URL and self.SUPABASE_ANON_KEY)

    @property
    def auth_cookie_name(self) -> Optional[str]:
        """
        Session cookie name used by Supabase's browser and SSR clients.

        Example: "https://abcdefgh.supabase.co" -> "sb-abcdefgh-auth-token"
        """
        if not self.SUPABASE_URL:
            return None
        hostname = urlparse(self.SUPABASE_URL).hostname
        if not hostname:
            return None
        return f"sb-{hostname.split('.')[0]}-auth-token"

    @property
    def cookie_secure(self) -> bool:
        """
        Secure flag for session cookies.

        An explicit COOKIE_SECURE wins; otherwise cookies are only marked
        Secure in production so local http development keeps working.
        """
        if self.COOKIE_SECURE is not None:
            return self.COOKIE_SECURE
        return self.is_production

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:4321, https://awards.example.com"
            -> ["http://localhost:4321", "https://awards.example.com"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every request. Also used as a FastAPI dependency so tests
    can swap in their own Settings via dependency_overrides.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
