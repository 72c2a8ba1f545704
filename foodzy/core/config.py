"""
Application Configuration Module

Centralizes all configuration using environment variables with Pydantic Settings.
Supports three modes:
    - DEVELOPMENT: Local data gateway (SQLite) and mock email, no API keys needed
    - STAGING: Hosted backend (Supabase) and real providers with test projects
    - PRODUCTION: Hosted backend (Supabase) and real providers

The ENV_MODE variable controls which gateway and services are instantiated
throughout the application.

Usage:
    from foodzy.core.config import get_settings

    settings = get_settings()
    if settings.use_real_services:
        # Supabase, SendGrid
    else:
        # Local gateway, mock email
"""

import logging
import sys
from enum import Enum
from typing import Optional
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentMode(str, Enum):
    """
    Application environment modes.

    Attributes:
        DEVELOPMENT: Local gateway and mock services
        PRODUCTION: Hosted backend and real API integrations
        STAGING: Hosted backend with test projects and keys
    """
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    STAGING = "staging"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    Service-role keys must never be committed to version control.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # ENVIRONMENT
    # ==========================================================================

    env_mode: EnvironmentMode = Field(
        default=EnvironmentMode.DEVELOPMENT,
        description="Application environment mode"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging"
    )

    # ==========================================================================
    # APPLICATION
    # ==========================================================================

    app_name: str = Field(
        default="FoodZy",
        description="Application display name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host"
    )
    api_port: int = Field(
        default=8001,
        description="API server port"
    )
    app_base_url: str = Field(
        default="http://localhost:8001",
        description="Public base URL, used for local media links"
    )

    # ==========================================================================
    # LOCAL DATA GATEWAY
    # ==========================================================================

    database_url: Optional[str] = Field(
        default=None,
        description="SQLAlchemy async URL for the local gateway; defaults to a SQLite file in data_directory"
    )
    data_directory: str = Field(
        default="data",
        description="Directory for the local database and uploaded media"
    )
    password_hash_rounds: int = Field(
        default=12,
        description="bcrypt cost factor for the local auth directory"
    )

    # ==========================================================================
    # SUPABASE (HOSTED BACKEND)
    # ==========================================================================

    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL"
    )
    supabase_anon_key: Optional[str] = Field(
        default=None,
        description="Supabase anon (public) key"
    )
    supabase_service_role_key: Optional[str] = Field(
        default=None,
        description="Supabase service-role key, needed for the user directory"
    )
    supabase_storage_bucket: str = Field(
        default="food-images",
        description="Storage bucket for menu and banner images"
    )

    # ==========================================================================
    # SENDGRID (EMAIL)
    # ==========================================================================

    sendgrid_api_key: Optional[str] = Field(
        default=None,
        description="SendGrid API Key"
    )
    sendgrid_from_email: str = Field(
        default="hello@foodzy.app",
        description="From email address for SendGrid"
    )

    # ==========================================================================
    # HOSTED INFERENCE
    # ==========================================================================

    huggingface_api_key: Optional[str] = Field(
        default=None,
        description="HuggingFace Inference API token"
    )
    huggingface_model_url: str = Field(
        default="https://api-inference.huggingface.co/models/facebook/blenderbot-400M-distill",
        description="Text-generation model endpoint"
    )
    libretranslate_url: str = Field(
        default="https://libretranslate.com",
        description="LibreTranslate base URL"
    )
    libretranslate_api_key: Optional[str] = Field(
        default=None,
        description="LibreTranslate API key (optional for self-hosted)"
    )
    voice_enabled: bool = Field(
        default=True,
        description="Accept browser speech-recognition transcripts"
    )

    # ==========================================================================
    # BUSINESS CONFIGURATION
    # ==========================================================================

    restaurant_name: str = Field(
        default="FoodZy",
        description="Restaurant display name"
    )
    banner_rotation_seconds: float = Field(
        default=5.0,
        description="Carousel auto-advance interval"
    )
    banner_tick_seconds: float = Field(
        default=1.0,
        description="Countdown refresh interval"
    )
    chat_match_limit: int = Field(
        default=3,
        description="Food items fetched per chatbot keyword lookup"
    )

    # ==========================================================================
    # VALIDATORS
    # ==========================================================================

    @field_validator("env_mode", mode="before")
    @classmethod
    def validate_env_mode(cls, v: str) -> EnvironmentMode:
        """Convert string to EnvironmentMode enum."""
        if isinstance(v, EnvironmentMode):
            return v
        try:
            return EnvironmentMode(v.lower())
        except ValueError:
            valid = [e.value for e in EnvironmentMode]
            raise ValueError(f"Invalid env_mode. Must be one of: {valid}")

    # ==========================================================================
    # COMPUTED PROPERTIES
    # ==========================================================================

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.env_mode == EnvironmentMode.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.env_mode == EnvironmentMode.PRODUCTION

    @property
    def use_real_services(self) -> bool:
        """Check if the hosted backend and real providers should be used."""
        return self.env_mode in (EnvironmentMode.PRODUCTION, EnvironmentMode.STAGING)

    @property
    def media_directory(self) -> Path:
        """Directory the local gateway stores uploads in."""
        return Path(self.data_directory) / "media"

    @property
    def local_database_url(self) -> str:
        """Configured database URL, or the SQLite file inside ``data_directory``."""
        if self.database_url:
            return self.database_url
        return f"sqlite+aiosqlite:///{Path(self.data_directory) / 'foodzy.db'}"

    # ==========================================================================
    # VALIDATION METHODS
    # ==========================================================================

    def validate_production_config(self) -> list[str]:
        """
        Validate that all required production settings are configured.

        Returns:
            List of missing configuration keys (empty if all present)
        """
        missing = []

        if self.use_real_services:
            if not self.supabase_url:
                missing.append("SUPABASE_URL")
            if not self.supabase_anon_key:
                missing.append("SUPABASE_ANON_KEY")
            if not self.supabase_service_role_key:
                missing.append("SUPABASE_SERVICE_ROLE_KEY")
            if not self.sendgrid_api_key:
                missing.append("SENDGRID_API_KEY")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Settings are loaded once per process; call ``get_settings.cache_clear()``
    after changing the environment in tests.
    """
    return Settings()


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Configure application-wide logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)

    Returns:
        Configured package logger
    """
    settings = get_settings()

    if settings.debug:
        level = logging.DEBUG

    log_format = "%(asctime)s │ %(levelname)-8s │ %(name)-25s │ %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt=date_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("realtime").setLevel(logging.WARNING)

    return logging.getLogger("foodzy")
