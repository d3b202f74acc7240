"""
Configuration Settings

This module defines application configuration using Pydantic Settings.
All configuration is loaded from environment variables or .env file.

Design Decisions:
- Uses pydantic-settings for type-safe configuration
- Supports multiple environments (production, staging, dev)
- Defaults to SQLite (file-based) for easy local development
- Can be switched to another async driver via DATABASE_URL
"""

from __future__ import annotations

import string
from enum import Enum
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["Settings", "settings"]

BASE_DIR = Path(__file__).resolve().parent.parent.parent


class EnvSettingsOptions(Enum):
    """Environment options for deployment."""
    production = "production"
    staging = "staging"
    development = "dev"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Project Configuration
    ENV_SETTING: EnvSettingsOptions = Field(
        default=EnvSettingsOptions.development,
        description="Environment setting (production, staging, dev)"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Level for the 'shortlinks' logger"
    )

    # Database Configuration
    # For SQLite: sqlite+aiosqlite:///./shortlinks.db (default)
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./shortlinks.db",
        description="Database connection string"
    )
    DATABASE_BUSY_TIMEOUT: float = Field(
        default=30.0,
        description="Seconds a connection waits for a locked database before failing"
    )
    AUTO_CREATE_TABLES: bool = Field(
        default=True,
        description="Create missing tables on startup (use alembic in production)"
    )

    # Application Configuration
    BASE_URL: str = Field(
        default="http://localhost:8000",
        description="Base URL for generating short URLs"
    )
    OWNER_HEADER: str = Field(
        default="X-Owner-Id",
        description="Header carrying the authenticated principal, set by the auth gateway"
    )
    STORE_RETRY_AFTER_SECONDS: int = Field(
        default=1,
        description="Retry-After value sent when the record store is unavailable"
    )

    # Short ID Configuration
    # Lengths 4-6 overlap fixed routes (/urls, /health, /docs, /redoc); the
    # allocator never issues those names
    SHORT_ID_LENGTH: int = Field(
        default=8,
        ge=1,
        description="Fixed length for all short ids"
    )
    SHORT_ID_ALPHABET: str = Field(
        default=string.ascii_letters + string.digits,
        min_length=2,
        description="Characters short ids are drawn from"
    )


settings = Settings()
