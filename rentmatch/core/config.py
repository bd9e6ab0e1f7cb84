"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Map environments to their respective .env files (relative to PROJECT_ROOT)
ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

# Select the .env file for the current environment
_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Load .env file early to populate os.environ before creating nested settings
# This is necessary because Pydantic nested BaseSettings don't inherit env_file
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )
    title: str = Field(
        "RentMatch API",
        description="Title shown in the OpenAPI document",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class AuthSettings(BaseSettings):
    """Bearer token verification.

    Tokens are issued elsewhere; this service only verifies them.
    """

    required: bool = Field(
        True,
        description="Whether a valid bearer token is required on protected routes",
    )
    jwt_secret: str | None = Field(
        None,
        description="Shared secret used to verify HS* signed tokens",
    )
    jwt_algorithm: str = Field(
        "HS256",
        description="Signing algorithm accepted when decoding tokens",
    )

    model_config = SettingsConfigDict(
        env_prefix="AUTH_",
        case_sensitive=False,
    )


class RequestPolicySettings(BaseSettings):
    """Rent-request admission and expiry policy."""

    cooldown_policy: Literal["rolling", "pending"] = Field(
        "rolling",
        description=(
            "Pairwise cooldown policy: 'rolling' blocks a pair for cooldown_hours "
            "after any request, 'pending' blocks while the pair has a pending request"
        ),
    )
    cooldown_hours: int = Field(
        24,
        description="Hours an owner must wait before requesting the same tenant again",
        ge=1,
    )
    max_active_pending: int = Field(
        2,
        description="Maximum pending requests an owner may hold inside the active window",
        ge=1,
    )
    active_window_hours: int = Field(
        24,
        description="Age in hours after which a pending request stops counting toward the quota",
        ge=1,
    )
    expiry_days: int = Field(
        5,
        description="Age in days after which pending/accepted requests are marked expired",
        ge=1,
    )
    admission_max_attempts: int = Field(
        3,
        description="Times an admission is re-evaluated when a concurrent insert wins the race",
        ge=1,
    )

    model_config = SettingsConfigDict(
        env_prefix="REQUESTS_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level")
    format: Literal["json", "plain"] = Field(
        "json",
        description="Log line format",
    )
    output: Literal["stdout", "file"] = Field(
        "stdout",
        description="Where log lines are written",
    )
    file_path: str | None = Field(
        None,
        description="Log file path when output=file (defaults to logs/app.log)",
    )
    max_bytes: int = Field(
        0,
        description="Rotate the log file at this size; 0 disables rotation",
        ge=0,
    )
    backup_count: int = Field(
        5,
        description="Number of rotated log files to keep",
        ge=0,
    )
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to propagate the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if settings are malformed.
    """

    app_env: str = APP_ENV
    app: AppSettings = Field(default_factory=AppSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    requests: RequestPolicySettings = Field(default_factory=RequestPolicySettings)
    log: LogSettings = Field(default_factory=LogSettings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
# Nested settings are created via default_factory so env loading works.
settings = Settings()
