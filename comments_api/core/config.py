"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file

The storage connection (SUPABASE_URL / SUPABASE_ANON_KEY) is required.
If either is missing or blank, building ``settings`` raises a ValidationError at
import time and the service refuses to start.
"""

from __future__ import annotations

import os
from pathlib import Path

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

_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Nested BaseSettings don't inherit env_file, so populate os.environ up front
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=False)


def _build_storage_settings() -> "StorageSettings":
    """Build storage settings from environment.

    Required fields are filled from environment variables by BaseSettings,
    which static type checkers don't know about.
    """

    return StorageSettings()  # type: ignore[call-arg]


def _build_app_settings() -> "AppSettings":
    return AppSettings()


def _build_log_settings() -> "LogSettings":
    return LogSettings()


class StorageSettings(BaseSettings):
    """Connection to the managed database REST endpoint (Supabase/PostgREST)."""

    url: str = Field(
        ...,
        min_length=1,
        description="Base URL of the project (e.g., https://xyz.supabase.co)",
    )
    anon_key: str = Field(
        ...,
        min_length=1,
        description="Access key sent as apikey and bearer token",
    )
    table: str = Field(
        "comments",
        description="Table holding the comments",
    )
    timeout_seconds: float | None = Field(
        None,
        description="Optional request timeout; no timeout when unset",
    )

    model_config = SettingsConfigDict(
        env_prefix="SUPABASE_",
        case_sensitive=False,
        str_strip_whitespace=True,
    )


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )
    content_max_chars: int = Field(
        500,
        description="Maximum comment length in characters (after trimming)",
        ge=1,
    )
    author_max_chars: int = Field(
        50,
        description="Maximum author name length in characters (after trimming)",
        ge=1,
    )
    default_author: str = Field(
        "Anonymous",
        description="Author name used when none is provided",
    )
    honeypot_field: str = Field(
        "website",
        description="Hidden form field that must stay empty for humans",
    )

    rate_limit_enabled: bool = Field(
        True,
        description="Enable per-client cooldown on comment creation",
    )
    rate_limit_window_seconds: float = Field(
        30.0,
        description="Minimum time between accepted comments from one client",
        gt=0,
    )
    rate_limit_max_entries: int | None = Field(
        10000,
        description="Maximum tracked clients before stale/oldest entries are evicted",
        ge=1,
    )
    rate_limit_include_headers: bool = Field(
        True,
        description="Include Retry-After header when throttling",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="'json' or 'plain'")
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to propagate the correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if required settings are missing.
    """

    app_env: str = APP_ENV
    storage: StorageSettings = Field(default_factory=_build_storage_settings)
    app: AppSettings = Field(default_factory=_build_app_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
settings = Settings()
