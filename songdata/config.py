"""Application configuration using Pydantic BaseSettings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from songdata.constants import (
    DEBUG_SCREENSHOT_PATH,
    DEFAULT_API_PORT,
    DEFAULT_MAX_SCRAPE_ATTEMPTS,
    MAX_CONCURRENT_SCRAPES,
    NAVIGATION_TIMEOUT_SECONDS,
    TUNEBAT_BASE_URL,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        # Load .env first, then .env.local (for local/test overrides)
        # Later files override earlier ones, so .env.local takes precedence
        env_file=[".env", ".env.local"],
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    env: Literal["local", "railway", "prod"] = Field(
        default="local", description="Current environment"
    )
    log_level: str = Field(default="INFO", description="Python logging level")
    port: int = Field(default=DEFAULT_API_PORT, description="HTTP API port")

    # Sentry Configuration
    sentry_dsn: str | None = Field(
        default=None, description="Sentry DSN for error tracking (optional)"
    )
    sentry_traces_sample_rate: float = Field(
        default=1.0, description="Sentry traces sample rate (0.0 to 1.0)"
    )

    # Logfire Configuration
    logfire_token: str | None = Field(
        default=None, description="Pydantic Logfire token for cloud logging"
    )

    # ==========================================================================
    # Scraper Configuration
    # ==========================================================================
    # Defaults are sourced from songdata/constants.py.

    tunebat_base_url: str = Field(
        default=TUNEBAT_BASE_URL, description="Base URL of the track info site"
    )
    browser_executable_path: str | None = Field(
        default=None,
        description="Chromium/Chrome executable (discovered on PATH when unset)",
    )
    browser_headless: bool = Field(
        default=True, description="Run the browser without a visible window"
    )
    navigation_timeout_seconds: float = Field(
        default=NAVIGATION_TIMEOUT_SECONDS,
        gt=0,
        description="Upper bound for a single navigation attempt (seconds)",
    )
    max_scrape_attempts: int = Field(
        default=DEFAULT_MAX_SCRAPE_ATTEMPTS,
        ge=1,
        description="Total navigation attempts per scrape",
    )
    debug_screenshot_path: str = Field(
        default=DEBUG_SCREENSHOT_PATH,
        description="Screenshot overwritten after every content inspection",
    )
    max_concurrent_scrapes: int = Field(
        default=MAX_CONCURRENT_SCRAPES,
        ge=1,
        description="Maximum concurrent scrapes admitted by the API",
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
