"""
config.py — pydantic-settings Settings class.

All environment variables for the pool CRM are declared here.
The API, the CLI and the notification workers import `settings` from this module.

Usage:
    from poolcrm_shared.config import settings
    print(settings.supabase_url)
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_dotenv() -> Path | None:
    """Walk up from CWD to find the nearest .env file."""
    current = Path.cwd()
    for parent in [current, *current.parents]:
        candidate = parent / ".env"
        if candidate.is_file():
            return candidate
    return None


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=_find_dotenv() or ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Supabase
    # -------------------------------------------------------------------------
    supabase_url: str = Field(default="http://localhost:54321")
    supabase_anon_key: str = Field(default="")
    supabase_service_key: str = Field(default="")
    jwt_secret: str = Field(default="change-me-in-production")

    # -------------------------------------------------------------------------
    # Application
    # -------------------------------------------------------------------------
    environment: Literal["development", "production", "test"] = Field(
        default="development"
    )
    app_url: str = Field(default="http://localhost:3000")
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)
    cors_origins: str = Field(default="http://localhost:3000")
    default_timezone: str = Field(default="America/New_York")

    # Rate limits per client
    rate_limit_per_minute: int = Field(default=120)
    rate_limit_burst: int = Field(default=10)

    # -------------------------------------------------------------------------
    # Email (Resend)
    # -------------------------------------------------------------------------
    resend_api_key: str = Field(default="")
    resend_api_url: str = Field(default="https://api.resend.com")
    email_from: str = Field(default="Pool CRM <noreply@example.com>")

    # -------------------------------------------------------------------------
    # Pool specs scraper
    # -------------------------------------------------------------------------
    pool_specs_base_url: str = Field(default="https://www.lathampool.com/products")
    pool_specs_cache_path: str = Field(default="./data/pool-specs.json")
    scrape_delay_seconds: float = Field(default=1.0)

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO"
    )
    log_format: Literal["json", "console"] = Field(default="console")

    # -------------------------------------------------------------------------
    # Derived / computed
    # -------------------------------------------------------------------------
    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @field_validator(
        "supabase_url", "app_url", "resend_api_url", "pool_specs_base_url", mode="before"
    )
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/") if isinstance(v, str) else v


# ---------------------------------------------------------------------------
# Module-level singleton, import this everywhere
# ---------------------------------------------------------------------------
settings = Settings()
