"""
Application configuration using Pydantic Settings.
All config is loaded from environment variables / .env file.
"""

from functools import lru_cache
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    # ── App ──────────────────────────────────────────────
    APP_NAME: str = "eotis-hub"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:9002"  # comma-separated

    # ── Supabase ─────────────────────────────────────────
    SUPABASE_URL: str
    SUPABASE_KEY: str  # anon/public key

    # ── Calendar ─────────────────────────────────────────
    TIMEZONE: str = "Europe/London"  # display timezone for day bucketing
    CALENDAR_HOUR_HEIGHT: int = 60  # pixels per hour on the time grid
    CALENDAR_DEFAULT_VIEW: str = "week"  # day | week | month
    NOW_INDICATOR_INTERVAL_SECONDS: int = 60

    # ── Dashboard ────────────────────────────────────────
    DASHBOARD_DAYS_AHEAD: int = 7

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
    }

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.TIMEZONE)


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance (singleton)."""
    return Settings()
