"""
Application settings.

Values come from the environment (``WEATHER_`` prefix) or a local ``.env``
file. Components receive the values they need at construction time; nothing
below the CLI reads settings on its own.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration."""

    model_config = SettingsConfigDict(env_prefix="WEATHER_", env_file=".env", extra="ignore")

    app_name: str = "weather-aggregator"
    app_env: str = "development"
    debug: bool = False

    data_dir: Path = Path("data")

    tick_interval_seconds: float = Field(default=5.0, gt=0)
    historical_depth: int = Field(default=5, ge=1)
    openweathermap_api_key: str | None = None
    request_timeout: float = Field(default=10.0, gt=0)

    #: Keep at most this many events per session log; None keeps everything.
    session_max_events: int | None = Field(default=None, ge=1)


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
