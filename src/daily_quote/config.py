"""Engine configuration — environment-driven settings via pydantic-settings.

Every setting can be given as ``DAILY_QUOTE_<NAME>`` in the environment or
in a ``.env`` file.  ``get_settings()`` is cached: one instance per process,
so the DateKey timezone cannot drift between requests.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from daily_quote._internal.clock import resolve_timezone


class Settings(BaseSettings):
    """Daily selection engine settings."""

    model_config = SettingsConfigDict(
        env_prefix="DAILY_QUOTE_", env_file=".env", extra="ignore", case_sensitive=False
    )

    # Selection
    timezone: str = "UTC"
    exclusion_window_days: int = Field(default=30, ge=0)
    strict_selection: bool = False

    # Admin
    default_page_size: int = Field(default=1000, ge=1)

    # Storage
    store_type: Literal["memory", "sqlite"] = "sqlite"
    store_path: str = "quotes.db"
    sqlite_timeout_seconds: float = Field(default=5.0, gt=0)

    # Logging
    log_level: str = "INFO"
    log_format: Literal["text", "json"] = "text"

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        resolve_timezone(value)
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings()
