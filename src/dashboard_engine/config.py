"""Application configuration using environment variables."""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve the project root once so that `.env` is discovered regardless of CWD
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    """Load configuration from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    timezone: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("ENGINE_TIMEZONE", "timezone"),
        description="IANA timezone defining local calendar days; host local time when unset.",
    )
    week_start: Literal["sun", "mon"] = Field(
        default="sun",
        validation_alias=AliasChoices("ENGINE_WEEK_START", "week_start"),
    )
    tick_seconds: float = Field(
        default=60.0,
        gt=0,
        validation_alias=AliasChoices("ENGINE_TICK_SECONDS", "tick_seconds"),
    )
    default_window_days: Optional[int] = Field(
        default=7,
        ge=0,
        validation_alias=AliasChoices(
            "ENGINE_DEFAULT_WINDOW_DAYS",
            "default_window_days",
        ),
    )
    default_max_items: Optional[int] = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices(
            "ENGINE_DEFAULT_MAX_ITEMS",
            "default_max_items",
        ),
    )
    calendar_preferences_path: Path = Field(
        default_factory=lambda: Path("data/calendar_preferences.json"),
        validation_alias=AliasChoices(
            "CALENDAR_PREFERENCES_PATH",
            "calendar_preferences_path",
        ),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached `Settings` instance."""

    return Settings()  # pyright: ignore[reportCallIssue]


__all__ = ["Settings", "get_settings"]
