"""Calendar preference schema shared by every calendar-shaped view."""

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator


class CalendarPreferences(BaseModel):
    """User/locale calendar conventions; the single source of the week start."""

    week_start: Literal["sun", "mon"] = Field(
        default="sun",
        description="First weekday of week and month grids.",
    )
    default_view: Literal["day", "week", "month"] = Field(
        default="month",
        description="View mode a calendar opens in.",
    )
    timezone: Optional[str] = Field(
        default=None,
        description="IANA timezone for local calendar days; server default when unset.",
    )


class CalendarPreferencesUpdate(BaseModel):
    """Partial update schema - all fields optional.

    Only ``timezone`` may be cleared with ``null``; the other fields always
    need a value once set.
    """

    week_start: Literal["sun", "mon"] | None = None
    default_view: Literal["day", "week", "month"] | None = None
    timezone: str | None = None

    @field_validator("week_start", "default_view", mode="before")
    @classmethod
    def _reject_null(cls, value: str | None) -> str:
        if value is None:
            raise ValueError("cannot be null")
        return value
