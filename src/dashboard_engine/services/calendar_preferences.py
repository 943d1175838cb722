"""Persisted calendar preferences shared by every calendar-shaped view.

The stored week start is the one every calendar reads, so week and month
grids never disagree on where a week begins.
"""

import logging
from pathlib import Path

from pydantic import ValidationError

from dashboard_engine.config import PROJECT_ROOT, get_settings
from dashboard_engine.schemas.calendar_preferences import (
    CalendarPreferences,
    CalendarPreferencesUpdate,
)

logger = logging.getLogger(__name__)


class CalendarPreferencesService:
    """Read and write calendar preferences as a JSON document.

    A missing document is created from ``defaults``. An unreadable one is
    logged and replaced in memory by ``defaults`` without touching disk.
    """

    def __init__(self, preferences_path: Path, defaults: CalendarPreferences | None = None):
        self.preferences_path = preferences_path
        self._defaults = defaults or CalendarPreferences()
        self._cached: CalendarPreferences | None = None

    def get_preferences(self) -> CalendarPreferences:
        if self._cached is None:
            self._cached = self._read()
        return self._cached

    def _read(self) -> CalendarPreferences:
        if not self.preferences_path.exists():
            preferences = self._defaults.model_copy()
            self._write(preferences)
            return preferences
        try:
            raw = self.preferences_path.read_text(encoding="utf-8")
            return CalendarPreferences.model_validate_json(raw)
        except (OSError, ValidationError) as e:
            logger.error(f"Unreadable calendar preferences at {self.preferences_path}: {e}")
            return self._defaults.model_copy()

    def _write(self, preferences: CalendarPreferences) -> None:
        # Write beside the target, then swap, so readers never see half a file.
        staging = self.preferences_path.with_name(self.preferences_path.name + ".tmp")
        try:
            self.preferences_path.parent.mkdir(parents=True, exist_ok=True)
            staging.write_text(preferences.model_dump_json(indent=2), encoding="utf-8")
            staging.replace(self.preferences_path)
        except OSError as e:
            logger.error(f"Failed to write calendar preferences: {e}")

    def update_preferences(self, update: CalendarPreferencesUpdate) -> CalendarPreferences:
        """Apply the fields present in ``update`` and persist the result.

        Returns the stored preferences unchanged, without a write, when the
        update carries no new values.
        """
        current = self.get_preferences()
        changes = {
            name: value
            for name, value in update.model_dump(exclude_unset=True).items()
            if getattr(current, name) != value
        }
        if not changes:
            return current

        merged = CalendarPreferences.model_validate({**current.model_dump(), **changes})
        self._write(merged)
        self._cached = merged
        logger.info("Calendar preferences changed: %s", ", ".join(sorted(changes)))
        return merged

    def reset_to_defaults(self) -> CalendarPreferences:
        self._cached = self._defaults.model_copy()
        self._write(self._cached)
        return self._cached


_service_instance: CalendarPreferencesService | None = None


def get_calendar_preferences_service() -> CalendarPreferencesService:
    """Return the process-wide service, seeded from environment settings.

    A relative ``CALENDAR_PREFERENCES_PATH`` is resolved against the project
    root rather than the working directory.
    """
    global _service_instance
    if _service_instance is None:
        settings = get_settings()
        path = settings.calendar_preferences_path
        if not path.is_absolute():
            path = PROJECT_ROOT / path
        _service_instance = CalendarPreferencesService(
            path,
            CalendarPreferences(week_start=settings.week_start, timezone=settings.timezone),
        )
    return _service_instance
