"""Shared utilities for producing a consistent "now" across dashboard views."""

from __future__ import annotations

import datetime as _dt
import logging
from dataclasses import dataclass
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dashboard_engine.utils.datetime_utils import datetime_to_ms

logger = logging.getLogger(__name__)

_LOCAL_DEFAULT = _dt.datetime.now().astimezone().tzinfo or _dt.timezone.utc


def resolve_timezone(
    timezone_name: Optional[str],
    fallback: Optional[_dt.tzinfo] = None,
) -> _dt.tzinfo:
    """Resolve ``timezone_name`` to a tzinfo, falling back to sensible defaults."""

    if timezone_name:
        try:
            return ZoneInfo(timezone_name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Unknown timezone %r; using fallback", timezone_name)

    if fallback is not None:
        return fallback

    return _LOCAL_DEFAULT


@dataclass(slots=True)
class TimeSnapshot:
    """Snapshot of the current moment in UTC and a target timezone."""

    tzinfo: _dt.tzinfo
    now_utc: _dt.datetime
    now_local: _dt.datetime

    @property
    def date(self) -> _dt.date:
        return self.now_local.date()

    @property
    def epoch_ms(self) -> float:
        """Return the snapshot as epoch milliseconds, the engine's time unit."""

        return datetime_to_ms(self.now_utc)

    @property
    def iso_local(self) -> str:
        return self.now_local.isoformat()

    def timezone_display(self) -> str:
        """Return a human friendly representation of the timezone."""

        tz = self.tzinfo
        key = getattr(tz, "key", None)
        if key:
            return key
        name = tz.tzname(self.now_local)
        return name or str(tz)


def create_time_snapshot(
    timezone_name: Optional[str] = None,
    *,
    fallback: Optional[_dt.tzinfo] = None,
    now_utc: Optional[_dt.datetime] = None,
) -> TimeSnapshot:
    """Return a TimeSnapshot for ``timezone_name``.

    ``now_utc`` pins the moment, which keeps callers and tests deterministic.
    """

    tzinfo = resolve_timezone(timezone_name, fallback)
    current = now_utc or _dt.datetime.now(_dt.timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=_dt.timezone.utc)
    return TimeSnapshot(
        tzinfo=tzinfo, now_utc=current, now_local=current.astimezone(tzinfo)
    )


__all__ = ["TimeSnapshot", "create_time_snapshot", "resolve_timezone"]
