"""Date-range filtering and status counts for advising session lists."""

from __future__ import annotations

import datetime
from typing import Iterable, Literal

from dashboard_engine.utils.datetime_utils import coerce_instant, day_bounds_ms, instant_to_local

from .models import Session, SessionStats

DateRange = Literal["all", "past", "upcoming", "today"]
DATE_RANGES: tuple[str, ...] = ("all", "past", "upcoming", "today")


def filter_sessions(
    sessions: Iterable[Session],
    now: float,
    tz: datetime.tzinfo,
    date_range: DateRange = "all",
) -> list[Session]:
    """Return sessions matching ``date_range`` in display order.

    "today" keeps sessions starting within the local day of ``now``,
    "upcoming" those starting after ``now`` and "past" those starting before
    it. Sessions without a start only appear in "all". Past sessions are
    listed newest first, every other range soonest first with undated
    sessions last.
    """
    if date_range not in DATE_RANGES:
        raise ValueError(f"Unsupported date range {date_range!r}; expected one of {DATE_RANGES}")

    items = list(sessions)
    if date_range == "today":
        day_start, day_end = day_bounds_ms(instant_to_local(now, tz).date(), tz)
        items = [
            session
            for session in items
            if (start := coerce_instant(session.start_at)) is not None
            and day_start <= start < day_end
        ]
    elif date_range == "upcoming":
        items = [
            session
            for session in items
            if (start := coerce_instant(session.start_at)) is not None and start > now
        ]
    elif date_range == "past":
        items = [
            session
            for session in items
            if (start := coerce_instant(session.start_at)) is not None and start < now
        ]

    def _key(session: Session) -> tuple:
        start = coerce_instant(session.start_at)
        if start is None:
            return (1, 0.0, session.id)
        return (0, -start if date_range == "past" else start, session.id)

    return sorted(items, key=_key)


def session_stats(sessions: Iterable[Session]) -> SessionStats:
    """Count sessions by status; no-shows are reported as cancelled."""

    total = scheduled = completed = cancelled = 0
    for session in sessions:
        total += 1
        status = session.status.lower()
        if status == "scheduled":
            scheduled += 1
        elif status == "completed":
            completed += 1
        elif status in ("cancelled", "no_show"):
            cancelled += 1
    return SessionStats(
        total=total, scheduled=scheduled, completed=completed, cancelled=cancelled
    )


__all__ = ["DATE_RANGES", "DateRange", "filter_sessions", "session_stats"]
