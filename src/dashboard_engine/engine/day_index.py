"""Group timestamped entities by local calendar day."""

from __future__ import annotations

import datetime
from typing import Any, Callable, Iterable, Optional, Sequence, TypeVar

from dashboard_engine.utils.datetime_utils import coerce_instant, local_date

from .models import Bucket, FollowUp, Session

T = TypeVar("T")


def day_key(instant_ms: Any, tz: datetime.tzinfo) -> Optional[str]:
    """Return the ``YYYY-MM-DD`` key of the local day containing ``instant_ms``.

    Local midnight belongs to the day it starts. Missing or NaN instants have
    no key.
    """
    day = local_date(instant_ms, tz)
    return day.isoformat() if day is not None else None


def date_key(day: datetime.date) -> str:
    return day.isoformat()


def build_index(
    entities: Iterable[T],
    get_instant: Callable[[T], Any],
    tz: datetime.tzinfo,
) -> dict[str, list[T]]:
    """Group ``entities`` by day key in one pass.

    Entities without a usable instant are left out; they only appear in
    unscoped list views. Input order is kept inside each day.
    """
    index: dict[str, list[T]] = {}
    for entity in entities:
        key = day_key(get_instant(entity), tz)
        if key is None:
            continue
        index.setdefault(key, []).append(entity)
    return index


def _sort_by_instant(items: list[T], get_instant: Callable[[T], Any]) -> list[T]:
    return sorted(items, key=lambda item: coerce_instant(get_instant(item)) or 0.0)


def build_day_buckets(
    days: Sequence[datetime.date],
    sessions: Iterable[Session],
    follow_ups: Iterable[FollowUp],
    tz: datetime.tzinfo,
    *,
    include_completed: bool = True,
) -> dict[str, Bucket]:
    """Populate one bucket per displayed day.

    Every day in ``days`` gets an entry, empty or not, so grid shape never
    depends on data. Sessions are ordered by start and follow-ups by due date.

    Args:
        days: Displayed days, usually from ``days_in_view``
        sessions: Sessions to place by their start instant
        follow_ups: Follow-ups to place by their due instant
        tz: Timezone defining local calendar days
        include_completed: When False, completed follow-ups are skipped

    Returns:
        Mapping of day key to :class:`Bucket`, in display order
    """
    session_index = build_index(sessions, lambda session: session.start_at, tz)
    follow_up_index = build_index(
        (item for item in follow_ups if include_completed or not item.completed),
        lambda item: item.due_at,
        tz,
    )

    buckets: dict[str, Bucket] = {}
    for day in days:
        key = date_key(day)
        buckets[key] = Bucket(
            day=day,
            sessions=_sort_by_instant(
                session_index.get(key, []), lambda session: session.start_at
            ),
            follow_ups=_sort_by_instant(
                follow_up_index.get(key, []), lambda item: item.due_at
            ),
        )
    return buckets


__all__ = ["build_day_buckets", "build_index", "date_key", "day_key"]
