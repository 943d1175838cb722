"""Epoch-millisecond conversion and local calendar helpers.

Records arrive from the data layer with numeric millisecond timestamps. This
module is the one place those numbers are validated and turned into local
calendar dates so every view agrees on what "the same day" means.
"""

from __future__ import annotations

import datetime
import math
from typing import Any, Optional

_MS_PER_SECOND = 1000
_DAY_MS = 24 * 60 * 60 * _MS_PER_SECOND


def coerce_instant(value: Any) -> Optional[float]:
    """Return ``value`` as a finite millisecond timestamp, or None.

    Missing values, booleans, non-numeric values and NaN/inf are treated as
    "no instant" rather than raising.

    Args:
        value: Raw timestamp taken from a record

    Returns:
        The timestamp as a float, or None if it is unusable
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def instant_to_local(instant_ms: float, tz: datetime.tzinfo) -> datetime.datetime:
    """Convert an epoch-millisecond instant to an aware datetime in ``tz``."""

    return datetime.datetime.fromtimestamp(instant_ms / _MS_PER_SECOND, tz=tz)


def local_date(instant_ms: Any, tz: datetime.tzinfo) -> Optional[datetime.date]:
    """Return the local calendar date of ``instant_ms`` or None when invalid."""

    instant = coerce_instant(instant_ms)
    if instant is None:
        return None
    try:
        return instant_to_local(instant, tz).date()
    except (OverflowError, OSError, ValueError):
        return None


def datetime_to_ms(value: datetime.datetime) -> float:
    """Return epoch milliseconds for an aware (or UTC-assumed naive) datetime."""

    if value.tzinfo is None:
        value = value.replace(tzinfo=datetime.timezone.utc)
    return value.timestamp() * _MS_PER_SECOND


def day_bounds_ms(day: datetime.date, tz: datetime.tzinfo) -> tuple[float, float]:
    """Return ``[start, end)`` epoch milliseconds of ``day`` in ``tz``."""

    start = datetime.datetime.combine(day, datetime.time.min, tzinfo=tz)
    following = datetime.datetime.combine(
        day + datetime.timedelta(days=1), datetime.time.min, tzinfo=tz
    )
    return datetime_to_ms(start), datetime_to_ms(following)


def days_to_ms(days: float) -> float:
    return days * _DAY_MS


def format_clock(value: datetime.datetime) -> str:
    """Render a 12-hour clock time such as ``3:05 PM``."""

    hour = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {suffix}"


def format_short_date(value: datetime.date) -> str:
    """Render ``Jun 12`` without a zero-padded day."""

    return f"{value.strftime('%b')} {value.day}"


__all__ = [
    "coerce_instant",
    "datetime_to_ms",
    "day_bounds_ms",
    "days_to_ms",
    "format_clock",
    "format_short_date",
    "instant_to_local",
    "local_date",
]
