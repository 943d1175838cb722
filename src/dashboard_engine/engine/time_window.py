"""Calendar windows for day, week and month views."""

from __future__ import annotations

import datetime

from dateutil.relativedelta import relativedelta

from dashboard_engine.utils.datetime_utils import format_short_date

from .models import ViewMode, WeekStart

# Python weekday numbers (Monday == 0) for each supported week-start convention.
WEEK_START_WEEKDAYS: dict[str, int] = {"mon": 0, "sun": 6}
VIEW_MODES: tuple[str, ...] = ("day", "week", "month")


def _weekday_for(week_start: WeekStart) -> int:
    try:
        return WEEK_START_WEEKDAYS[week_start]
    except KeyError:
        raise ValueError(
            f"Unsupported week start {week_start!r}; expected one of {sorted(WEEK_START_WEEKDAYS)}"
        ) from None


def _check_view(view: ViewMode) -> None:
    if view not in VIEW_MODES:
        raise ValueError(f"Unsupported view mode {view!r}; expected one of {VIEW_MODES}")


def start_of_week(day: datetime.date, week_start: WeekStart) -> datetime.date:
    """Return the first day of the week containing ``day``."""

    offset = (day.weekday() - _weekday_for(week_start)) % 7
    return day - datetime.timedelta(days=offset)


def _contiguous(first: datetime.date, count: int) -> list[datetime.date]:
    return [first + datetime.timedelta(days=index) for index in range(count)]


def days_in_view(
    view: ViewMode, anchor: datetime.date, week_start: WeekStart
) -> list[datetime.date]:
    """Return every day displayed by ``view`` anchored at ``anchor``.

    Week and month views share :func:`start_of_week`, so both honour the same
    ``week_start``. Month views always cover whole weeks, which makes the
    result length a multiple of seven.

    Args:
        view: "day", "week" or "month"
        anchor: Any date inside the period to display
        week_start: "sun" or "mon"; required so callers cannot silently
            disagree on week boundaries

    Returns:
        Strictly ascending, gap-free list of dates

    Raises:
        ValueError: If ``view`` or ``week_start`` is not recognised
    """
    _check_view(view)
    first_weekday = start_of_week(anchor, week_start)

    if view == "day":
        return [anchor]
    if view == "week":
        return _contiguous(first_weekday, 7)

    month_first = anchor.replace(day=1)
    month_last = month_first + relativedelta(months=1) - datetime.timedelta(days=1)
    grid_first = start_of_week(month_first, week_start)
    grid_last = start_of_week(month_last, week_start) + datetime.timedelta(days=6)
    return _contiguous(grid_first, (grid_last - grid_first).days + 1)


def shift_anchor(view: ViewMode, anchor: datetime.date, step: int) -> datetime.date:
    """Move ``anchor`` by ``step`` periods of ``view`` (negative goes back).

    Month steps keep the day of month where possible and clamp to the last
    day of shorter months.
    """
    _check_view(view)
    if view == "day":
        return anchor + datetime.timedelta(days=step)
    if view == "week":
        return anchor + datetime.timedelta(weeks=step)
    return anchor + relativedelta(months=step)


def view_title(view: ViewMode, anchor: datetime.date, week_start: WeekStart) -> str:
    """Return the heading shown above a calendar grid."""

    _check_view(view)
    if view == "day":
        return f"{anchor.strftime('%A, %B')} {anchor.day}, {anchor.year}"
    if view == "month":
        return anchor.strftime("%B %Y")

    days = days_in_view("week", anchor, week_start)
    first, last = days[0], days[-1]
    if first.year != last.year:
        return (
            f"{format_short_date(first)}, {first.year} - "
            f"{format_short_date(last)}, {last.year}"
        )
    return f"{format_short_date(first)} - {format_short_date(last)}, {last.year}"


def split_weeks(days: list[datetime.date]) -> list[list[datetime.date]]:
    """Chunk a week or month window into rows of seven days."""

    return [days[index : index + 7] for index in range(0, len(days), 7)]


__all__ = [
    "VIEW_MODES",
    "WEEK_START_WEEKDAYS",
    "days_in_view",
    "shift_anchor",
    "split_weeks",
    "start_of_week",
    "view_title",
]
