"""Classify entities as past, current, upcoming or overdue relative to now."""

from __future__ import annotations

import datetime
from typing import Any, Optional, Protocol

from dashboard_engine.utils.datetime_utils import (
    coerce_instant,
    format_clock,
    format_short_date,
    instant_to_local,
)

from .models import Classification, LabelTemplate

DUE_SOON_HOURS = 48
_HOUR_MS = 60 * 60 * 1000

DEFAULT_TEMPLATE = LabelTemplate(today="Today {time}", tomorrow="Tomorrow {time}")
SESSION_TEMPLATE = LabelTemplate()
INTERVIEW_TEMPLATE = LabelTemplate()
FOLLOW_UP_TEMPLATE = LabelTemplate(
    today="Due today",
    tomorrow="Due tomorrow",
    other="Due {weekday}",
    undated="No due date",
)
GOAL_TEMPLATE = LabelTemplate(
    today="Due today",
    tomorrow="Due tomorrow",
    other="Due {date}",
    undated="No target date",
)


class TimeBounded(Protocol):
    start: Optional[float]
    end: Optional[float]
    due: Optional[float]


def _bounds(entity: Any) -> tuple[Optional[float], Optional[float], Optional[float]]:
    if isinstance(entity, dict):
        getter = entity.get
    else:
        def getter(name: str) -> Any:
            return getattr(entity, name, None)

    return (
        coerce_instant(getter("start")),
        coerce_instant(getter("end")),
        coerce_instant(getter("due")),
    )


def _relevant_instant(
    start: Optional[float], end: Optional[float], due: Optional[float]
) -> tuple[Optional[float], bool]:
    """Return the instant that decides past/overdue and whether it is a due date."""

    if end is not None:
        return end, False
    if due is not None:
        return due, True
    return start, False


def _date_label(
    instant: float, now: float, tz: datetime.tzinfo, template: LabelTemplate
) -> str:
    moment = instant_to_local(instant, tz)
    today = instant_to_local(now, tz).date()
    values = {
        "time": format_clock(moment),
        "weekday": moment.strftime("%a"),
        "date": format_short_date(moment.date()),
    }
    if moment.date() == today:
        return template.today.format(**values)
    if moment.date() == today + datetime.timedelta(days=1):
        return template.tomorrow.format(**values)
    return template.other.format(**values)


def classify(
    now: float,
    entity: TimeBounded | dict[str, Any],
    tz: datetime.tzinfo,
    template: LabelTemplate = DEFAULT_TEMPLATE,
) -> Classification:
    """Classify ``entity`` against ``now`` and build its display label.

    Rules, first match wins:

    1. A span (``end`` set) with ``start <= now <= end`` is ``current``.
    2. If the relevant instant (``end`` for spans, otherwise ``due``, otherwise
       ``start``) is before ``now`` the entity is ``overdue`` when that
       instant is a due date and ``past`` otherwise.
    3. Everything else, including entities with no instant, is ``upcoming``.

    An overdue entity is always labelled with ``template.overdue`` whatever
    its date. Labels for other statuses use the today/tomorrow/other wording
    of ``template`` evaluated in ``tz``.

    Args:
        now: Current instant in epoch milliseconds, trusted verbatim
        entity: Object or mapping exposing optional ``start``/``end``/``due``
        tz: Timezone defining "today" and "tomorrow"
        template: Wording for the entity kind

    Returns:
        Classification with status, label and tone
    """
    start, end, due = _bounds(entity)

    if end is not None and start is not None and start <= now <= end:
        return Classification(
            status="current", label=_date_label(start, now, tz, template)
        )

    instant, is_due = _relevant_instant(start, end, due)
    if instant is None:
        return Classification(status="upcoming", label=template.undated)

    if instant < now:
        if is_due:
            return Classification(status="overdue", label=template.overdue, tone="danger")
        label_instant = start if start is not None else instant
        return Classification(
            status="past", label=_date_label(label_instant, now, tz, template)
        )

    label_instant = start if start is not None and not is_due else instant
    tone = "warning" if is_due and due_soon(now, instant) else None
    return Classification(
        status="upcoming",
        label=_date_label(label_instant, now, tz, template),
        tone=tone,
    )


def due_soon(now: float, due: Optional[float], hours: int = DUE_SOON_HOURS) -> bool:
    """Return True when ``due`` is not yet passed but falls within ``hours``."""

    instant = coerce_instant(due)
    if instant is None or instant < now:
        return False
    return instant - now < hours * _HOUR_MS


__all__ = [
    "DEFAULT_TEMPLATE",
    "DUE_SOON_HOURS",
    "FOLLOW_UP_TEMPLATE",
    "GOAL_TEMPLATE",
    "INTERVIEW_TEMPLATE",
    "SESSION_TEMPLATE",
    "TimeBounded",
    "classify",
    "due_soon",
]
