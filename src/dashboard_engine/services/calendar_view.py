"""Calendar view state with navigation and a pure render over a snapshot."""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from dashboard_engine.engine.classifier import SESSION_TEMPLATE, classify
from dashboard_engine.engine.day_index import build_day_buckets, date_key
from dashboard_engine.engine.models import Bucket, FollowUp, Session, ViewMode, WeekStart
from dashboard_engine.engine.time_window import (
    days_in_view,
    shift_anchor,
    split_weeks,
    view_title,
)
from dashboard_engine.utils.datetime_utils import coerce_instant, instant_to_local

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CalendarGrid:
    """Everything a calendar component needs to draw one view."""

    view_mode: ViewMode
    anchor: datetime.date
    week_start: WeekStart
    title: str
    days: list[datetime.date]
    weeks: list[list[datetime.date]]
    buckets: dict[str, Bucket]
    today_key: str
    current_session_ids: list[str] = field(default_factory=list)


class CalendarView:
    """Navigable calendar state; rendering never mutates the inputs.

    ``week_start`` is required and should come from the calendar preference
    service so every calendar agrees on week boundaries.
    """

    def __init__(
        self,
        week_start: WeekStart,
        *,
        view_mode: ViewMode = "month",
        anchor: Optional[datetime.date] = None,
        tz: datetime.tzinfo = datetime.timezone.utc,
    ):
        self.anchor = anchor or datetime.datetime.now(tz).date()
        # Validate both conventions eagerly instead of on first render.
        days_in_view(view_mode, self.anchor, week_start)
        self.week_start: WeekStart = week_start
        self.view_mode: ViewMode = view_mode
        self.tz = tz

    def set_view(self, view_mode: ViewMode) -> None:
        days_in_view(view_mode, self.anchor, self.week_start)
        self.view_mode = view_mode

    def go_previous(self) -> datetime.date:
        self.anchor = shift_anchor(self.view_mode, self.anchor, -1)
        return self.anchor

    def go_next(self) -> datetime.date:
        self.anchor = shift_anchor(self.view_mode, self.anchor, 1)
        return self.anchor

    def go_today(self, today: Optional[datetime.date] = None) -> datetime.date:
        self.anchor = today or datetime.datetime.now(self.tz).date()
        return self.anchor

    def render(
        self,
        sessions: Iterable[Session],
        follow_ups: Iterable[FollowUp],
        now: float,
    ) -> CalendarGrid:
        """Derive the grid for the current state at instant ``now``."""

        session_list = list(sessions)
        days = days_in_view(self.view_mode, self.anchor, self.week_start)
        buckets = build_day_buckets(days, session_list, follow_ups, self.tz)

        current_ids = [
            session.id
            for session in session_list
            if coerce_instant(session.end_at) is not None
            and classify(
                now,
                {"start": session.start_at, "end": session.end_at},
                self.tz,
                SESSION_TEMPLATE,
            ).status
            == "current"
        ]

        logger.debug(
            "Rendered %s view at %s with %d days", self.view_mode, self.anchor, len(days)
        )
        return CalendarGrid(
            view_mode=self.view_mode,
            anchor=self.anchor,
            week_start=self.week_start,
            title=view_title(self.view_mode, self.anchor, self.week_start),
            days=days,
            weeks=split_weeks(days) if self.view_mode != "day" else [days],
            buckets=buckets,
            today_key=date_key(instant_to_local(now, self.tz).date()),
            current_session_ids=current_ids,
        )


__all__ = ["CalendarGrid", "CalendarView"]
