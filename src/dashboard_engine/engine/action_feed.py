"""Merge follow-ups, interviews, goals and sessions into one ranked feed."""

from __future__ import annotations

import datetime
import logging
from typing import Iterable, Optional, Sequence

from dashboard_engine.utils.datetime_utils import coerce_instant, days_to_ms

from .classifier import (
    FOLLOW_UP_TEMPLATE,
    GOAL_TEMPLATE,
    INTERVIEW_TEMPLATE,
    SESSION_TEMPLATE,
    classify,
)
from .models import (
    ClassifiedEntity,
    FeedItem,
    FollowUp,
    Goal,
    InterviewStage,
    InterviewSummary,
    RankedFeed,
    Session,
)

logger = logging.getLogger(__name__)

CLOSED_APPLICATION_STATUSES = frozenset({"offer", "rejected"})
TERMINAL_INTERVIEW_OUTCOMES = frozenset({"passed", "failed"})
TERMINAL_GOAL_STATUSES = frozenset({"completed", "cancelled"})
TERMINAL_SESSION_STATUSES = frozenset({"completed", "cancelled", "no_show"})


def feed_item_from_follow_up(
    follow_up: FollowUp, *, exclude_closed_applications: bool = True
) -> FeedItem:
    closed = (
        exclude_closed_applications
        and (follow_up.application_status or "").lower() in CLOSED_APPLICATION_STATUSES
    )
    return FeedItem(
        kind="follow_up",
        id=follow_up.id,
        title=follow_up.description or "Follow up",
        due=coerce_instant(follow_up.due_at),
        updated_at=follow_up.updated_at,
        terminal=follow_up.completed or closed,
        template=FOLLOW_UP_TEMPLATE,
    )


def feed_item_from_interview(stage: InterviewStage) -> FeedItem:
    return FeedItem(
        kind="interview",
        id=stage.id,
        title=stage.title or "Interview",
        start=coerce_instant(stage.scheduled_at),
        updated_at=stage.updated_at,
        terminal=stage.outcome.lower() in TERMINAL_INTERVIEW_OUTCOMES,
        template=INTERVIEW_TEMPLATE,
    )


def feed_item_from_goal(goal: Goal) -> FeedItem:
    return FeedItem(
        kind="goal",
        id=goal.id,
        title=goal.title or "Goal",
        due=coerce_instant(goal.due_at),
        updated_at=goal.updated_at,
        terminal=goal.status.lower() in TERMINAL_GOAL_STATUSES,
        template=GOAL_TEMPLATE,
    )


def feed_item_from_session(session: Session) -> FeedItem:
    return FeedItem(
        kind="session",
        id=session.id,
        title=session.title or session.student_name or "Advising session",
        start=coerce_instant(session.start_at),
        end=coerce_instant(session.end_at),
        updated_at=session.updated_at,
        terminal=session.status.lower() in TERMINAL_SESSION_STATUSES,
        template=SESSION_TEMPLATE,
    )


def _deduplicate(items: Iterable[FeedItem]) -> list[FeedItem]:
    """Keep the most recently updated copy of each ``(kind, id)``."""

    latest: dict[tuple[str, str], FeedItem] = {}
    for item in items:
        key = (item.kind, item.id)
        current = latest.get(key)
        if current is None or item.updated_at > current.updated_at:
            latest[key] = item
    return list(latest.values())


def _rank_key(entry: ClassifiedEntity) -> tuple:
    instant = entry.item.instant
    return (
        0 if entry.is_overdue else 1,
        0 if instant is not None else 1,
        instant if instant is not None else 0.0,
        -entry.item.updated_at,
        entry.item.kind,
        entry.item.id,
    )


def build_feed(
    entities: Iterable[FeedItem],
    now: float,
    tz: datetime.tzinfo,
    *,
    window_days: Optional[float] = None,
    max_items: Optional[int] = None,
) -> RankedFeed:
    """Build a deterministic, ranked action feed.

    Terminal items are dropped and duplicates collapsed before ranking.
    Ordering is overdue first, then dated before undated, then soonest
    instant, then most recently updated, with ``(kind, id)`` as the final
    tie-break. ``window_days`` drops dated items scheduled after
    ``now + window_days``; undated items always stay. ``max_items`` slices the
    ranked feed while ``total`` keeps the full count for "+N more".
    """
    active = [item for item in _deduplicate(entities) if not item.terminal]
    classified = [
        ClassifiedEntity(item=item, classification=classify(now, item, tz, item.template))
        for item in active
    ]
    classified.sort(key=_rank_key)

    if window_days is not None:
        horizon = now + days_to_ms(window_days)
        classified = [
            entry
            for entry in classified
            if entry.item.instant is None or entry.item.instant <= horizon
        ]

    total = len(classified)
    if max_items is not None:
        shown = classified[: max(0, max_items)]
    else:
        shown = classified

    logger.debug(
        "Built feed with %d of %d items (window=%s, max=%s)",
        len(shown),
        total,
        window_days,
        max_items,
    )
    return RankedFeed(items=shown, total=total)


def collect_feed_items(
    *,
    follow_ups: Sequence[FollowUp] = (),
    interviews: Sequence[InterviewStage] = (),
    goals: Sequence[Goal] = (),
    sessions: Sequence[Session] = (),
    exclude_closed_applications: bool = True,
) -> list[FeedItem]:
    """Adapt heterogeneous records into feed items."""

    items: list[FeedItem] = [
        feed_item_from_follow_up(
            follow_up, exclude_closed_applications=exclude_closed_applications
        )
        for follow_up in follow_ups
    ]
    items.extend(feed_item_from_interview(stage) for stage in interviews)
    items.extend(feed_item_from_goal(goal) for goal in goals)
    items.extend(feed_item_from_session(session) for session in sessions)
    return items


def summarize_interviews(
    stages: Iterable[InterviewStage], now: float
) -> InterviewSummary:
    """Count interviews scheduled after ``now`` and pick the soonest one."""

    upcoming = [
        stage
        for stage in stages
        if stage.outcome.lower() not in TERMINAL_INTERVIEW_OUTCOMES
        and (instant := coerce_instant(stage.scheduled_at)) is not None
        and instant > now
    ]
    upcoming.sort(key=lambda stage: (stage.scheduled_at, stage.id))
    return InterviewSummary(
        upcoming_count=len(upcoming),
        next_interview=upcoming[0] if upcoming else None,
    )


__all__ = [
    "CLOSED_APPLICATION_STATUSES",
    "build_feed",
    "collect_feed_items",
    "feed_item_from_follow_up",
    "feed_item_from_goal",
    "feed_item_from_interview",
    "feed_item_from_session",
    "summarize_interviews",
]
