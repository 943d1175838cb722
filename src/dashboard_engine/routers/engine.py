"""Temporal engine API router.

Dashboard widgets post the snapshot they already hold (sessions, follow-ups,
interviews, goals, applications) and receive calendar grids, ranked feeds and
funnel summaries computed by one shared engine.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request

from dashboard_engine.config import Settings, get_settings
from dashboard_engine.engine.action_feed import (
    build_feed,
    collect_feed_items,
    summarize_interviews,
)
from dashboard_engine.engine.classifier import INTERVIEW_TEMPLATE, classify
from dashboard_engine.engine.models import FollowUp, InterviewStage, Session
from dashboard_engine.engine.sessions import filter_sessions, session_stats
from dashboard_engine.engine.stages import summarize_funnel
from dashboard_engine.schemas.engine import (
    ApplicationRecord,
    BucketOut,
    CalendarRequest,
    CalendarResponse,
    CoachingOut,
    FeedItemOut,
    FeedRequest,
    FeedResponse,
    FollowUpRecord,
    FunnelRequest,
    FunnelResponse,
    InterviewStageRecord,
    InterviewSummaryRequest,
    InterviewSummaryResponse,
    SessionListRequest,
    SessionListResponse,
    SessionRecord,
    SessionStatsOut,
    StageOut,
)
from dashboard_engine.services.calendar_preferences import (
    CalendarPreferencesService,
    get_calendar_preferences_service,
)
from dashboard_engine.services.calendar_view import CalendarView
from dashboard_engine.services.time_context import (
    TimeSnapshot,
    create_time_snapshot,
    resolve_timezone,
)
from dashboard_engine.utils.datetime_utils import coerce_instant, local_date

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/engine", tags=["Temporal Engine"])


def get_preferences_service() -> CalendarPreferencesService:
    return get_calendar_preferences_service()


def get_time_snapshot(
    request: Request,
    preferences: CalendarPreferencesService = Depends(get_preferences_service),
) -> TimeSnapshot:
    """Return the host clock's latest snapshot in the preferred timezone."""
    timezone_name = preferences.get_preferences().timezone
    clock = getattr(request.app.state, "dashboard_clock", None)
    if clock is None:
        return create_time_snapshot(timezone_name)
    snapshot = clock.snapshot
    if timezone_name:
        tzinfo = resolve_timezone(timezone_name, snapshot.tzinfo)
        return TimeSnapshot(
            tzinfo=tzinfo,
            now_utc=snapshot.now_utc,
            now_local=snapshot.now_utc.astimezone(tzinfo),
        )
    return snapshot


def _resolve_now(now: Optional[float], snapshot: TimeSnapshot) -> float:
    supplied = coerce_instant(now)
    return supplied if supplied is not None else snapshot.epoch_ms


def _session_out(session: Session) -> SessionRecord:
    return SessionRecord(
        id=session.id,
        start_at=coerce_instant(session.start_at),
        end_at=coerce_instant(session.end_at),
        student_name=session.student_name,
        title=session.title,
        kind=session.kind,
        status=session.status,
        updated_at=session.updated_at,
    )


def _follow_up_out(follow_up: FollowUp) -> FollowUpRecord:
    return FollowUpRecord(
        id=follow_up.id,
        due_at=coerce_instant(follow_up.due_at),
        description=follow_up.description,
        priority=follow_up.priority,
        completed=follow_up.completed,
        application_status=follow_up.application_status,
        updated_at=follow_up.updated_at,
    )


def _interview_out(stage: InterviewStage) -> InterviewStageRecord:
    return InterviewStageRecord(
        id=stage.id,
        application_id=stage.application_id,
        title=stage.title,
        scheduled_at=coerce_instant(stage.scheduled_at),
        outcome=stage.outcome,
        location=stage.location,
        updated_at=stage.updated_at,
    )


@router.post("/calendar", response_model=CalendarResponse)
async def render_calendar(
    payload: CalendarRequest,
    snapshot: TimeSnapshot = Depends(get_time_snapshot),
    preferences: CalendarPreferencesService = Depends(get_preferences_service),
) -> CalendarResponse:
    """Render a day, week or month grid with per-day buckets.

    View mode and week start fall back to the stored preferences. Without an
    anchor the grid opens on the local day of ``now``, so a pinned ``now``
    always lands inside the grid.
    """
    stored = preferences.get_preferences()
    week_start = payload.week_start or stored.week_start
    view_mode = payload.view_mode or stored.default_view
    now = _resolve_now(payload.now, snapshot)
    anchor = payload.anchor or local_date(now, snapshot.tzinfo) or snapshot.date

    try:
        view = CalendarView(
            week_start,
            view_mode=view_mode,
            anchor=anchor,
            tz=snapshot.tzinfo,
        )
        grid = view.render(
            [record.to_domain() for record in payload.sessions],
            [record.to_domain() for record in payload.follow_ups],
            now,
        )
    except ValueError as e:
        logger.warning(f"Rejected calendar request: {e}")
        raise HTTPException(status_code=422, detail=str(e))

    return CalendarResponse(
        view_mode=grid.view_mode,
        anchor=grid.anchor,
        week_start=grid.week_start,
        title=grid.title,
        days=grid.days,
        weeks=grid.weeks,
        buckets={
            key: BucketOut(
                day=bucket.day,
                sessions=[_session_out(session) for session in bucket.sessions],
                follow_ups=[_follow_up_out(item) for item in bucket.follow_ups],
            )
            for key, bucket in grid.buckets.items()
        },
        today_key=grid.today_key,
        current_session_ids=grid.current_session_ids,
    )


@router.post("/feed", response_model=FeedResponse)
async def ranked_feed(
    payload: FeedRequest,
    snapshot: TimeSnapshot = Depends(get_time_snapshot),
    settings: Settings = Depends(get_settings),
) -> FeedResponse:
    """Merge follow-ups, interviews, goals and sessions into one ranked feed."""
    fields_set = payload.model_fields_set
    window_days = (
        payload.window_days if "window_days" in fields_set else settings.default_window_days
    )
    max_items = payload.max_items if "max_items" in fields_set else settings.default_max_items

    items = collect_feed_items(
        follow_ups=[record.to_domain() for record in payload.follow_ups],
        interviews=[record.to_domain() for record in payload.interviews],
        goals=[record.to_domain() for record in payload.goals],
        sessions=[record.to_domain() for record in payload.sessions],
        exclude_closed_applications=payload.exclude_closed_applications,
    )
    feed = build_feed(
        items,
        _resolve_now(payload.now, snapshot),
        snapshot.tzinfo,
        window_days=window_days,
        max_items=max_items,
    )

    return FeedResponse(
        items=[
            FeedItemOut(
                kind=entry.item.kind,
                id=entry.item.id,
                title=entry.item.title,
                instant=entry.item.instant,
                status=entry.classification.status,
                label=entry.classification.label,
                tone=entry.classification.tone,
            )
            for entry in feed.items
        ],
        total=feed.total,
        remaining=feed.remaining,
    )


@router.post("/interviews/summary", response_model=InterviewSummaryResponse)
async def interview_summary(
    payload: InterviewSummaryRequest,
    snapshot: TimeSnapshot = Depends(get_time_snapshot),
) -> InterviewSummaryResponse:
    """Count upcoming interviews and describe the next one."""
    now = _resolve_now(payload.now, snapshot)
    summary = summarize_interviews((record.to_domain() for record in payload.interviews), now)

    next_interview = summary.next_interview
    next_label = None
    if next_interview is not None:
        next_label = classify(
            now, {"start": next_interview.scheduled_at}, snapshot.tzinfo, INTERVIEW_TEMPLATE
        ).label

    return InterviewSummaryResponse(
        upcoming_count=summary.upcoming_count,
        next_interview=_interview_out(next_interview) if next_interview else None,
        next_label=next_label,
    )


@router.post("/funnel", response_model=FunnelResponse)
async def funnel_summary(payload: FunnelRequest) -> FunnelResponse:
    """Count applications per funnel stage and pick the coaching copy."""
    summary = summarize_funnel(
        (record.to_domain() for record in payload.applications),
        sample_size=payload.sample_size,
    )
    return FunnelResponse(
        stages=[
            StageOut(
                stage=stage.stage,
                count=stage.count,
                samples=[
                    ApplicationRecord(
                        id=app.id,
                        company=app.company,
                        job_title=app.job_title,
                        stage=app.stage,
                        status=app.status,
                        updated_at=app.updated_at,
                    )
                    for app in stage.samples
                ],
            )
            for stage in summary.stages
        ],
        total=summary.total,
        coaching=CoachingOut(
            text=summary.coaching.text,
            cta_text=summary.coaching.cta_text,
            cta_href=summary.coaching.cta_href,
        ),
    )


@router.post("/sessions", response_model=SessionListResponse)
async def list_sessions(
    payload: SessionListRequest,
    snapshot: TimeSnapshot = Depends(get_time_snapshot),
) -> SessionListResponse:
    """Filter advising sessions by date range and report status counts."""
    sessions = [record.to_domain() for record in payload.sessions]
    filtered = filter_sessions(
        sessions,
        _resolve_now(payload.now, snapshot),
        snapshot.tzinfo,
        payload.date_range,
    )
    stats = session_stats(sessions)
    return SessionListResponse(
        sessions=[_session_out(session) for session in filtered],
        stats=SessionStatsOut(
            total=stats.total,
            scheduled=stats.scheduled,
            completed=stats.completed,
            cancelled=stats.cancelled,
        ),
    )


__all__ = ["router"]
