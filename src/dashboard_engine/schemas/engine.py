"""Request and response schemas for the temporal engine endpoints.

Timestamps are epoch milliseconds as supplied by the data layer. Missing or
NaN timestamps are accepted; the engine treats them as "no instant".
"""

from __future__ import annotations

import datetime
from typing import Literal, Optional

from pydantic import AliasChoices, BaseModel, Field

from dashboard_engine.engine.models import (
    Application,
    FollowUp,
    Goal,
    InterviewStage,
    Session,
)

ViewModeField = Literal["day", "week", "month"]
WeekStartField = Literal["sun", "mon"]


# =============================================================================
# Records
# =============================================================================


class SessionRecord(BaseModel):
    """Advising session as stored by the data layer."""

    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    start_at: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("start_at", "scheduled_at")
    )
    end_at: Optional[float] = None
    student_name: str = ""
    title: str = ""
    kind: str = Field(
        default="general_advising", validation_alias=AliasChoices("kind", "session_type")
    )
    status: str = "scheduled"
    updated_at: float = 0

    def to_domain(self) -> Session:
        return Session(
            id=self.id,
            start_at=self.start_at,
            end_at=self.end_at,
            student_name=self.student_name,
            title=self.title,
            kind=self.kind,
            status=self.status,
            updated_at=self.updated_at,
        )


class FollowUpRecord(BaseModel):
    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    due_at: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("due_at", "due_date")
    )
    description: str = ""
    priority: str = "medium"
    completed: bool = False
    application_status: Optional[str] = None
    updated_at: float = 0

    def to_domain(self) -> FollowUp:
        return FollowUp(
            id=self.id,
            due_at=self.due_at,
            description=self.description,
            priority=self.priority,
            completed=self.completed,
            application_status=self.application_status,
            updated_at=self.updated_at,
        )


class GoalRecord(BaseModel):
    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    title: str = ""
    due_at: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("due_at", "target_date")
    )
    status: str = "active"
    updated_at: float = 0

    def to_domain(self) -> Goal:
        return Goal(
            id=self.id,
            title=self.title,
            due_at=self.due_at,
            status=self.status,
            updated_at=self.updated_at,
        )


class InterviewStageRecord(BaseModel):
    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    application_id: str = ""
    title: str = ""
    scheduled_at: Optional[float] = None
    outcome: str = "pending"
    location: Optional[str] = None
    updated_at: float = 0

    def to_domain(self) -> InterviewStage:
        return InterviewStage(
            id=self.id,
            application_id=self.application_id,
            title=self.title,
            scheduled_at=self.scheduled_at,
            outcome=self.outcome,
            location=self.location,
            updated_at=self.updated_at,
        )


class ApplicationRecord(BaseModel):
    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    company: str = ""
    job_title: str = ""
    stage: Optional[str] = None
    status: Optional[str] = None
    updated_at: float = 0

    def to_domain(self) -> Application:
        return Application(
            id=self.id,
            company=self.company,
            job_title=self.job_title,
            stage=self.stage,
            status=self.status,
            updated_at=self.updated_at,
        )


# =============================================================================
# Calendar
# =============================================================================


class CalendarRequest(BaseModel):
    view_mode: Optional[ViewModeField] = Field(
        default=None,
        validation_alias=AliasChoices("view_mode", "viewMode"),
        description="Falls back to the stored default view.",
    )
    anchor: Optional[datetime.date] = Field(
        default=None, description="Date inside the period to show; today when omitted."
    )
    week_start: Optional[WeekStartField] = Field(
        default=None,
        validation_alias=AliasChoices("week_start", "weekStart"),
        description="Overrides the stored calendar preference.",
    )
    now: Optional[float] = Field(default=None, description="Epoch ms; server clock when omitted.")
    sessions: list[SessionRecord] = Field(default_factory=list)
    follow_ups: list[FollowUpRecord] = Field(default_factory=list)


class BucketOut(BaseModel):
    day: datetime.date
    sessions: list[SessionRecord]
    follow_ups: list[FollowUpRecord]


class CalendarResponse(BaseModel):
    view_mode: ViewModeField
    anchor: datetime.date
    week_start: WeekStartField
    title: str
    days: list[datetime.date]
    weeks: list[list[datetime.date]]
    buckets: dict[str, BucketOut]
    today_key: str
    current_session_ids: list[str]


# =============================================================================
# Feeds
# =============================================================================


class FeedRequest(BaseModel):
    follow_ups: list[FollowUpRecord] = Field(default_factory=list)
    interviews: list[InterviewStageRecord] = Field(default_factory=list)
    goals: list[GoalRecord] = Field(default_factory=list)
    sessions: list[SessionRecord] = Field(default_factory=list)
    window_days: Optional[int] = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("window_days", "windowDays"),
        description="Drop dated items beyond now + window_days; null disables the window.",
    )
    max_items: Optional[int] = Field(
        default=None, ge=0, validation_alias=AliasChoices("max_items", "maxItems")
    )
    exclude_closed_applications: bool = True
    now: Optional[float] = None


class FeedItemOut(BaseModel):
    kind: Literal["session", "follow_up", "interview", "goal"]
    id: str
    title: str
    instant: Optional[float] = None
    status: Literal["past", "current", "upcoming", "overdue"]
    label: str
    tone: Optional[str] = None


class FeedResponse(BaseModel):
    items: list[FeedItemOut]
    total: int
    remaining: int


class InterviewSummaryRequest(BaseModel):
    interviews: list[InterviewStageRecord] = Field(default_factory=list)
    now: Optional[float] = None


class InterviewSummaryResponse(BaseModel):
    upcoming_count: int
    next_interview: Optional[InterviewStageRecord] = None
    next_label: Optional[str] = None


# =============================================================================
# Funnel
# =============================================================================


class FunnelRequest(BaseModel):
    applications: list[ApplicationRecord] = Field(default_factory=list)
    sample_size: int = Field(default=3, ge=0, le=20)


class StageOut(BaseModel):
    stage: Literal["saved", "applied", "interview", "offer"]
    count: int
    samples: list[ApplicationRecord]


class CoachingOut(BaseModel):
    text: str
    cta_text: str
    cta_href: str


class FunnelResponse(BaseModel):
    stages: list[StageOut]
    total: int
    coaching: CoachingOut


# =============================================================================
# Sessions
# =============================================================================


class SessionListRequest(BaseModel):
    date_range: Literal["all", "past", "upcoming", "today"] = "all"
    sessions: list[SessionRecord] = Field(default_factory=list)
    now: Optional[float] = None


class SessionStatsOut(BaseModel):
    total: int
    scheduled: int
    completed: int
    cancelled: int


class SessionListResponse(BaseModel):
    sessions: list[SessionRecord]
    stats: SessionStatsOut
