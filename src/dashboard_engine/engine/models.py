"""Domain records consumed by the temporal engine and the structures it derives."""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from typing import Literal, Optional

ViewMode = Literal["day", "week", "month"]
WeekStart = Literal["sun", "mon"]
TemporalStatus = Literal["past", "current", "upcoming", "overdue"]
FunnelStage = Literal["saved", "applied", "interview", "offer"]
FeedKind = Literal["session", "follow_up", "interview", "goal"]

FUNNEL_STAGES: tuple[FunnelStage, ...] = ("saved", "applied", "interview", "offer")
EXCLUDED = "excluded"


@dataclass(slots=True)
class Session:
    """Advising session with a start and end instant (epoch milliseconds)."""

    id: str
    start_at: Optional[float]
    end_at: Optional[float] = None
    student_name: str = ""
    title: str = ""
    kind: str = "general_advising"
    status: str = "scheduled"
    updated_at: float = 0


@dataclass(slots=True)
class FollowUp:
    """Follow-up task, optionally attached to an application."""

    id: str
    due_at: Optional[float] = None
    description: str = ""
    priority: str = "medium"
    completed: bool = False
    application_status: Optional[str] = None
    updated_at: float = 0


@dataclass(slots=True)
class Goal:
    id: str
    title: str = ""
    due_at: Optional[float] = None
    status: str = "active"
    updated_at: float = 0


@dataclass(slots=True)
class InterviewStage:
    """One stage of an interview process attached to an application."""

    id: str
    application_id: str = ""
    title: str = ""
    scheduled_at: Optional[float] = None
    outcome: str = "pending"
    location: Optional[str] = None
    updated_at: float = 0


@dataclass(slots=True)
class Application:
    """Job application; ``stage`` supersedes the legacy ``status`` field."""

    id: str
    company: str = ""
    job_title: str = ""
    stage: Optional[str] = None
    status: Optional[str] = None
    updated_at: float = 0


@dataclass(slots=True)
class Classification:
    """Temporal status and display label derived for one entity."""

    status: TemporalStatus
    label: str
    tone: Optional[str] = None


@dataclass(slots=True)
class LabelTemplate:
    """Per-kind wording for the shared today/tomorrow/overdue decision tree.

    ``today``, ``tomorrow`` and ``other`` are ``str.format`` templates receiving
    ``time`` (``3:05 PM``), ``weekday`` (``Wed``) and ``date`` (``Jun 12``).
    """

    today: str = "Today at {time}"
    tomorrow: str = "Tomorrow at {time}"
    other: str = "{weekday}, {date} at {time}"
    overdue: str = "Overdue"
    undated: str = "No date"


@dataclass(slots=True)
class FeedItem:
    """Kind-agnostic view of an entity that can appear in an action feed."""

    kind: FeedKind
    id: str
    title: str
    start: Optional[float] = None
    end: Optional[float] = None
    due: Optional[float] = None
    updated_at: float = 0
    terminal: bool = False
    template: LabelTemplate = field(default_factory=LabelTemplate)

    @property
    def instant(self) -> Optional[float]:
        """Return the instant used for ordering and windowing."""

        if self.due is not None:
            return self.due
        return self.start


@dataclass(slots=True)
class ClassifiedEntity:
    item: FeedItem
    classification: Classification

    @property
    def is_overdue(self) -> bool:
        return self.classification.status == "overdue"


@dataclass(slots=True)
class RankedFeed:
    """Ordered feed slice plus the size of the feed before truncation."""

    items: list[ClassifiedEntity]
    total: int

    @property
    def remaining(self) -> int:
        return max(0, self.total - len(self.items))


@dataclass(slots=True)
class Bucket:
    """Entities assigned to one displayed calendar day."""

    day: datetime.date
    sessions: list[Session] = field(default_factory=list)
    follow_ups: list[FollowUp] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.sessions and not self.follow_ups


@dataclass(slots=True)
class CoachingCopy:
    text: str
    cta_text: str
    cta_href: str


@dataclass(slots=True)
class StageSummary:
    stage: FunnelStage
    count: int
    samples: list[Application] = field(default_factory=list)


@dataclass(slots=True)
class FunnelSummary:
    """Funnel counts in canonical stage order plus the derived coaching copy."""

    stages: list[StageSummary]
    coaching: CoachingCopy

    @property
    def counts(self) -> dict[str, int]:
        return {summary.stage: summary.count for summary in self.stages}

    @property
    def total(self) -> int:
        return sum(summary.count for summary in self.stages)


@dataclass(slots=True)
class InterviewSummary:
    upcoming_count: int
    next_interview: Optional[InterviewStage] = None


@dataclass(slots=True)
class SessionStats:
    total: int
    scheduled: int
    completed: int
    cancelled: int


__all__ = [
    "Application",
    "Bucket",
    "Classification",
    "ClassifiedEntity",
    "CoachingCopy",
    "EXCLUDED",
    "FUNNEL_STAGES",
    "FeedItem",
    "FeedKind",
    "FollowUp",
    "FunnelStage",
    "FunnelSummary",
    "Goal",
    "InterviewStage",
    "InterviewSummary",
    "LabelTemplate",
    "RankedFeed",
    "Session",
    "SessionStats",
    "StageSummary",
    "TemporalStatus",
    "ViewMode",
    "WeekStart",
]
