"""Temporal engine package consolidating calendar bucketing, classification and feeds."""

from .action_feed import build_feed, collect_feed_items, summarize_interviews
from .classifier import classify, due_soon
from .day_index import build_day_buckets, build_index, day_key
from .models import (
    Application,
    Bucket,
    Classification,
    ClassifiedEntity,
    FeedItem,
    FollowUp,
    FunnelSummary,
    Goal,
    InterviewStage,
    RankedFeed,
    Session,
)
from .sessions import filter_sessions, session_stats
from .stages import coaching_copy, normalize_stage, summarize_funnel
from .time_window import days_in_view, shift_anchor, view_title

__all__ = [
    "Application",
    "Bucket",
    "Classification",
    "ClassifiedEntity",
    "FeedItem",
    "FollowUp",
    "FunnelSummary",
    "Goal",
    "InterviewStage",
    "RankedFeed",
    "Session",
    "build_day_buckets",
    "build_feed",
    "build_index",
    "classify",
    "coaching_copy",
    "collect_feed_items",
    "day_key",
    "days_in_view",
    "due_soon",
    "filter_sessions",
    "normalize_stage",
    "session_stats",
    "shift_anchor",
    "summarize_funnel",
    "summarize_interviews",
    "view_title",
]
