"""Tests for the ranked action feed and interview summary."""

from __future__ import annotations

import pytest
from conftest import UTC, ms

from dashboard_engine.engine.action_feed import (
    build_feed,
    collect_feed_items,
    feed_item_from_follow_up,
    summarize_interviews,
)
from dashboard_engine.engine.models import FeedItem, FollowUp, Goal, InterviewStage, Session

NOW = ms(2024, 6, 12, 12)


@pytest.fixture
def feed_items() -> list[FeedItem]:
    return collect_feed_items(
        follow_ups=[
            FollowUp(id="f1", due_at=ms(2024, 6, 11, 9), description="Thank-you note"),
            FollowUp(id="f2", due_at=ms(2024, 6, 14, 12), description="Send portfolio"),
            FollowUp(id="f3", description="Ask for referral", updated_at=5),
            FollowUp(id="f4", description="Update resume", updated_at=9),
            FollowUp(id="f5", due_at=ms(2024, 6, 10), completed=True),
        ],
        interviews=[
            InterviewStage(id="i1", title="Onsite", scheduled_at=ms(2024, 6, 13, 15)),
            InterviewStage(id="i2", title="Phone screen", scheduled_at=ms(2024, 6, 13, 9), outcome="passed"),
        ],
        goals=[Goal(id="g1", title="Apply to ten roles", due_at=ms(2024, 7, 12))],
    )


def _ids(feed) -> list[str]:
    return [entry.item.id for entry in feed.items]


class TestBuildFeed:
    """Tests for build_feed ordering, filtering and truncation."""

    def test_ranking(self, feed_items):
        feed = build_feed(feed_items, NOW, UTC)
        assert _ids(feed) == ["f1", "i1", "f2", "g1", "f4", "f3"]
        assert feed.total == 6
        assert feed.remaining == 0

    def test_overdue_items_lead(self, feed_items):
        feed = build_feed(feed_items, NOW, UTC)
        statuses = [entry.classification.status for entry in feed.items]
        first_other = next(i for i, status in enumerate(statuses) if status != "overdue")
        assert all(status != "overdue" for status in statuses[first_other:])
        assert feed.items[0].classification.label == "Overdue"

    def test_terminal_items_are_dropped(self, feed_items):
        ids = _ids(build_feed(feed_items, NOW, UTC))
        assert "f5" not in ids
        assert "i2" not in ids

    def test_window_drops_far_items_but_keeps_undated(self, feed_items):
        feed = build_feed(feed_items, NOW, UTC, window_days=7)
        assert _ids(feed) == ["f1", "i1", "f2", "f4", "f3"]
        assert feed.total == 5

    def test_max_items_reports_remaining(self, feed_items):
        feed = build_feed(feed_items, NOW, UTC, window_days=7, max_items=2)
        assert _ids(feed) == ["f1", "i1"]
        assert feed.total == 5
        assert feed.remaining == 3

    def test_zero_max_items(self, feed_items):
        feed = build_feed(feed_items, NOW, UTC, max_items=0)
        assert feed.items == []
        assert feed.total == 6

    def test_idempotent(self, feed_items):
        first = build_feed(feed_items, NOW, UTC)
        second = build_feed(list(reversed(feed_items)), NOW, UTC)
        assert _ids(first) == _ids(second)

    def test_duplicates_keep_most_recent_copy(self):
        items = [
            FeedItem(kind="follow_up", id="dup", title="Old", due=ms(2024, 6, 13), updated_at=1),
            FeedItem(kind="follow_up", id="dup", title="New", due=ms(2024, 6, 14), updated_at=2),
            FeedItem(kind="goal", id="dup", title="Goal", due=ms(2024, 6, 15)),
        ]
        feed = build_feed(items, NOW, UTC)
        assert [(entry.item.kind, entry.item.title) for entry in feed.items] == [
            ("follow_up", "New"),
            ("goal", "Goal"),
        ]

    def test_ties_break_on_kind_then_id(self):
        due = ms(2024, 6, 20)
        items = [
            FeedItem(kind="goal", id="a", title="Goal", due=due),
            FeedItem(kind="follow_up", id="b", title="B", due=due),
            FeedItem(kind="follow_up", id="a", title="A", due=due),
        ]
        feed = build_feed(items, NOW, UTC)
        assert [(entry.item.kind, entry.item.id) for entry in feed.items] == [
            ("follow_up", "a"),
            ("follow_up", "b"),
            ("goal", "a"),
        ]

    def test_empty_feed(self):
        feed = build_feed([], NOW, UTC)
        assert feed.items == []
        assert feed.total == 0


class TestAdapters:
    def test_closed_application_follow_ups_excluded(self):
        follow_up = FollowUp(id="f", due_at=ms(2024, 6, 13), application_status="Rejected")
        assert feed_item_from_follow_up(follow_up).terminal
        assert not feed_item_from_follow_up(follow_up, exclude_closed_applications=False).terminal

    def test_sessions_use_span(self):
        items = collect_feed_items(
            sessions=[
                Session(id="s1", start_at=ms(2024, 6, 12, 11), end_at=ms(2024, 6, 12, 13), student_name="Ada"),
                Session(id="s2", start_at=ms(2024, 6, 12, 9), status="cancelled"),
            ]
        )
        feed = build_feed(items, NOW, UTC)
        assert _ids(feed) == ["s1"]
        assert feed.items[0].classification.status == "current"
        assert feed.items[0].item.title == "Ada"


class TestSummarizeInterviews:
    """Tests for summarize_interviews."""

    def test_counts_upcoming_and_picks_next(self):
        stages = [
            InterviewStage(id="past", scheduled_at=ms(2024, 6, 1)),
            InterviewStage(id="later", scheduled_at=ms(2024, 6, 20)),
            InterviewStage(id="soon", scheduled_at=ms(2024, 6, 13)),
            InterviewStage(id="done", scheduled_at=ms(2024, 6, 14), outcome="failed"),
            InterviewStage(id="unscheduled"),
        ]
        summary = summarize_interviews(stages, NOW)
        assert summary.upcoming_count == 2
        assert summary.next_interview is not None
        assert summary.next_interview.id == "soon"

    def test_none_upcoming(self):
        summary = summarize_interviews([InterviewStage(id="past", scheduled_at=ms(2024, 6, 1))], NOW)
        assert summary.upcoming_count == 0
        assert summary.next_interview is None
