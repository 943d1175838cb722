"""Tests for session list filtering and stats."""

from __future__ import annotations

import datetime

import pytest
from conftest import UTC, ms

from dashboard_engine.engine.models import Session
from dashboard_engine.engine.sessions import filter_sessions, session_stats

NOW = ms(2024, 6, 12, 12)


@pytest.fixture
def sessions() -> list[Session]:
    return [
        Session(id="yesterday", start_at=ms(2024, 6, 11, 10), status="completed"),
        Session(id="this-morning", start_at=ms(2024, 6, 12, 9), status="completed"),
        Session(id="tonight", start_at=ms(2024, 6, 12, 20)),
        Session(id="next-week", start_at=ms(2024, 6, 19, 10)),
        Session(id="unscheduled", start_at=None, status="cancelled"),
        Session(id="missed", start_at=ms(2024, 6, 5, 10), status="no_show"),
    ]


def _ids(items: list[Session]) -> list[str]:
    return [session.id for session in items]


class TestFilterSessions:
    """Tests for filter_sessions."""

    def test_all_sorted_soonest_first_undated_last(self, sessions):
        assert _ids(filter_sessions(sessions, NOW, UTC)) == [
            "missed",
            "yesterday",
            "this-morning",
            "tonight",
            "next-week",
            "unscheduled",
        ]

    def test_upcoming(self, sessions):
        assert _ids(filter_sessions(sessions, NOW, UTC, "upcoming")) == ["tonight", "next-week"]

    def test_past_newest_first(self, sessions):
        assert _ids(filter_sessions(sessions, NOW, UTC, "past")) == ["this-morning", "yesterday", "missed"]

    def test_today(self, sessions):
        assert _ids(filter_sessions(sessions, NOW, UTC, "today")) == ["this-morning", "tonight"]

    def test_today_follows_timezone(self, sessions):
        """20:00 UTC on the 12th is already the 13th in UTC+5."""
        tz = datetime.timezone(datetime.timedelta(hours=5))
        assert _ids(filter_sessions(sessions, NOW, tz, "today")) == ["this-morning"]

    def test_invalid_range(self, sessions):
        with pytest.raises(ValueError):
            filter_sessions(sessions, NOW, UTC, "tomorrow")  # type: ignore[arg-type]


class TestSessionStats:
    def test_counts(self, sessions):
        stats = session_stats(sessions)
        assert stats.total == 6
        assert stats.scheduled == 2
        assert stats.completed == 2
        assert stats.cancelled == 2

    def test_empty(self):
        stats = session_stats([])
        assert (stats.total, stats.scheduled, stats.completed, stats.cancelled) == (0, 0, 0, 0)
