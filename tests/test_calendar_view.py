"""Tests for the calendar view consumer."""

from __future__ import annotations

import datetime

import pytest
from conftest import UTC, ms

from dashboard_engine.engine.models import FollowUp, Session
from dashboard_engine.services.calendar_view import CalendarView

NOW = ms(2024, 6, 12, 12)
D = datetime.date


@pytest.fixture
def view() -> CalendarView:
    return CalendarView("mon", view_mode="week", anchor=D(2024, 6, 12), tz=UTC)


class TestNavigation:
    """Tests for CalendarView navigation."""

    def test_next_and_previous_week(self, view):
        assert view.go_next() == D(2024, 6, 19)
        assert view.go_previous() == D(2024, 6, 12)

    def test_month_navigation(self, view):
        view.set_view("month")
        assert view.go_next() == D(2024, 7, 12)

    def test_today(self, view):
        view.go_next()
        assert view.go_today(D(2024, 6, 12)) == D(2024, 6, 12)

    def test_invalid_week_start_rejected_on_construction(self):
        with pytest.raises(ValueError):
            CalendarView("fri", anchor=D(2024, 6, 12))  # type: ignore[arg-type]

    def test_invalid_view_rejected(self, view):
        with pytest.raises(ValueError):
            view.set_view("agenda")  # type: ignore[arg-type]
        assert view.view_mode == "week"


class TestRender:
    """Tests for CalendarView.render."""

    def test_week_grid(self, view):
        sessions = [
            Session(id="live", start_at=ms(2024, 6, 12, 11), end_at=ms(2024, 6, 12, 13)),
            Session(id="later", start_at=ms(2024, 6, 14, 9), end_at=ms(2024, 6, 14, 10)),
        ]
        follow_ups = [FollowUp(id="f", due_at=ms(2024, 6, 16, 8))]

        grid = view.render(sessions, follow_ups, NOW)

        assert grid.title == "Jun 10 - Jun 16, 2024"
        assert grid.days[0] == D(2024, 6, 10)
        assert len(grid.weeks) == 1
        assert grid.today_key == "2024-06-12"
        assert grid.current_session_ids == ["live"]
        assert [s.id for s in grid.buckets["2024-06-14"].sessions] == ["later"]
        assert [f.id for f in grid.buckets["2024-06-16"].follow_ups] == ["f"]

    def test_month_grid_rows(self):
        view = CalendarView("sun", view_mode="month", anchor=D(2024, 6, 1), tz=UTC)
        grid = view.render([], [], NOW)
        assert grid.title == "June 2024"
        assert len(grid.weeks) == 6
        assert all(len(row) == 7 for row in grid.weeks)
        assert set(grid.buckets) == {day.isoformat() for day in grid.days}

    def test_day_grid(self, view):
        view.set_view("day")
        grid = view.render([], [], NOW)
        assert grid.days == [D(2024, 6, 12)]
        assert grid.weeks == [[D(2024, 6, 12)]]

    def test_render_is_pure(self, view):
        sessions = [Session(id="s", start_at=ms(2024, 6, 12, 9))]
        first = view.render(sessions, [], NOW)
        second = view.render(sessions, [], NOW)
        assert first == second
        assert view.anchor == D(2024, 6, 12)
