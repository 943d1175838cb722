"""Tests for calendar windows."""

from __future__ import annotations

import datetime

import pytest

from dashboard_engine.engine.time_window import (
    WEEK_START_WEEKDAYS,
    days_in_view,
    shift_anchor,
    split_weeks,
    start_of_week,
    view_title,
)

D = datetime.date


def _assert_contiguous(days: list[datetime.date]) -> None:
    for earlier, later in zip(days, days[1:]):
        assert later - earlier == datetime.timedelta(days=1)


class TestDaysInView:
    """Tests for days_in_view."""

    def test_day_view_is_anchor_only(self):
        assert days_in_view("day", D(2024, 6, 12), "mon") == [D(2024, 6, 12)]

    def test_week_view_monday_start(self):
        """Wednesday 2024-06-12 with Monday start covers Mon 06-10 .. Sun 06-16."""
        days = days_in_view("week", D(2024, 6, 12), "mon")
        assert days == [D(2024, 6, 10 + offset) for offset in range(7)]
        assert days[0].weekday() == 0

    def test_week_view_sunday_start(self):
        days = days_in_view("week", D(2024, 6, 12), "sun")
        assert days[0] == D(2024, 6, 9)
        assert days[-1] == D(2024, 6, 15)

    def test_week_view_anchor_on_week_start(self):
        days = days_in_view("week", D(2024, 6, 10), "mon")
        assert days[0] == D(2024, 6, 10)

    def test_month_view_sunday_start_six_rows(self):
        days = days_in_view("month", D(2024, 6, 12), "sun")
        assert days[0] == D(2024, 5, 26)
        assert days[-1] == D(2024, 7, 6)
        assert len(days) == 42

    def test_month_view_monday_start_five_rows(self):
        days = days_in_view("month", D(2024, 6, 12), "mon")
        assert days[0] == D(2024, 5, 27)
        assert days[-1] == D(2024, 6, 30)
        assert len(days) == 35

    def test_month_view_exact_four_weeks(self):
        """February 2026 starts on a Sunday and ends on a Saturday."""
        days = days_in_view("month", D(2026, 2, 14), "sun")
        assert days[0] == D(2026, 2, 1)
        assert days[-1] == D(2026, 2, 28)
        assert len(days) == 28

    @pytest.mark.parametrize("week_start", ["sun", "mon"])
    def test_month_window_properties(self, week_start):
        anchor = D(2023, 1, 1)
        while anchor < D(2025, 12, 31):
            days = days_in_view("month", anchor, week_start)
            assert len(days) % 7 == 0
            assert days[0].weekday() == WEEK_START_WEEKDAYS[week_start]
            _assert_contiguous(days)
            assert anchor.replace(day=1) in days
            assert all(
                day in days
                for day in (anchor.replace(day=1) + datetime.timedelta(days=n) for n in range(28))
            )
            anchor += datetime.timedelta(days=17)

    def test_month_and_week_share_boundaries(self):
        """Every week row of a month grid is itself a week view."""
        month = days_in_view("month", D(2024, 9, 18), "mon")
        for row in split_weeks(month):
            assert row == days_in_view("week", row[3], "mon")

    def test_invalid_week_start_raises(self):
        with pytest.raises(ValueError):
            days_in_view("week", D(2024, 6, 12), "tue")  # type: ignore[arg-type]

    def test_invalid_view_raises(self):
        with pytest.raises(ValueError):
            days_in_view("year", D(2024, 6, 12), "sun")  # type: ignore[arg-type]


class TestStartOfWeek:
    def test_sunday_anchor_with_monday_start(self):
        assert start_of_week(D(2024, 6, 16), "mon") == D(2024, 6, 10)

    def test_sunday_anchor_with_sunday_start(self):
        assert start_of_week(D(2024, 6, 16), "sun") == D(2024, 6, 16)


class TestShiftAnchor:
    """Tests for calendar navigation steps."""

    def test_day_steps(self):
        assert shift_anchor("day", D(2024, 3, 1), -1) == D(2024, 2, 29)

    def test_week_steps(self):
        assert shift_anchor("week", D(2024, 6, 12), 1) == D(2024, 6, 19)

    def test_month_step_clamps_day(self):
        assert shift_anchor("month", D(2024, 1, 31), 1) == D(2024, 2, 29)

    def test_month_step_back_across_year(self):
        assert shift_anchor("month", D(2024, 1, 15), -1) == D(2023, 12, 15)


class TestViewTitle:
    def test_day_title(self):
        assert view_title("day", D(2024, 6, 12), "mon") == "Wednesday, June 12, 2024"

    def test_month_title(self):
        assert view_title("month", D(2024, 6, 12), "sun") == "June 2024"

    def test_week_title(self):
        assert view_title("week", D(2024, 6, 12), "mon") == "Jun 10 - Jun 16, 2024"

    def test_week_title_across_years(self):
        assert view_title("week", D(2024, 12, 31), "mon") == "Dec 30, 2024 - Jan 5, 2025"
