"""
Validity Window Tests

Tests for the window checks shared by menus and coupons, and for the
calendar-month bounds used by monthly coupon limits.
"""
import pytest
from datetime import datetime, timedelta, timezone as dt_timezone

from core_backend.utils.time_windows import WindowState, check_window, month_bounds

NOW = datetime(2025, 3, 15, 12, 0, tzinfo=dt_timezone.utc)


class TestCheckWindow:
    """Window bounds are inclusive and open when missing."""

    def test_open_when_both_bounds_missing(self):
        assert check_window(None, None, NOW) == WindowState.OPEN

    def test_not_started_before_start(self):
        assert check_window(NOW + timedelta(seconds=1), None, NOW) == WindowState.NOT_STARTED

    def test_ended_after_end(self):
        assert check_window(None, NOW - timedelta(seconds=1), NOW) == WindowState.ENDED

    def test_bounds_are_inclusive(self):
        """
        Scenario:
        - Window starts and ends exactly at ``now``
        - Expected: still open on both edges
        """
        assert check_window(NOW, NOW, NOW) == WindowState.OPEN

    def test_defaults_to_current_time(self):
        assert check_window(None, None) == WindowState.OPEN


class TestMonthBounds:
    def test_mid_month(self):
        start, end = month_bounds(NOW)
        assert start == datetime(2025, 3, 1, tzinfo=dt_timezone.utc)
        assert end == datetime(2025, 4, 1, tzinfo=dt_timezone.utc)

    def test_december_rolls_into_next_year(self):
        start, end = month_bounds(datetime(2024, 12, 31, 23, 59, tzinfo=dt_timezone.utc))
        assert start == datetime(2024, 12, 1, tzinfo=dt_timezone.utc)
        assert end == datetime(2025, 1, 1, tzinfo=dt_timezone.utc)

    def test_non_utc_input_uses_utc_month(self):
        """
        Scenario:
        - 1 April 02:00 at UTC+05:30 is still 31 March in UTC
        - Expected: the March window
        """
        ist = dt_timezone(timedelta(hours=5, minutes=30))
        start, end = month_bounds(datetime(2025, 4, 1, 2, 0, tzinfo=ist))
        assert start == datetime(2025, 3, 1, tzinfo=dt_timezone.utc)
        assert end == datetime(2025, 4, 1, tzinfo=dt_timezone.utc)
