"""Tests for services/streaks_service.py - pure function tests."""

from datetime import date, timedelta

import pytest
import time_machine

from schemas import HistoryEntry
from services.streaks_service import (
    calculate_current_streak,
    calculate_longest_run,
    calculate_qualifying_run,
    calculate_streak,
)
from tests.factories import daily_history, entries_on

pytestmark = pytest.mark.unit

TODAY = date(2026, 3, 15)


def days_ago(*offsets: int) -> list[date]:
    return [TODAY - timedelta(days=n) for n in offsets]


class TestCalculateStreak:
    """Test calculate_streak function."""

    # ========== Edge Cases: Empty Input ==========

    def test_empty_history(self):
        result = calculate_streak([], TODAY)
        assert result.current_streak == 0
        assert result.longest_streak == 0
        assert result.last_entry_date is None

    # ========== Single Entry ==========

    def test_single_entry_today(self):
        result = calculate_streak(entries_on(days_ago(0)), TODAY)
        assert result.current_streak == 1
        assert result.longest_streak == 1
        assert result.last_entry_date == TODAY

    def test_single_entry_yesterday_is_still_active(self):
        """One day of grace: no entry yet today doesn't break the streak."""
        history = [HistoryEntry(entry_date=TODAY - timedelta(days=1), count=50)]
        result = calculate_streak(history, TODAY)
        assert result.current_streak == 1
        assert result.longest_streak == 1

    def test_single_entry_two_days_ago_is_broken(self):
        result = calculate_streak(entries_on(days_ago(2)), TODAY)
        assert result.current_streak == 0
        assert result.longest_streak == 1
        assert result.last_entry_date == TODAY - timedelta(days=2)

    # ========== Consecutive Days ==========

    def test_week_ending_today(self):
        result = calculate_streak(entries_on(days_ago(*range(7))), TODAY)
        assert result.current_streak == 7
        assert result.longest_streak == 7

    def test_run_ending_yesterday(self):
        result = calculate_streak(entries_on(days_ago(1, 2, 3)), TODAY)
        assert result.current_streak == 3

    # ========== Gaps ==========

    def test_gap_ends_current_run(self):
        result = calculate_streak(entries_on(days_ago(0, 1, 3, 4, 5)), TODAY)
        assert result.current_streak == 2
        assert result.longest_streak == 3

    def test_longest_run_in_the_past(self):
        """A broken streak still counts toward the longest streak."""
        history = entries_on(days_ago(10, 11, 12, 13, 14))
        result = calculate_streak(history, TODAY)
        assert result.current_streak == 0
        assert result.longest_streak == 5

    def test_longest_across_multiple_runs(self):
        history = entries_on(days_ago(0, 1, 5, 6, 7, 8, 20, 21))
        result = calculate_streak(history, TODAY)
        assert result.current_streak == 2
        assert result.longest_streak == 4

    def test_zero_count_day_still_counts_as_logged(self):
        history = daily_history(TODAY - timedelta(days=2), [100, 0, 30])
        assert calculate_streak(history, TODAY).current_streak == 3

    # ========== Ordering and Dates ==========

    def test_order_independent(self):
        days = days_ago(0, 1, 2, 6, 7)
        forward = calculate_streak(entries_on(days), TODAY)
        backward = calculate_streak(entries_on(list(reversed(days))), TODAY)
        assert forward == backward

    def test_future_entries_do_not_extend_current_streak(self):
        history = entries_on(days_ago(0, 1) + [TODAY + timedelta(days=3)])
        result = calculate_streak(history, TODAY)
        assert result.current_streak == 2
        assert result.last_entry_date == TODAY + timedelta(days=3)

    def test_crosses_month_boundary(self):
        history = daily_history(date(2026, 2, 26), [100] * 6)  # Feb 26 -> Mar 3
        result = calculate_streak(history, date(2026, 3, 3))
        assert result.current_streak == 6

    @time_machine.travel("2026-03-15", tick=False)
    def test_defaults_to_system_date(self):
        result = calculate_streak(entries_on(days_ago(0, 1)))
        assert result.current_streak == 2


class TestQualifyingRun:
    """Anchored runs with a minimum daily count (perfect week/month)."""

    def test_all_days_meet_minimum(self):
        history = daily_history(TODAY - timedelta(days=6), [100, 120, 150, 100, 101, 130, 100])
        assert calculate_qualifying_run(history, TODAY, min_count=100) == 7

    def test_day_below_minimum_breaks_run(self):
        history = daily_history(TODAY - timedelta(days=6), [100, 120, 150, 99, 101, 130, 100])
        assert calculate_qualifying_run(history, TODAY, min_count=100) == 3

    def test_today_in_progress_does_not_break_run_ending_yesterday(self):
        history = daily_history(TODAY - timedelta(days=7), [100] * 7 + [40])
        assert calculate_qualifying_run(history, TODAY, min_count=100) == 7

    def test_run_must_reach_yesterday(self):
        history = daily_history(TODAY - timedelta(days=9), [100] * 8)
        assert calculate_qualifying_run(history, TODAY, min_count=100) == 0

    def test_duplicate_dates_accumulate(self):
        history = [
            HistoryEntry(entry_date=TODAY, count=60),
            HistoryEntry(entry_date=TODAY, count=40),
        ]
        assert calculate_qualifying_run(history, TODAY, min_count=100) == 1

    def test_current_streak_is_zero_minimum_run(self):
        history = entries_on(days_ago(0, 1, 2), count=0)
        assert calculate_current_streak(history, TODAY) == 3


class TestLongestRun:
    def test_empty(self):
        assert calculate_longest_run([]) == 0

    def test_duplicates_ignored(self):
        assert calculate_longest_run(days_ago(0, 0, 1, 1)) == 2

    def test_picks_longest(self):
        assert calculate_longest_run(days_ago(0, 2, 3, 4, 9, 10)) == 3
