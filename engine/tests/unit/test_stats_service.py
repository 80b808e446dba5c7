"""Tests for services/stats_service.py."""

from datetime import date

import pytest

from schemas import HistoryEntry
from services.stats_service import UserTotal, calculate_user_stats, rank_leaderboard
from tests.factories import daily_history

pytestmark = pytest.mark.unit


class TestCalculateUserStats:
    def test_empty_history(self):
        stats = calculate_user_stats([], date(2026, 2, 1))
        assert stats.total == 0
        assert stats.days_logged == 0
        assert stats.best_day_date is None
        assert stats.average_per_day == 0

    def test_headline_numbers(self):
        history = daily_history(date(2026, 2, 1), [80, 150, 70])
        stats = calculate_user_stats(history, date(2026, 2, 3))

        assert stats.total == 300
        assert stats.today_count == 70
        assert stats.days_logged == 3
        assert stats.best_day == 150
        assert stats.best_day_date == date(2026, 2, 2)
        assert stats.average_per_day == 100

    def test_nothing_logged_today(self):
        history = daily_history(date(2026, 2, 1), [80])
        assert calculate_user_stats(history, date(2026, 2, 9)).today_count == 0

    def test_best_day_tie_picks_earliest(self):
        history = [
            HistoryEntry(entry_date=date(2026, 2, 5), count=120),
            HistoryEntry(entry_date=date(2026, 2, 1), count=120),
        ]
        assert calculate_user_stats(history, date(2026, 2, 9)).best_day_date == date(
            2026, 2, 1
        )


class TestRankLeaderboard:
    def test_orders_by_total_descending(self):
        board = rank_leaderboard(
            [
                UserTotal("u1", "Ana", 500),
                UserTotal("u2", "Ben", 900),
                UserTotal("u3", "Cy", 100),
            ]
        )
        assert [row.user_id for row in board] == ["u2", "u1", "u3"]
        assert [row.rank for row in board] == [1, 2, 3]

    def test_ties_share_rank_and_skip(self):
        board = rank_leaderboard(
            [
                UserTotal("u1", "Zed", 700),
                UserTotal("u2", "Amy", 700),
                UserTotal("u3", "Bo", 300),
            ]
        )
        assert [(row.display_name, row.rank) for row in board] == [
            ("Amy", 1),
            ("Zed", 1),
            ("Bo", 3),
        ]

    def test_empty(self):
        assert rank_leaderboard([]) == []
