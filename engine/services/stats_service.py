"""User statistics and leaderboard ranking."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date

from schemas import HistoryEntry, LeaderboardEntry, UserStats
from services.dates import resolve_today


@dataclass(frozen=True)
class UserTotal:
    """Input row for ranking: a user's display name and cumulative total."""

    user_id: str
    display_name: str
    total: int


def calculate_user_stats(
    history: Sequence[HistoryEntry], today: date | None = None
) -> UserStats:
    """Headline numbers for a user's history.

    ``average_per_day`` averages over logged days, not calendar days. The
    earliest date wins when two days tie for the best count.
    """
    today = resolve_today(today)
    if not history:
        return UserStats()

    total = sum(entry.count for entry in history)
    days_logged = len({entry.entry_date for entry in history})
    best = max(history, key=lambda e: (e.count, -e.entry_date.toordinal()))

    return UserStats(
        total=total,
        today_count=sum(e.count for e in history if e.entry_date == today),
        days_logged=days_logged,
        best_day=best.count,
        best_day_date=best.entry_date,
        average_per_day=total / days_logged,
    )


def rank_leaderboard(totals: Iterable[UserTotal]) -> list[LeaderboardEntry]:
    """Rank users by total, highest first.

    Ties share a rank and the next rank skips ahead (1, 1, 3). Tied users are
    listed by display name, then user id.
    """
    ordered = sorted(totals, key=lambda t: (-t.total, t.display_name, t.user_id))

    leaderboard: list[LeaderboardEntry] = []
    rank = 0
    previous_total: int | None = None
    for position, row in enumerate(ordered, start=1):
        if row.total != previous_total:
            rank = position
            previous_total = row.total
        leaderboard.append(
            LeaderboardEntry(
                rank=rank,
                user_id=row.user_id,
                display_name=row.display_name,
                total=row.total,
            )
        )
    return leaderboard
