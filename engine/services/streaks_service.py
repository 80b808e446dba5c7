"""Streak calculation utilities.

Streak rules:
- A day counts when the user has an entry for it.
- current_streak is the run of consecutive days ending today, or ending
  yesterday when today has no entry yet (one day of grace). An entry two
  or more days old means the current streak is 0.
- longest_streak is the longest run anywhere in the history, whether or
  not it reaches today.
- Entries dated after "today" cannot extend a run that ends today.

The anchored walk is generalized by calculate_qualifying_run() so the
perfect-week/month achievements reuse it with a minimum daily count.
"""

from collections.abc import Iterable
from datetime import date, timedelta

from schemas import HistoryEntry, StreakResult
from services.dates import resolve_today

_ONE_DAY = timedelta(days=1)


def _daily_counts(history: Iterable[HistoryEntry]) -> dict[date, int]:
    """Collapse entries to one count per date (repeated dates accumulate)."""
    counts: dict[date, int] = {}
    for entry in history:
        counts[entry.entry_date] = counts.get(entry.entry_date, 0) + entry.count
    return counts


def calculate_qualifying_run(
    history: Iterable[HistoryEntry],
    today: date | None = None,
    min_count: int = 0,
) -> int:
    """Length of the run of consecutive qualifying days anchored at today.

    A day qualifies when its count is at least ``min_count``. The run must
    end today or yesterday; a non-qualifying (or missing) today does not
    break a run that ends yesterday.

    Args:
        history: Entries in any order
        today: Evaluation date; defaults to the system date
        min_count: Minimum count for a day to qualify

    Returns:
        Number of days in the anchored run (0 if none)
    """
    today = resolve_today(today)
    qualifying = {
        day for day, count in _daily_counts(history).items() if count >= min_count
    }

    if today in qualifying:
        expected = today
    elif today - _ONE_DAY in qualifying:
        expected = today - _ONE_DAY
    else:
        return 0

    run = 0
    while expected in qualifying:
        run += 1
        expected -= _ONE_DAY
    return run


def calculate_longest_run(days: Iterable[date]) -> int:
    """Longest run of consecutive calendar days in ``days``."""
    unique_days = sorted(set(days), reverse=True)
    if not unique_days:
        return 0

    longest = 1
    run = 1
    for newer, older in zip(unique_days, unique_days[1:]):
        if newer - older == _ONE_DAY:
            run += 1
            longest = max(longest, run)
        else:
            run = 1
    return longest


def calculate_streak(
    history: Iterable[HistoryEntry],
    today: date | None = None,
) -> StreakResult:
    """Calculate current streak, longest streak and last entry date.

    Args:
        history: The user's entries, any order
        today: Evaluation date; defaults to the system date

    Returns:
        StreakResult; all zeros and no date for an empty history
    """
    entries = list(history)
    if not entries:
        return StreakResult(current_streak=0, longest_streak=0, last_entry_date=None)

    days = _daily_counts(entries).keys()
    current_streak = calculate_qualifying_run(entries, today)
    longest_streak = calculate_longest_run(days)

    return StreakResult(
        current_streak=current_streak,
        longest_streak=max(longest_streak, current_streak),
        last_entry_date=max(days),
    )


def calculate_current_streak(
    history: Iterable[HistoryEntry], today: date | None = None
) -> int:
    return calculate_qualifying_run(history, today)
