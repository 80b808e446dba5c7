"""Calendar-date helpers shared by the calculators.

All comparisons work on plain ``date`` values (no time of day, no zone).
Timestamps only matter for the time-of-day achievements.
"""

from collections.abc import Iterable
from datetime import date, datetime

from models import today as _system_today
from schemas import HistoryEntry


def to_date(value: date | datetime | str) -> date:
    """Normalize a date, datetime, or ISO string to a calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])


def resolve_today(today: date | datetime | None = None) -> date:
    """Use the injected date when given, otherwise the system's UTC date."""
    if today is None:
        return _system_today()
    return to_date(today)


def days_between(earlier: date, later: date) -> int:
    """Whole days from ``earlier`` to ``later`` (negative if reversed)."""
    return (later - earlier).days


def sort_entries(
    history: Iterable[HistoryEntry], *, newest_first: bool = False
) -> list[HistoryEntry]:
    """Return entries ordered by date (stable for equal dates)."""
    return sorted(history, key=lambda e: e.entry_date, reverse=newest_first)
