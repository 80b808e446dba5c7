"""Enumerations and records owned by the challenge data model."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from enum import Enum as PyEnum


def utcnow() -> datetime:
    """Return current UTC time (timezone-aware)."""
    return datetime.now(UTC)


def today() -> date:
    """Return current UTC date."""
    return datetime.now(UTC).date()


class ProgressionMode(str, PyEnum):
    """Where a user stands against the expected pace."""

    AHEAD = "ahead"
    STANDARD = "standard"
    CATCH_UP = "catchup"


class AchievementCategory(str, PyEnum):
    """Closed set of achievement categories.

    CONSISTENCY and RECOVERY are reserved: no predicates are defined for
    them yet, so they never qualify.
    """

    MILESTONE = "milestone"
    STREAK = "streak"
    DAILY = "daily"
    CONSISTENCY = "consistency"
    RECOVERY = "recovery"
    SPECIAL = "special"


@dataclass(frozen=True)
class UserAchievement:
    """An achievement held by a user, unique per (user_id, achievement_key)."""

    user_id: str
    achievement_key: str
    earned_at: datetime
