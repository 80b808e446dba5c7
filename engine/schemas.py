"""Pydantic schemas for engine inputs and results.

Every result is plain structured data: ``model_dump(mode="json")`` yields a
JSON-ready dict for the presentation layer.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from models import AchievementCategory, ProgressionMode


class HistoryEntry(BaseModel):
    """One user-day record.

    At most one entry exists per user and date; the entry store merges
    repeated logs for a date into one count.
    """

    model_config = ConfigDict(frozen=True, from_attributes=True)

    entry_date: date
    count: int = Field(ge=0)
    # Wall-clock time of the (latest) log, in the user's local zone.
    # Only the time-of-day achievements look at it.
    logged_at: datetime | None = None


class ProgressionResult(BaseModel):
    """Adaptive target and pace for one user at one date.

    ``deficit`` is ``current_total - expected_total``: positive means ahead.
    """

    mode: ProgressionMode
    daily_target: int
    weekly_target: int
    deficit: int
    days_remaining: int
    seven_day_average: float
    projected_completion_total: float
    on_track: bool

    current_total: int
    expected_total: int
    days_elapsed: int
    percent_complete: float
    projected_completion_date: date | None = None
    catchup_days_needed: int = 0
    challenge_closed: bool = False


class StreakResult(BaseModel):
    """Streak statistics derived from a user's history."""

    current_streak: int = Field(default=0, ge=0)
    longest_streak: int = Field(default=0, ge=0)
    last_entry_date: date | None = None


class AchievementData(BaseModel):
    """Catalog entry for an achievement (read-only reference data)."""

    model_config = ConfigDict(frozen=True)

    key: str
    category: AchievementCategory
    name: str
    description: str
    icon: str
    threshold: int | None = None


class AwardResult(BaseModel):
    """Response of the achievement store's award-once operation."""

    success: bool
    already_earned: bool = False

    @property
    def newly_granted(self) -> bool:
        return self.success and not self.already_earned


class AchievementSummary(BaseModel):
    """Earned vs. available achievements."""

    earned: int
    total: int
    percentage: int


class UserStats(BaseModel):
    """Headline numbers for a user's history."""

    total: int = 0
    today_count: int = 0
    days_logged: int = 0
    best_day: int = 0
    best_day_date: date | None = None
    average_per_day: float = 0.0


class LeaderboardEntry(BaseModel):
    """A ranked row of the leaderboard."""

    rank: int
    user_id: str
    display_name: str
    total: int


class DashboardData(BaseModel):
    """Everything the dashboard shows for one user."""

    user_id: str
    progression: ProgressionResult
    streak: StreakResult
    stats: UserStats
    achievements: AchievementSummary
