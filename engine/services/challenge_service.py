"""Challenge service: orchestrates repositories around the pure calculators.

This module handles:
- Entry logging (validation + upsert through the entry store)
- Achievement awarding (evaluate, then award each qualifying key once)
- Dashboard and leaderboard assembly

The calculators stay pure; everything that touches a store lives here.
"""

from collections.abc import Mapping
from datetime import date, datetime

from core import get_logger
from core.challenge import Challenge, get_challenge
from repositories import AchievementRepository, EntryRepository
from schemas import (
    AchievementData,
    DashboardData,
    HistoryEntry,
    LeaderboardEntry,
)
from services.achievements_service import (
    evaluate_achievements,
    get_achievement_catalog,
    summarize_achievements,
)
from services.dates import resolve_today
from services.progression_service import calculate_progression
from services.stats_service import UserTotal, calculate_user_stats, rank_leaderboard
from services.streaks_service import calculate_streak

logger = get_logger(__name__)


class InvalidEntryError(Exception):
    """Raised when a logged entry fails validation."""

    pass


class NonPositiveCountError(InvalidEntryError):
    """Raised when a log adds zero or a negative amount."""

    def __init__(self, count: int):
        self.count = count
        super().__init__(f"Logged count must be positive, got {count}")


class EntryOutsideChallengeError(InvalidEntryError):
    """Raised when an entry date falls outside the challenge window."""

    def __init__(self, entry_date: date, challenge: Challenge):
        self.entry_date = entry_date
        super().__init__(
            f"Entry date {entry_date} is outside the challenge "
            f"({challenge.start} to {challenge.end})"
        )


class AchievementAwardError(Exception):
    """Raised by an achievement store when an award could not be recorded."""

    def __init__(self, user_id: str, achievement_key: str, reason: str = ""):
        self.user_id = user_id
        self.achievement_key = achievement_key
        message = f"Could not award {achievement_key} to {user_id}"
        super().__init__(f"{message}: {reason}" if reason else message)


def _total(history: list[HistoryEntry]) -> int:
    return sum(entry.count for entry in history)


async def log_entry(
    entries: EntryRepository,
    user_id: str,
    count: int,
    entry_date: date | None = None,
    logged_at: datetime | None = None,
    challenge: Challenge | None = None,
) -> HistoryEntry:
    """Record ``count`` for a day, adding to anything already logged that day.

    Args:
        entries: Entry store
        user_id: User identifier
        count: Amount to add (must be positive)
        entry_date: Day to log against; defaults to today
        logged_at: Local wall-clock time of the log, if known
        challenge: Challenge constants; defaults to configured challenge

    Returns:
        The merged entry for the day

    Raises:
        NonPositiveCountError: If count <= 0
        EntryOutsideChallengeError: If the date is outside the challenge
    """
    challenge = challenge or get_challenge()
    entry_date = resolve_today(entry_date)

    if count <= 0:
        raise NonPositiveCountError(count)
    if not challenge.contains(entry_date):
        raise EntryOutsideChallengeError(entry_date, challenge)

    entry = await entries.upsert_entry(user_id, entry_date, count, logged_at)
    logger.info(
        "entry.logged",
        user_id=user_id,
        entry_date=entry_date.isoformat(),
        added=count,
        day_total=entry.count,
    )
    return entry


async def award_achievements(
    entries: EntryRepository,
    achievements: AchievementRepository,
    user_id: str,
    today: date | None = None,
    challenge: Challenge | None = None,
) -> list[AchievementData]:
    """Evaluate a user's history and award every qualifying achievement once.

    The evaluator reports qualification only; the achievement store decides
    whether an award is new. A store failure for one key is logged and the
    remaining keys are still attempted.

    Returns:
        Catalog entries for achievements granted by this call, in catalog order
    """
    challenge = challenge or get_challenge()
    today = resolve_today(today)

    history = await entries.get_entries(user_id)
    qualifying = evaluate_achievements(history, _total(history), today, challenge)

    newly_granted: list[AchievementData] = []
    for achievement in get_achievement_catalog(challenge):
        if achievement.key not in qualifying:
            continue
        try:
            result = await achievements.award_if_new(user_id, achievement.key)
        except AchievementAwardError as e:
            logger.warning(
                "achievement.award_failed",
                user_id=user_id,
                key=achievement.key,
                error=str(e),
            )
            continue

        if result.newly_granted:
            newly_granted.append(achievement)
            logger.info("achievement.awarded", user_id=user_id, key=achievement.key)
        elif not result.success:
            logger.warning(
                "achievement.award_rejected", user_id=user_id, key=achievement.key
            )

    return newly_granted


async def get_dashboard(
    entries: EntryRepository,
    achievements: AchievementRepository,
    user_id: str,
    today: date | None = None,
    challenge: Challenge | None = None,
) -> DashboardData:
    """Progression, streak, stats and achievement progress for one user."""
    challenge = challenge or get_challenge()
    today = resolve_today(today)

    history = await entries.get_entries(user_id)
    held = await achievements.get_user_achievements(user_id)

    return DashboardData(
        user_id=user_id,
        progression=calculate_progression(_total(history), history, today, challenge),
        streak=calculate_streak(history, today),
        stats=calculate_user_stats(history, today),
        achievements=summarize_achievements(
            (a.achievement_key for a in held), challenge
        ),
    )


async def get_leaderboard(
    entries: EntryRepository,
    display_names: Mapping[str, str],
) -> list[LeaderboardEntry]:
    """Rank every user with entries; unknown names fall back to the user id."""
    totals = await entries.get_totals()
    return rank_leaderboard(
        UserTotal(
            user_id=user_id,
            display_name=display_names.get(user_id, user_id),
            total=total,
        )
        for user_id, total in totals.items()
    )
