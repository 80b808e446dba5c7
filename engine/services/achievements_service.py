"""Achievement catalog and unlock predicates.

Achievements are evaluated from scratch on every call: the evaluator
returns every key the history currently satisfies and holds no memory of
earlier calls. Granting each key once is the achievement store's job (see
services.challenge_service.award_achievements).

Categories:
- milestone: cumulative total reaches a threshold
- streak: current streak reaches a threshold
- daily: best single day reaches a threshold, plus perfect week/month
  (7/30 consecutive days at or above the base rate, anchored at today)
- special: first challenge day, halfway total, night/early logging,
  exactly-base-rate days repeated
- consistency, recovery: reserved, nothing qualifies yet
"""

from collections.abc import Iterable, Sequence
from datetime import date
from functools import lru_cache

from core.challenge import DEFAULT_CHALLENGE, Challenge
from models import AchievementCategory
from schemas import AchievementData, AchievementSummary, HistoryEntry
from services.dates import resolve_today
from services.streaks_service import calculate_current_streak, calculate_qualifying_run

MILESTONE_ACHIEVEMENTS: list[AchievementData] = [
    AchievementData(
        key="milestone_100",
        category=AchievementCategory.MILESTONE,
        name="First Step",
        description="Complete 100 total pushups",
        icon="🏁",
        threshold=100,
    ),
    AchievementData(
        key="milestone_1000",
        category=AchievementCategory.MILESTONE,
        name="Thousand Club",
        description="Complete 1,000 total pushups",
        icon="🎯",
        threshold=1000,
    ),
    AchievementData(
        key="milestone_5000",
        category=AchievementCategory.MILESTONE,
        name="Five Grand",
        description="Complete 5,000 total pushups",
        icon="💪",
        threshold=5000,
    ),
    AchievementData(
        key="milestone_10000",
        category=AchievementCategory.MILESTONE,
        name="Ten Thousand Strong",
        description="Complete 10,000 total pushups",
        icon="🔥",
        threshold=10000,
    ),
    AchievementData(
        key="milestone_20000",
        category=AchievementCategory.MILESTONE,
        name="Twenty K Champion",
        description="Complete 20,000 total pushups",
        icon="🏆",
        threshold=20000,
    ),
    AchievementData(
        key="milestone_36500",
        category=AchievementCategory.MILESTONE,
        name="Goal Complete",
        description="Complete 36,500 total pushups",
        icon="💎",
        threshold=36500,
    ),
]

STREAK_ACHIEVEMENTS: list[AchievementData] = [
    AchievementData(
        key=f"streak_{days}",
        category=AchievementCategory.STREAK,
        name=name,
        description=f"Log pushups {days} days in a row",
        icon=icon,
        threshold=days,
    )
    for days, name, icon in [
        (3, "Three Days Strong", "🌟"),
        (7, "Week Warrior", "⭐"),
        (14, "Two Week Titan", "🌠"),
        (30, "Month Master", "🔆"),
        (50, "Unbreakable", "☀️"),
        (100, "Century Streak", "🌞"),
        (365, "Year-Long Legend", "🏅"),
    ]
]

SINGLE_DAY_ACHIEVEMENTS: list[AchievementData] = [
    AchievementData(
        key=f"daily_{count}",
        category=AchievementCategory.DAILY,
        name=name,
        description=f"Complete {count}+ pushups in one day",
        icon=icon,
        threshold=count,
    )
    for count, name, icon in [
        (100, "Century Club", "✨"),
        (150, "Overachiever", "💥"),
        (200, "Beast Mode", "🚀"),
    ]
]

PERFECT_RUN_ACHIEVEMENTS: list[AchievementData] = [
    AchievementData(
        key="perfect_week",
        category=AchievementCategory.DAILY,
        name="Superhuman",
        description="Hit the daily base target every day for 7 days",
        icon="🦾",
        threshold=7,
    ),
    AchievementData(
        key="perfect_month",
        category=AchievementCategory.DAILY,
        name="Perfect Month",
        description="Hit the daily base target every day for 30 days",
        icon="🎖️",
        threshold=30,
    ),
]

SPECIAL_NEW_YEAR = "special_newyear"
SPECIAL_HALFWAY = "special_halfway"
SPECIAL_NIGHT = "special_night"
SPECIAL_EARLY = "special_early"
SPECIAL_PERFECT = "special_perfect"


@lru_cache(maxsize=8)
def _special_achievements(challenge: Challenge) -> tuple[AchievementData, ...]:
    halfway = challenge.halfway_total
    halfway_label = f"{halfway:,.0f}" if halfway.is_integer() else f"{halfway:,}"
    return (
        AchievementData(
            key=SPECIAL_NEW_YEAR,
            category=AchievementCategory.SPECIAL,
            name="New Year's Hero",
            description=f"Log pushups on {challenge.start:%B} {challenge.start.day}, "
            f"{challenge.start.year}",
            icon="🎆",
        ),
        AchievementData(
            key=SPECIAL_HALFWAY,
            category=AchievementCategory.SPECIAL,
            name="Halfway There",
            description=f"Reach {halfway_label} pushups",
            icon="🎊",
        ),
        AchievementData(
            key=SPECIAL_NIGHT,
            category=AchievementCategory.SPECIAL,
            name="Night Owl",
            description=f"Log pushups at or after {challenge.night_owl_hour}:00",
            icon="🌙",
        ),
        AchievementData(
            key=SPECIAL_EARLY,
            category=AchievementCategory.SPECIAL,
            name="Early Bird",
            description=f"Log pushups before {challenge.early_bird_hour}:00",
            icon="🌅",
        ),
        AchievementData(
            key=SPECIAL_PERFECT,
            category=AchievementCategory.SPECIAL,
            name="Perfect Score",
            description=(
                f"Log exactly {challenge.base_daily_target} pushups "
                f"({challenge.perfect_score_repeats} times)"
            ),
            icon="🔢",
            threshold=challenge.perfect_score_repeats,
        ),
    )


def get_achievement_catalog(
    challenge: Challenge = DEFAULT_CHALLENGE,
) -> list[AchievementData]:
    """All achievements, in display order."""
    return [
        *MILESTONE_ACHIEVEMENTS,
        *STREAK_ACHIEVEMENTS,
        *SINGLE_DAY_ACHIEVEMENTS,
        *PERFECT_RUN_ACHIEVEMENTS,
        *_special_achievements(challenge),
    ]


def get_achievement(
    key: str, challenge: Challenge = DEFAULT_CHALLENGE
) -> AchievementData | None:
    """Look up catalog metadata by key."""
    for achievement in get_achievement_catalog(challenge):
        if achievement.key == key:
            return achievement
    return None


def _thresholds_reached(
    value: int, achievements: Iterable[AchievementData]
) -> set[str]:
    return {
        a.key for a in achievements if a.threshold is not None and value >= a.threshold
    }


def check_milestones(total_count: int) -> set[str]:
    return _thresholds_reached(total_count, MILESTONE_ACHIEVEMENTS)


def check_streaks(history: Sequence[HistoryEntry], today: date) -> set[str]:
    """Streak achievements use the current (anchored) streak."""
    return _thresholds_reached(
        calculate_current_streak(history, today), STREAK_ACHIEVEMENTS
    )


def check_daily(
    history: Sequence[HistoryEntry],
    today: date,
    challenge: Challenge = DEFAULT_CHALLENGE,
) -> set[str]:
    """Single-day records plus perfect week/month runs."""
    if not history:
        return set()

    best_day = max(entry.count for entry in history)
    earned = _thresholds_reached(best_day, SINGLE_DAY_ACHIEVEMENTS)

    perfect_run = calculate_qualifying_run(
        history, today, min_count=challenge.base_daily_target
    )
    earned |= _thresholds_reached(perfect_run, PERFECT_RUN_ACHIEVEMENTS)
    return earned


def check_consistency(history: Sequence[HistoryEntry]) -> set[str]:
    """Reserved category; no consistency achievements are defined."""
    return set()


def check_recovery(history: Sequence[HistoryEntry]) -> set[str]:
    """Reserved category; no recovery achievements are defined."""
    return set()


def check_special(
    history: Sequence[HistoryEntry],
    total_count: int,
    challenge: Challenge = DEFAULT_CHALLENGE,
) -> set[str]:
    """Calendar, halfway, time-of-day and count-pattern achievements.

    Time-of-day checks read the hour of ``logged_at`` as given; callers pass
    timestamps already converted to the user's local zone. Entries without a
    timestamp never count for them.
    """
    earned: set[str] = set()

    if any(entry.entry_date == challenge.start for entry in history):
        earned.add(SPECIAL_NEW_YEAR)

    if total_count >= challenge.halfway_total:
        earned.add(SPECIAL_HALFWAY)

    log_hours = [entry.logged_at.hour for entry in history if entry.logged_at]
    if any(hour >= challenge.night_owl_hour for hour in log_hours):
        earned.add(SPECIAL_NIGHT)
    if any(hour < challenge.early_bird_hour for hour in log_hours):
        earned.add(SPECIAL_EARLY)

    exact_days = sum(
        1 for entry in history if entry.count == challenge.base_daily_target
    )
    if exact_days >= challenge.perfect_score_repeats:
        earned.add(SPECIAL_PERFECT)

    return earned


def evaluate_achievements(
    history: Sequence[HistoryEntry],
    total_count: int,
    today: date | None = None,
    challenge: Challenge = DEFAULT_CHALLENGE,
) -> set[str]:
    """Every achievement key the history currently satisfies.

    Args:
        history: The user's full history, any order
        total_count: Sum of the history's counts
        today: Evaluation date; defaults to the system date
        challenge: Challenge constants

    Returns:
        Set of qualifying achievement keys (already-held keys included)
    """
    today = resolve_today(today)
    history = list(history)

    earned: set[str] = set()
    earned |= check_milestones(total_count)
    earned |= check_streaks(history, today)
    earned |= check_daily(history, today, challenge)
    earned |= check_consistency(history)
    earned |= check_recovery(history)
    earned |= check_special(history, total_count, challenge)
    return earned


def summarize_achievements(
    earned_keys: Iterable[str], challenge: Challenge = DEFAULT_CHALLENGE
) -> AchievementSummary:
    """Count earned achievements against the catalog (unknown keys ignored)."""
    catalog_keys = {a.key for a in get_achievement_catalog(challenge)}
    earned = len(catalog_keys & set(earned_keys))
    total = len(catalog_keys)
    percentage = round(earned / total * 100) if total else 0
    return AchievementSummary(earned=earned, total=total, percentage=percentage)
