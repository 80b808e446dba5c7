"""Adaptive daily target calculation.

Turns a user's running total and dated history into a pace assessment:

- mode: ahead / standard / catch-up against the expected cumulative total
- daily target: base rate, or a tapered catch-up rate when far behind
- projections from the user's recent 7-entry average

Tapered catch-up: when a user falls more than ``standard_buffer_days`` of
base rate behind, the naive "remaining / days left" target is limited to
``taper_factor`` times the user's recent capacity, then capped by the
injury-prevention cap, and never drops below the base rate.

Every function is pure: "today" and the challenge are explicit arguments.
"""

import math
from collections.abc import Sequence
from datetime import date, timedelta

from core.challenge import DEFAULT_CHALLENGE, Challenge
from models import ProgressionMode
from schemas import HistoryEntry, ProgressionResult
from services.dates import days_between, resolve_today, sort_entries

AVERAGE_WINDOW = 7


def calculate_days_elapsed(
    today: date, challenge: Challenge = DEFAULT_CHALLENGE
) -> int:
    """Day number within the challenge; the start date is day 1."""
    return max(0, days_between(challenge.start, today) + 1)


def calculate_days_remaining(
    days_elapsed: int, challenge: Challenge = DEFAULT_CHALLENGE
) -> int:
    """Days left after today, floored at 1 so targets never divide by zero."""
    return max(1, challenge.total_days - days_elapsed)


def calculate_expected_total(
    days_elapsed: int, challenge: Challenge = DEFAULT_CHALLENGE
) -> int:
    return min(days_elapsed * challenge.base_daily_target, challenge.total_goal)


def calculate_seven_day_average(history: Sequence[HistoryEntry]) -> float:
    """Average count of the last 7 entries by date.

    Uses entries, not calendar days: with gaps the window reaches further
    back, and with fewer than 7 entries it averages what exists.
    """
    recent = sort_entries(history)[-AVERAGE_WINDOW:]
    if not recent:
        return 0.0
    return sum(entry.count for entry in recent) / len(recent)


def determine_progression_mode(
    deficit: int, challenge: Challenge = DEFAULT_CHALLENGE
) -> ProgressionMode:
    """Pick the mode from the signed deficit (positive = ahead).

    First match wins: not behind is AHEAD, behind by at most the standard
    buffer is STANDARD, anything further behind is CATCH_UP.
    """
    if deficit >= 0:
        return ProgressionMode.AHEAD
    if deficit >= -challenge.standard_buffer:
        return ProgressionMode.STANDARD
    return ProgressionMode.CATCH_UP


def _max_increase(capacity: float, taper_factor: float) -> int:
    # Round first so float noise (e.g. 1.1 * 100) doesn't push ceil up a step
    return math.ceil(round(capacity * taper_factor, 9))


def calculate_daily_target(
    mode: ProgressionMode,
    current_total: int,
    days_remaining: int,
    seven_day_average: float,
    challenge: Challenge = DEFAULT_CHALLENGE,
) -> int:
    """Calculate today's target using the tapered catch-up algorithm.

    Args:
        mode: Mode from determine_progression_mode()
        current_total: User's cumulative count
        days_remaining: Days left in the challenge (>= 1 in practice)
        seven_day_average: Recent average from calculate_seven_day_average()
        challenge: Challenge constants

    Returns:
        0 once the goal is met, the base rate in AHEAD/STANDARD mode, and in
        CATCH_UP mode a target between the base rate and the daily cap.
    """
    remaining_goal = challenge.total_goal - current_total
    if remaining_goal <= 0 or days_remaining <= 0:
        return 0

    base = challenge.base_daily_target
    if mode in (ProgressionMode.AHEAD, ProgressionMode.STANDARD):
        return base

    naive_target = math.ceil(remaining_goal / days_remaining)
    user_capacity = max(seven_day_average, base)
    tapered_target = min(
        naive_target, _max_increase(user_capacity, challenge.taper_factor)
    )
    capped_target = min(tapered_target, challenge.max_daily_cap)
    return max(capped_target, base)


def calculate_projected_completion_date(
    current_total: int,
    seven_day_average: float,
    today: date,
    challenge: Challenge = DEFAULT_CHALLENGE,
) -> date | None:
    """Date the goal is reached at the recent pace, or None without a pace."""
    remaining_goal = challenge.total_goal - current_total
    if remaining_goal <= 0:
        return today
    if seven_day_average <= 0:
        return None
    days_needed = math.ceil(remaining_goal / seven_day_average)
    return today + timedelta(days=days_needed)


def calculate_catchup_days_needed(
    deficit: int, daily_target: int, challenge: Challenge = DEFAULT_CHALLENGE
) -> int:
    """Days at the current target needed to close a shortfall."""
    extra_per_day = daily_target - challenge.base_daily_target
    if deficit >= 0 or extra_per_day <= 0:
        return 0
    return math.ceil(-deficit / extra_per_day)


def calculate_progression(
    current_total: int,
    history: Sequence[HistoryEntry],
    today: date | None = None,
    challenge: Challenge = DEFAULT_CHALLENGE,
) -> ProgressionResult:
    """Compute the full progression picture for a user.

    Args:
        current_total: Sum of the user's counts (caller keeps it consistent
            with ``history``)
        history: The user's entries, any order
        today: Evaluation date; defaults to the system date
        challenge: Challenge constants

    Returns:
        ProgressionResult. Callers treat ``challenge_closed`` as the signal
        that the challenge is over; ``days_remaining`` stays >= 1.
    """
    today = resolve_today(today)

    days_elapsed = calculate_days_elapsed(today, challenge)
    days_remaining = calculate_days_remaining(days_elapsed, challenge)
    expected_total = calculate_expected_total(days_elapsed, challenge)
    deficit = current_total - expected_total
    seven_day_average = calculate_seven_day_average(history)

    mode = determine_progression_mode(deficit, challenge)
    daily_target = calculate_daily_target(
        mode, current_total, days_remaining, seven_day_average, challenge
    )

    on_track = abs(deficit) <= expected_total * challenge.on_track_tolerance

    return ProgressionResult(
        mode=mode,
        daily_target=daily_target,
        weekly_target=daily_target * 7,
        deficit=deficit,
        days_remaining=days_remaining,
        seven_day_average=seven_day_average,
        projected_completion_total=current_total + seven_day_average * days_remaining,
        on_track=on_track,
        current_total=current_total,
        expected_total=expected_total,
        days_elapsed=days_elapsed,
        percent_complete=current_total / challenge.total_goal * 100,
        projected_completion_date=calculate_projected_completion_date(
            current_total, seven_day_average, today, challenge
        ),
        catchup_days_needed=calculate_catchup_days_needed(
            deficit, daily_target, challenge
        ),
        challenge_closed=today > challenge.end,
    )
