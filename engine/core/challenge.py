"""Challenge calendar and constants.

A challenge is a fixed date window with a fixed total goal. Everything the
calculators need (base rate, cap, catch-up tuning, special-achievement
hours) lives on one frozen value so pure functions can take it as a plain
argument instead of reading configuration.
"""

from dataclasses import dataclass
from datetime import date

from core.config import Settings, get_settings, validate_challenge_values


@dataclass(frozen=True)
class Challenge:
    """Fixed parameters of a challenge (start and end are inclusive)."""

    start: date
    end: date
    total_goal: int
    max_daily_cap: int
    standard_buffer_days: int = 3
    taper_factor: float = 1.2
    on_track_tolerance: float = 0.05
    night_owl_hour: int = 22
    early_bird_hour: int = 6
    perfect_score_repeats: int = 10

    def __post_init__(self) -> None:
        validate_challenge_values(
            start=self.start,
            end=self.end,
            total_goal=self.total_goal,
            max_daily_cap=self.max_daily_cap,
            taper_factor=self.taper_factor,
            night_owl_hour=self.night_owl_hour,
            early_bird_hour=self.early_bird_hour,
        )

    @property
    def total_days(self) -> int:
        return (self.end - self.start).days + 1

    @property
    def base_daily_target(self) -> int:
        return self.total_goal // self.total_days

    @property
    def halfway_total(self) -> float:
        return self.total_goal / 2

    @property
    def standard_buffer(self) -> int:
        """Largest shortfall still treated as standard pace."""
        return self.base_daily_target * self.standard_buffer_days

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


DEFAULT_CHALLENGE = Challenge(
    start=date(2026, 1, 1),
    end=date(2026, 12, 31),
    total_goal=36500,
    max_daily_cap=200,
)


def challenge_from_settings(settings: Settings) -> Challenge:
    return Challenge(
        start=settings.challenge_start,
        end=settings.challenge_end,
        total_goal=settings.total_goal,
        max_daily_cap=settings.max_daily_cap,
        standard_buffer_days=settings.standard_buffer_days,
        taper_factor=settings.taper_factor,
        on_track_tolerance=settings.on_track_tolerance,
        night_owl_hour=settings.night_owl_hour,
        early_bird_hour=settings.early_bird_hour,
        perfect_score_repeats=settings.perfect_score_repeats,
    )


def get_challenge() -> Challenge:
    """Challenge built from the current settings.

    Not cached on its own: it follows get_settings(), so
    clear_settings_cache() is enough to pick up new values.
    """
    return challenge_from_settings(get_settings())
