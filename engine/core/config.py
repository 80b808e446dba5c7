"""Application configuration using pydantic-settings."""

from datetime import date
from functools import lru_cache
from typing import Self

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def validate_challenge_values(
    *,
    start: date,
    end: date,
    total_goal: int,
    max_daily_cap: int,
    taper_factor: float,
    night_owl_hour: int,
    early_bird_hour: int,
) -> None:
    """Raise ValueError if the values cannot describe a winnable challenge.

    Shared by Settings and core.challenge.Challenge so a challenge built
    directly is held to the same rules as one loaded from the environment.
    """
    if end < start:
        raise ValueError(
            f"CHALLENGE_END must be on or after CHALLENGE_START (got {start} -> {end})."
        )
    if total_goal <= 0:
        raise ValueError("TOTAL_GOAL must be positive.")
    base_daily_target = total_goal // ((end - start).days + 1)
    if max_daily_cap < base_daily_target:
        raise ValueError(
            f"MAX_DAILY_CAP ({max_daily_cap}) must be at least the "
            f"base daily target ({base_daily_target})."
        )
    if taper_factor < 1:
        raise ValueError("TAPER_FACTOR must be >= 1.")
    for name, hour in (
        ("NIGHT_OWL_HOUR", night_owl_hour),
        ("EARLY_BIRD_HOUR", early_bird_hour),
    ):
        if not 0 <= hour <= 24:
            raise ValueError(f"{name} must be between 0 and 24.")


class Settings(BaseSettings):
    """Challenge settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # Challenge window (both days inclusive)
    challenge_start: date = date(2026, 1, 1)
    challenge_end: date = date(2026, 12, 31)

    total_goal: int = 36500
    max_daily_cap: int = 200  # Injury prevention

    # Catch-up tuning
    # Behind by up to this many days of base rate still counts as "standard"
    standard_buffer_days: int = 3
    # Adaptive target may rise at most this factor over recent capacity
    taper_factor: float = 1.2
    # |deficit| within this fraction of the expected total is "on track"
    on_track_tolerance: float = 0.05

    # Special achievements
    night_owl_hour: int = 22
    early_bird_hour: int = 6
    perfect_score_repeats: int = 10

    log_level: str = "INFO"
    log_format: str = ""  # "json" or "console"

    @model_validator(mode="after")
    def validate_config(self) -> Self:
        validate_challenge_values(
            start=self.challenge_start,
            end=self.challenge_end,
            total_goal=self.total_goal,
            max_daily_cap=self.max_daily_cap,
            taper_factor=self.taper_factor,
            night_owl_hour=self.night_owl_hour,
            early_bird_hour=self.early_bird_hour,
        )
        return self

    @property
    def total_days(self) -> int:
        return (self.challenge_end - self.challenge_start).days + 1

    @property
    def base_daily_target(self) -> int:
        """Daily pace that exactly meets the goal on the last day."""
        return self.total_goal // self.total_days


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Call this in tests to reset settings between test cases.
    After clearing, the next get_settings() call will create
    a fresh Settings instance with current environment variables.

    Example:
        def test_something(monkeypatch):
            monkeypatch.setenv("TOTAL_GOAL", "1000")
            clear_settings_cache()
            settings = get_settings()  # Fresh instance
    """
    get_settings.cache_clear()
