"""Engine startup.

Call create_engine() once when the host process starts: it configures
logging, loads the challenge from settings and wires the stores the
services in services.challenge_service operate on.
"""

from dataclasses import dataclass

from core.challenge import Challenge, get_challenge
from core.logger import configure_logging, get_logger
from repositories import (
    AchievementRepository,
    EntryRepository,
    InMemoryAchievementRepository,
    InMemoryEntryRepository,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class Engine:
    """A configured challenge with its collaborator stores."""

    challenge: Challenge
    entries: EntryRepository
    achievements: AchievementRepository


def create_engine(
    entries: EntryRepository | None = None,
    achievements: AchievementRepository | None = None,
) -> Engine:
    """Configure logging and build an Engine.

    Stores default to the in-memory implementations.
    """
    configure_logging()
    challenge = get_challenge()
    logger.info(
        "engine.started",
        challenge_start=challenge.start.isoformat(),
        challenge_end=challenge.end.isoformat(),
        total_goal=challenge.total_goal,
    )
    return Engine(
        challenge=challenge,
        entries=entries if entries is not None else InMemoryEntryRepository(),
        achievements=(
            achievements
            if achievements is not None
            else InMemoryAchievementRepository()
        ),
    )
