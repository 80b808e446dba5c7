"""Repository layer for the engine's external collaborators.

Repositories hide storage behind small async contracts so services can
fetch snapshots and request side effects without knowing the backend:
- Entry store: fetch a user's history, upsert a day's count
- Achievement store: award an achievement once per user
"""

from repositories.achievement_repository import (
    AchievementRepository,
    InMemoryAchievementRepository,
)
from repositories.entry_repository import EntryRepository, InMemoryEntryRepository

__all__ = [
    "AchievementRepository",
    "EntryRepository",
    "InMemoryAchievementRepository",
    "InMemoryEntryRepository",
]
