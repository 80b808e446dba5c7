"""Achievement store: which user holds which achievement."""

import asyncio
from datetime import UTC, datetime
from typing import Protocol

from models import UserAchievement, utcnow
from schemas import AwardResult


class AchievementRepository(Protocol):
    """Storage contract for earned achievements (unique per user + key)."""

    async def award_if_new(self, user_id: str, achievement_key: str) -> AwardResult:
        """Grant the achievement unless the user already holds it."""
        ...

    async def get_user_achievements(self, user_id: str) -> list[UserAchievement]:
        ...


class InMemoryAchievementRepository:
    """Achievement store backed by a dict keyed on (user_id, achievement_key)."""

    def __init__(self) -> None:
        self._earned: dict[tuple[str, str], UserAchievement] = {}
        self._lock = asyncio.Lock()

    async def award_if_new(
        self,
        user_id: str,
        achievement_key: str,
        earned_at: datetime | None = None,
    ) -> AwardResult:
        """Record the award once; naive ``earned_at`` values are taken as UTC."""
        if earned_at is None:
            earned_at = utcnow()
        elif earned_at.tzinfo is None:
            earned_at = earned_at.replace(tzinfo=UTC)

        async with self._lock:
            if (user_id, achievement_key) in self._earned:
                return AwardResult(success=True, already_earned=True)
            self._earned[(user_id, achievement_key)] = UserAchievement(
                user_id=user_id,
                achievement_key=achievement_key,
                earned_at=earned_at,
            )
            return AwardResult(success=True, already_earned=False)

    async def get_user_achievements(self, user_id: str) -> list[UserAchievement]:
        held = [a for (uid, _), a in self._earned.items() if uid == user_id]
        return sorted(held, key=lambda a: a.earned_at)
