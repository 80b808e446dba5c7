"""Entry store: per-user daily counts.

The engine never talks to storage; services fetch a snapshot here and hand
it to the pure calculators. InMemoryEntryRepository is the reference
implementation used by tests and local tooling.
"""

import asyncio
from collections import defaultdict
from datetime import date, datetime
from typing import Protocol

from schemas import HistoryEntry


class EntryRepository(Protocol):
    """Storage contract for history entries."""

    async def get_entries(self, user_id: str) -> list[HistoryEntry]:
        """All entries for a user, sorted by date ascending."""
        ...

    async def upsert_entry(
        self,
        user_id: str,
        entry_date: date,
        count: int,
        logged_at: datetime | None = None,
    ) -> HistoryEntry:
        """Add ``count`` to the user's entry for ``entry_date``."""
        ...

    async def get_totals(self) -> dict[str, int]:
        """Cumulative total per user."""
        ...


class InMemoryEntryRepository:
    """Entry store backed by a dict, one record per (user, date)."""

    def __init__(self) -> None:
        self._entries: dict[str, dict[date, HistoryEntry]] = defaultdict(dict)
        self._lock = asyncio.Lock()

    async def get_entries(self, user_id: str) -> list[HistoryEntry]:
        by_date = self._entries.get(user_id, {})
        return [by_date[day] for day in sorted(by_date)]

    async def upsert_entry(
        self,
        user_id: str,
        entry_date: date,
        count: int,
        logged_at: datetime | None = None,
    ) -> HistoryEntry:
        """Accumulate into the existing record for the date, or create it.

        The record keeps the time of the day's first log; later logs only
        fill it in when the first one carried no time.

        The lock makes read-modify-write atomic so two logs for the same
        date can't lose an update.
        """
        async with self._lock:
            existing = self._entries[user_id].get(entry_date)
            if existing is None:
                entry = HistoryEntry(
                    entry_date=entry_date, count=count, logged_at=logged_at
                )
            else:
                entry = existing.model_copy(
                    update={
                        "count": existing.count + count,
                        "logged_at": existing.logged_at or logged_at,
                    }
                )
            self._entries[user_id][entry_date] = entry
            return entry

    async def get_totals(self) -> dict[str, int]:
        return {
            user_id: sum(entry.count for entry in by_date.values())
            for user_id, by_date in self._entries.items()
        }
