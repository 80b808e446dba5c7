"""Pytest configuration and shared fixtures.

This module provides:
- Settings cache reset so env overrides never leak between tests
- In-memory repositories standing in for the entry and achievement stores
- The canonical challenge used by most tests
"""

import pytest

from core.challenge import DEFAULT_CHALLENGE, Challenge
from core.config import clear_settings_cache
from repositories import InMemoryAchievementRepository, InMemoryEntryRepository


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: pure calculation tests (no repositories)"
    )


@pytest.fixture(autouse=True)
def _clear_settings():
    """Clear cached settings between tests."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def challenge() -> Challenge:
    return DEFAULT_CHALLENGE


@pytest.fixture
def entry_repo() -> InMemoryEntryRepository:
    return InMemoryEntryRepository()


@pytest.fixture
def achievement_repo() -> InMemoryAchievementRepository:
    return InMemoryAchievementRepository()
