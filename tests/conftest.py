"""
Shared pytest fixtures for Mindful Insights tests.
"""

import random
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Optional
from unittest.mock import AsyncMock

import pytest

from memory.data_source import InMemoryDataSource
from memory.usage_store import InMemoryUsageStore
from schemas import BreathingRecord, DiaryRecord, GratitudeRecord, RateLimitConfig


# --- Time fixtures ---

@pytest.fixture
def fixed_now():
    """A fixed UTC datetime for deterministic window tests."""
    return datetime(2026, 2, 5, 20, 30, 0, tzinfo=timezone.utc)  # Thursday 8:30 PM UTC


@pytest.fixture
def rng():
    """Seeded random source."""
    return random.Random(1234)


# --- Record factories ---

@pytest.fixture
def make_diary(fixed_now):
    """Factory for diary records created `hours_ago` before fixed_now."""
    counter = {"n": 0}

    def _make(text: str = "Heute war ein ruhiger Tag.", hours_ago: float = 1, user_id: str = "user-1") -> DiaryRecord:
        counter["n"] += 1
        created = fixed_now - timedelta(hours=hours_ago)
        return DiaryRecord(
            id=f"diary-{counter['n']}",
            user_id=user_id,
            date=created.date().isoformat(),
            text=text,
            created_at=created,
        )

    return _make


@pytest.fixture
def make_gratitude(fixed_now):
    """Factory for gratitude records."""
    counter = {"n": 0}

    def _make(
        text: str = "Dankbar für den Sonnenschein", morning: bool = True, hours_ago: float = 2, user_id: str = "user-1"
    ) -> GratitudeRecord:
        counter["n"] += 1
        created = fixed_now - timedelta(hours=hours_ago)
        return GratitudeRecord(
            id=f"gratitude-{counter['n']}",
            user_id=user_id,
            date=created.date().isoformat(),
            morning=morning,
            text=text,
            created_at=created,
        )

    return _make


@pytest.fixture
def make_breathing(fixed_now):
    """Factory for breathing sessions."""
    counter = {"n": 0}

    def _make(
        method: str = "box",
        duration_sec: int = 300,
        completed: bool = True,
        hours_ago: float = 3,
        user_id: str = "user-1",
    ) -> BreathingRecord:
        counter["n"] += 1
        ts = fixed_now - timedelta(hours=hours_ago)
        return BreathingRecord(
            id=f"breath-{counter['n']}",
            user_id=user_id,
            method=method,
            duration_sec=duration_sec,
            completed=completed,
            timestamp=ts,
            created_at=ts,
        )

    return _make


# --- Collaborators ---

@pytest.fixture
def empty_source():
    """Data source without any records."""
    return InMemoryDataSource()


@pytest.fixture
def failing_source():
    """Data source whose every call raises."""
    source = AsyncMock()
    error = ConnectionError("database unreachable")
    source.get_diary_entries = AsyncMock(side_effect=error)
    source.get_gratitude_entries = AsyncMock(side_effect=error)
    source.get_breathing_sessions = AsyncMock(side_effect=error)
    source.get_last_evening_summary = AsyncMock(side_effect=error)
    return source


@pytest.fixture
def rate_limits():
    return RateLimitConfig(max_calls_per_day=4, max_tokens_per_day=2000, max_calls_per_minute=10)


@pytest.fixture
def usage_store(rate_limits):
    return InMemoryUsageStore(limits=rate_limits)


# --- Completion response builders ---

def completion_response(
    content: str = "• Punkt 1\n• Punkt 2\n• Punkt 3\n\n💨 Atem-Empfehlung: Box Breathing",
    model: str = "gpt-4o-mini-2024-07-18",
    prompt_tokens: int = 120,
    completion_tokens: int = 80,
    finish_reason: Optional[str] = "stop",
) -> SimpleNamespace:
    """Build an object shaped like a LiteLLM ModelResponse."""
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content), finish_reason=finish_reason)],
        model=model,
        usage=SimpleNamespace(
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=prompt_tokens + completion_tokens,
        ),
    )


@pytest.fixture
def make_completion_response():
    """Factory fixture for fake completion responses."""
    return completion_response


@pytest.fixture
def mock_completion():
    """Async completion callable returning a successful response."""
    return AsyncMock(return_value=completion_response())
