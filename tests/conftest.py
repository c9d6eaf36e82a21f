"""Pytest fixtures for fitcal tests."""

from __future__ import annotations

import tempfile
from pathlib import Path

import pytest

from fitcal.errors import ErrorLogger
from fitcal.profiles import UserProfile
from fitcal.storage import (
    DatabaseConnection,
    InMemoryKeyValueStore,
    SafeAsyncStorage,
)


class SleepRecorder:
    """Async stand-in for asyncio.sleep that records requested delays."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class FlakyStore(InMemoryKeyValueStore):
    """In-memory store whose calls fail a set number of times first."""

    def __init__(self, failures: int = 0, error: Exception | None = None):
        super().__init__()
        self.failures = failures
        self.error = error or OSError("storage unavailable")
        self.get_calls = 0
        self.set_calls = 0
        self.remove_calls = 0

    def _maybe_fail(self) -> None:
        if self.failures > 0:
            self.failures -= 1
            raise self.error

    async def get_item(self, key: str):
        self.get_calls += 1
        self._maybe_fail()
        return await super().get_item(key)

    async def set_item(self, key: str, value: str) -> None:
        self.set_calls += 1
        self._maybe_fail()
        await super().set_item(key, value)

    async def remove_item(self, key: str) -> None:
        self.remove_calls += 1
        self._maybe_fail()
        await super().remove_item(key)


@pytest.fixture
def temp_db():
    """Create a temporary database with schema."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    db = DatabaseConnection(db_path)
    db.initialize_schema()

    yield db

    # Cleanup
    db_path.unlink(missing_ok=True)


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def error_logger() -> ErrorLogger:
    return ErrorLogger()


@pytest.fixture
def memory_store() -> FlakyStore:
    """In-memory store that never fails unless told to."""
    return FlakyStore()


@pytest.fixture
def storage(memory_store, error_logger, sleep_recorder) -> SafeAsyncStorage:
    """SafeAsyncStorage over the in-memory store with instant retries."""
    return SafeAsyncStorage(memory_store, error_logger=error_logger, sleep=sleep_recorder)


@pytest.fixture
def male_profile() -> UserProfile:
    """30 year old male, 70 kg, 175 cm (BMI ~22.9)."""
    return UserProfile(age=30, sex="male", weight=70, height=175)


@pytest.fixture
def female_profile() -> UserProfile:
    """30 year old female, 70 kg, 175 cm."""
    return UserProfile(age=30, sex="female", weight=70, height=175)


@pytest.fixture
def e2e_workout() -> dict:
    return {
        "exercises": [
            {"name": "Push-ups", "sets": 3, "reps": 15, "weight": 0},
            {"name": "Bench Press", "sets": 3, "reps": 10, "weight": 60},
        ],
        "duration": 45,
    }
