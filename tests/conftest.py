"""
Shared pytest fixtures.

Provides fresh fake repositories, a fixed clock and an engine wired to
them for every test. Fixtures reset state per test, so tests never share
ledger contents.
"""
from datetime import datetime, timedelta
from typing import List

import pytest

from backend.core.engine import TrainingAnalyticsEngine
from backend.core.pr_ledger import PersonalRecordLedger
from tests.fakes import (
    FakeExerciseLibraryRepository,
    FakeExerciseMemoryRepository,
    FakePersonalRecordRepository,
    at,
    create_library_repo,
)


class FixedClock:
    """Callable clock that returns a settable moment."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(at(0))


@pytest.fixture
def record_repo() -> FakePersonalRecordRepository:
    return FakePersonalRecordRepository()


@pytest.fixture
def memory_repo() -> FakeExerciseMemoryRepository:
    return FakeExerciseMemoryRepository()


@pytest.fixture
def library_repo() -> FakeExerciseLibraryRepository:
    return create_library_repo()


@pytest.fixture
def ledger(record_repo, clock) -> PersonalRecordLedger:
    return PersonalRecordLedger(record_repo, clock=clock)


@pytest.fixture
def engine(record_repo, memory_repo, library_repo, clock) -> TrainingAnalyticsEngine:
    return TrainingAnalyticsEngine(record_repo, memory_repo, library_repo, clock=clock)


@pytest.fixture
def events(engine) -> List:
    """Collects every AnalyticsEvent the engine emits."""
    received: List = []
    engine.subscribe(received.append)
    return received
