"""
Fake Repository Implementations and Builders for Testing.

This package provides in-memory fake implementations of the repository
interfaces plus small builders for workout history, so tests stay fast
and isolated. No files or external services are required.

Features:
- All fakes implement the same Protocol interfaces as real implementations
- Supports seeding with test data
- Supports reset() for test isolation
- Factory functions for common test scenarios

Usage:
    from tests.fakes import make_exercise, make_workout, at

    workout = make_workout("w1", at(0), [make_exercise("Bench Press", (135, 10))])
"""
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional, Sequence, Tuple

from domain.models import (
    ExerciseRecord,
    LibraryExercise,
    MuscleGroup,
    SetKind,
    SetRecord,
    WorkoutRecord,
)
from tests.fakes.library_repository import FakeExerciseLibraryRepository
from tests.fakes.memory_repository import FakeExerciseMemoryRepository
from tests.fakes.record_repository import FakePersonalRecordRepository

# First day of every generated history
BASE_DATE = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)


# =============================================================================
# Builders
# =============================================================================


def at(days: float, hours: float = 0) -> datetime:
    """A moment ``days`` (and ``hours``) after BASE_DATE."""
    return BASE_DATE + timedelta(days=days, hours=hours)


def make_sets(
    *pairs: Tuple[float, int],
    kind: SetKind = SetKind.WORKING,
    start: int = 0,
) -> List[SetRecord]:
    """Sets from (weight, reps) pairs, in order."""
    return [
        SetRecord(weight=weight, reps=reps, kind=kind, sort_order=start + i)
        for i, (weight, reps) in enumerate(pairs)
    ]


def make_exercise(
    name: str,
    *pairs: Tuple[float, int],
    warmups: Sequence[Tuple[float, int]] = (),
    exercise_id: Optional[str] = None,
) -> ExerciseRecord:
    """An exercise with optional warmup sets followed by working sets."""
    sets = make_sets(*warmups, kind=SetKind.WARMUP)
    sets += make_sets(*pairs, start=len(sets))
    return ExerciseRecord(id=exercise_id or f"ex-{name.strip().lower()}", name=name, sets=sets)


def make_workout(
    workout_id: str,
    date: datetime,
    exercises: Iterable[ExerciseRecord] = (),
    *,
    completed: bool = True,
    is_template: bool = False,
    name: str = "",
) -> WorkoutRecord:
    """A workout; completed workouts end one hour after they start."""
    return WorkoutRecord(
        id=workout_id,
        name=name or f"Workout {workout_id}",
        date=date,
        start_time=date,
        end_time=date + timedelta(hours=1) if completed else None,
        is_template=is_template,
        exercises=list(exercises),
    )


# =============================================================================
# Factory Functions
# =============================================================================


SAMPLE_LIBRARY = [
    LibraryExercise(name="Bench Press", muscle_group=MuscleGroup.CHEST),
    LibraryExercise(name="Incline Dumbbell Press", muscle_group=MuscleGroup.CHEST),
    LibraryExercise(name="Overhead Press", muscle_group=MuscleGroup.SHOULDERS),
    LibraryExercise(name="Lateral Raise", muscle_group=MuscleGroup.SHOULDERS),
    LibraryExercise(name="Tricep Pushdown", muscle_group=MuscleGroup.ARMS),
    LibraryExercise(name="Barbell Curl", muscle_group=MuscleGroup.ARMS),
    LibraryExercise(name="Barbell Row", muscle_group=MuscleGroup.BACK),
    LibraryExercise(name="Lat Pulldown", muscle_group=MuscleGroup.BACK),
    LibraryExercise(name="Deadlift", muscle_group=MuscleGroup.BACK),
    LibraryExercise(name="Squat", muscle_group=MuscleGroup.LEGS),
    LibraryExercise(name="Leg Press", muscle_group=MuscleGroup.LEGS),
    LibraryExercise(name="Lunge", muscle_group=MuscleGroup.LEGS),
    LibraryExercise(name="Calf Raise", muscle_group=MuscleGroup.LEGS),
    LibraryExercise(name="Plank", muscle_group=MuscleGroup.CORE, is_time_based=True),
]


def create_library_repo(
    exercises: Optional[Iterable[LibraryExercise]] = None,
) -> FakeExerciseLibraryRepository:
    """
    Create a FakeExerciseLibraryRepository.

    Args:
        exercises: Catalog to use; defaults to SAMPLE_LIBRARY

    Returns:
        Pre-populated FakeExerciseLibraryRepository
    """
    return FakeExerciseLibraryRepository(SAMPLE_LIBRARY if exercises is None else exercises)


__all__ = [
    # Fakes
    "FakePersonalRecordRepository",
    "FakeExerciseMemoryRepository",
    "FakeExerciseLibraryRepository",
    # Builders
    "BASE_DATE",
    "at",
    "make_sets",
    "make_exercise",
    "make_workout",
    # Factories
    "SAMPLE_LIBRARY",
    "create_library_repo",
]
