"""
Domain layer for the training analytics engine.

This package contains pure value objects that are independent of
storage and transport concerns.
"""

from domain.models import (
    ChartDataPoint,
    ExerciseMemory,
    ExerciseRecord,
    LibraryExercise,
    MuscleGroup,
    PersonalRecordEntry,
    PRBreakthrough,
    RecordBasis,
    SetKind,
    SetRecord,
    WorkoutRecord,
)

__all__ = [
    "ChartDataPoint",
    "ExerciseMemory",
    "ExerciseRecord",
    "LibraryExercise",
    "MuscleGroup",
    "PersonalRecordEntry",
    "PRBreakthrough",
    "RecordBasis",
    "SetKind",
    "SetRecord",
    "WorkoutRecord",
]
