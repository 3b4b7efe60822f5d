"""
Domain models for the training analytics engine.

This package contains pure value objects that are independent of
storage and transport concerns:
- WorkoutRecord / ExerciseRecord / SetRecord: logged history (input)
- PersonalRecordEntry: the per-exercise best, owned by the PR ledger
- ChartDataPoint / PRBreakthrough: derived progress history
- TimelineEntry: cross-exercise record summary
- LibraryExercise: catalog entry with a muscle-group tag
- ExerciseMemory: last-used values for pre-filling new entries

Usage:
    >>> from datetime import datetime
    >>> from domain.models import WorkoutRecord, ExerciseRecord, SetRecord

    >>> workout = WorkoutRecord(
    ...     id="w1",
    ...     date=datetime(2024, 1, 15),
    ...     end_time=datetime(2024, 1, 15, 1),
    ...     exercises=[
    ...         ExerciseRecord(id="e1", name="Bench Press", sets=[SetRecord(reps=5, weight=225)])
    ...     ],
    ... )
"""

from domain.models.library import LibraryExercise, MuscleGroup
from domain.models.memory import ExerciseMemory
from domain.models.names import normalize_exercise_name
from domain.models.records import (
    ChartDataPoint,
    ExerciseProgressSummary,
    PersonalRecordEntry,
    PRBreakthrough,
    RecordBasis,
    format_number,
)
from domain.models.timeline import TimeRange, TimelineEntry, TimelineFilter, TimelineSort
from domain.models.workout import ExerciseRecord, SetKind, SetRecord, WorkoutRecord

__all__ = [
    # Input history
    "WorkoutRecord",
    "ExerciseRecord",
    "SetRecord",
    "SetKind",
    # Records and progress
    "PersonalRecordEntry",
    "ChartDataPoint",
    "PRBreakthrough",
    "ExerciseProgressSummary",
    "RecordBasis",
    # Timeline
    "TimelineEntry",
    "TimelineFilter",
    "TimelineSort",
    "TimeRange",
    # Library and memory
    "LibraryExercise",
    "MuscleGroup",
    "ExerciseMemory",
    # Helpers
    "format_number",
    "normalize_exercise_name",
]
