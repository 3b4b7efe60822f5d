"""
Exceptions raised by the analytics engine.

The engine has no fallible I/O. Bad sets are excluded silently; only
contract violations by the caller raise.
"""

from typing import Iterable, List


class AnalyticsError(Exception):
    """Base class for analytics engine errors."""


class DuplicateWorkoutError(AnalyticsError, ValueError):
    """Raised when a workout history contains the same workout id twice."""

    def __init__(self, workout_id: str):
        super().__init__(f"Workout history contains duplicate workout id '{workout_id}'")
        self.workout_id = workout_id


class ExerciseLibraryError(AnalyticsError):
    """Raised when an exercise library file cannot be parsed."""

    def __init__(self, message: str, errors: Iterable[str] = ()):
        super().__init__(message)
        self.message = message
        self.errors: List[str] = list(errors)
