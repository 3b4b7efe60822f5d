"""
Workout history value objects consumed by the analytics engine.

These records are supplied by the storage collaborator and treated as
read-only input. A set with zero reps or a negative weight is accepted
here and never participates in record or chart computation.
"""

import math
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from domain.models.names import normalize_exercise_name


class SetKind(str, Enum):
    """Whether a set was performed at training intensity."""

    WARMUP = "Warmup"
    WORKING = "Working"


class SetRecord(BaseModel):
    """
    A single logged set.

    Examples:
        >>> SetRecord(reps=5, weight=225).is_countable
        True

        >>> SetRecord(reps=10, weight=95, kind=SetKind.WARMUP).is_countable
        False
    """

    reps: int = Field(..., description="Repetitions completed")
    weight: float = Field(..., description="Load in the canonical storage unit; 0 = bodyweight")
    kind: SetKind = Field(default=SetKind.WORKING, description="Warmup or Working")
    sort_order: int = Field(default=0, description="Stable display position within the exercise")

    @property
    def is_working(self) -> bool:
        return self.kind == SetKind.WORKING

    @property
    def is_countable(self) -> bool:
        """True when the set may feed records and charts."""
        return self.is_working and self.reps > 0 and math.isfinite(self.weight) and self.weight >= 0

    @property
    def is_bodyweight(self) -> bool:
        return self.weight == 0 and self.reps > 0


class ExerciseRecord(BaseModel):
    """An exercise performed within a workout, with its ordered sets."""

    id: str = Field(..., description="Exercise identity within the workout")
    name: str = Field(..., description="Free-text display name")
    sets: List[SetRecord] = Field(default_factory=list)

    @property
    def normalized_name(self) -> str:
        """Trimmed, case-folded name used as the join key."""
        return normalize_exercise_name(self.name)

    @property
    def sets_by_order(self) -> List[SetRecord]:
        """Sets sorted by sort position; insertion order breaks ties."""
        return sorted(self.sets, key=lambda s: s.sort_order)

    @property
    def countable_sets(self) -> List[SetRecord]:
        return [s for s in self.sets_by_order if s.is_countable]


class WorkoutRecord(BaseModel):
    """
    A workout session or template.

    A workout is completed when it has an end time and is not a template.
    Only completed workouts feed history queries.
    """

    id: str = Field(..., description="Unique workout identity")
    name: str = Field(default="", description="Display name")
    date: datetime = Field(..., description="Calendar date/time of the session")
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    is_template: bool = False
    exercises: List[ExerciseRecord] = Field(default_factory=list)

    @property
    def is_completed(self) -> bool:
        return self.end_time is not None and not self.is_template

    @property
    def is_active(self) -> bool:
        return self.start_time is not None and self.end_time is None

    @property
    def exercise_names(self) -> set:
        """Normalized names of every exercise in the workout."""
        return {e.normalized_name for e in self.exercises}

    def exercises_named(self, exercise_name: str) -> List[ExerciseRecord]:
        """All exercise entries matching ``exercise_name`` after normalization."""
        key = normalize_exercise_name(exercise_name)
        return [e for e in self.exercises if e.normalized_name == key]
