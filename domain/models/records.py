"""
Personal record and progress value objects.

PersonalRecordEntry is owned by the engine (one per normalized exercise
name). ChartDataPoint and PRBreakthrough are derived on demand and never
persisted.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class RecordBasis(str, Enum):
    """
    Which quantity a performance is ranked by.

    - one_rep_max: estimated 1RM (weighted set, 1-36 reps)
    - weight: raw weight (weighted set beyond the estimator's range)
    - reps: raw reps (bodyweight set)
    """

    ONE_REP_MAX = "one_rep_max"
    WEIGHT = "weight"
    REPS = "reps"


def format_number(value: float) -> str:
    """Compact number: no trailing ``.0`` for whole values."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.1f}"


class _Performance(BaseModel):
    """Shared fields of anything that represents one ranked set."""

    weight: float
    reps: int
    estimated_1rm: Optional[float] = Field(
        default=None,
        description="Brzycki estimate; 0 for bodyweight, None when undefined",
    )
    basis: RecordBasis

    @property
    def is_bodyweight(self) -> bool:
        return self.weight == 0 and self.reps > 0

    @property
    def score(self) -> float:
        """Comparison value in this performance's own basis."""
        if self.basis == RecordBasis.REPS:
            return float(self.reps)
        if self.basis == RecordBasis.WEIGHT:
            return float(self.weight)
        return float(self.estimated_1rm or 0.0)

    @property
    def display_string(self) -> str:
        """Short label, e.g. ``BW × 12`` or ``225 × 5``."""
        if self.is_bodyweight:
            return f"BW × {self.reps}"
        return f"{format_number(self.weight)} × {self.reps}"


class PersonalRecordEntry(_Performance):
    """The current best performance for one exercise."""

    exercise_name: str = Field(..., description="Normalized exercise name (ledger key)")
    display_name: str = Field(..., description="Name as the user typed it")
    workout_id: str
    achieved_at: datetime


class ChartDataPoint(_Performance):
    """One representative performance per completed workout."""

    exercise_name: str
    workout_id: str
    date: datetime


class PRBreakthrough(ChartDataPoint):
    """A chart point that set a new all-time best."""

    improvement_percent: Optional[float] = Field(
        default=None, description="Gain over the previous breakthrough; None for the first"
    )
    previous_best: Optional[float] = Field(
        default=None, description="Comparison value of the previous breakthrough"
    )


class ExerciseProgressSummary(BaseModel):
    """Headline numbers for an exercise's progress screen."""

    exercise_name: str
    total_workouts: int = 0
    best: Optional[ChartDataPoint] = None
    latest: Optional[ChartDataPoint] = None
    average_gain_percent: Optional[float] = None
    breakthrough_count: int = 0
