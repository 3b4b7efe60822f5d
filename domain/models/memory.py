"""
Exercise memory: what the user last did for an exercise.

Used to pre-fill new exercise entries. Owned by the storage collaborator;
the engine reads and writes it only through ExerciseMemoryRepository.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from domain.models.names import normalize_exercise_name


class ExerciseMemory(BaseModel):
    """
    Last-used values for an exercise.

    Examples:
        >>> ExerciseMemory(name="  Bench Press  ", last_reps=10, last_weight=185, last_sets=3).normalized_name
        'bench press'
    """

    name: str = Field(..., description="Display name")
    last_reps: int = Field(default=10, ge=0)
    last_weight: float = Field(default=0.0, ge=0)
    last_sets: int = Field(default=1, ge=0)
    note: Optional[str] = None
    updated_at: Optional[datetime] = None

    @property
    def normalized_name(self) -> str:
        return normalize_exercise_name(self.name)
