"""
Exercise library value objects.

The library is a static catalog of known exercises, each tagged with a
single muscle group from a closed set.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from domain.models.names import normalize_exercise_name


class MuscleGroup(str, Enum):
    CHEST = "chest"
    BACK = "back"
    SHOULDERS = "shoulders"
    ARMS = "arms"
    LEGS = "legs"
    CORE = "core"


class LibraryExercise(BaseModel):
    """A catalog exercise."""

    name: str = Field(..., min_length=1)
    muscle_group: MuscleGroup
    is_time_based: bool = False
    rest_seconds: Optional[int] = Field(default=None, ge=0)

    @property
    def normalized_name(self) -> str:
        return normalize_exercise_name(self.name)
