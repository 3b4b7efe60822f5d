"""
Exercise Memory Repository Interface (Port).

Last-used reps/weight/set-count per exercise, used to pre-fill new
entries. The engine never inspects the storage layout.
"""
from typing import List, Optional, Protocol

from domain.models import ExerciseMemory


class ExerciseMemoryRepository(Protocol):
    """Abstract interface for exercise memory storage."""

    def get(self, exercise_name: str) -> Optional[ExerciseMemory]:
        """
        Get the memory for an exercise.

        Args:
            exercise_name: Normalized exercise name

        Returns:
            ExerciseMemory or None if the exercise was never remembered
        """
        ...

    def save(self, memory: ExerciseMemory) -> None:
        """
        Insert or replace the memory keyed by its normalized name.

        Args:
            memory: Memory to store
        """
        ...

    def list_all(self) -> List[ExerciseMemory]:
        """
        Get every stored memory.

        Returns:
            All memories, in no guaranteed order
        """
        ...
