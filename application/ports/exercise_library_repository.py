"""
Exercise Library Repository Interface (Port).

Read-only access to the catalog of known exercises and their muscle-group
tags. Used by the suggestion ranker.
"""
from typing import List, Optional, Protocol

from domain.models import LibraryExercise


class ExerciseLibraryRepository(Protocol):
    """Abstract interface for the exercise catalog."""

    def get_all(self) -> List[LibraryExercise]:
        """
        Get every library exercise.

        Returns:
            Library exercises in catalog order
        """
        ...

    def find(self, name: str) -> Optional[LibraryExercise]:
        """
        Find an exercise by name (normalized comparison).

        Args:
            name: Exercise name as typed by the user

        Returns:
            The matching exercise or None
        """
        ...

    def search(self, query: str, *, limit: int = 20) -> List[LibraryExercise]:
        """
        Case-insensitive substring search on exercise names.

        Args:
            query: Search text; empty returns the first ``limit`` exercises
            limit: Maximum results

        Returns:
            Matching exercises in catalog order
        """
        ...
