"""
Personal Record Repository Interface (Port).

Storage contract for the PR ledger: at most one PersonalRecordEntry per
normalized exercise name. The ledger serializes its own read-modify-write,
so implementations only need plain get/put semantics.
"""
from typing import Iterable, List, Optional, Protocol

from domain.models import PersonalRecordEntry


class PersonalRecordRepository(Protocol):
    """
    Abstract interface for personal record storage.

    Keys are normalized exercise names (see
    domain.models.names.normalize_exercise_name).
    """

    def get(self, exercise_name: str) -> Optional[PersonalRecordEntry]:
        """
        Get the record for an exercise.

        Args:
            exercise_name: Normalized exercise name

        Returns:
            The stored entry, or None if no record exists
        """
        ...

    def save(self, entry: PersonalRecordEntry) -> None:
        """
        Insert or replace the record keyed by ``entry.exercise_name``.

        Args:
            entry: Entry to store
        """
        ...

    def delete(self, exercise_name: str) -> None:
        """
        Remove the record for an exercise, if any.

        Args:
            exercise_name: Normalized exercise name
        """
        ...

    def list_all(self) -> List[PersonalRecordEntry]:
        """
        Get every stored record.

        Returns:
            All entries, in no guaranteed order
        """
        ...

    def replace_all(self, entries: Iterable[PersonalRecordEntry]) -> None:
        """
        Atomically replace the whole store with ``entries``.

        Args:
            entries: The complete new set of records
        """
        ...
