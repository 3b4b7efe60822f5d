"""
In-memory implementations of the record and memory repositories.

State lives in a plain dict for the lifetime of the process. The PR
ledger serializes its own writes; these stores add a lock only so that
list_all and replace_all never observe a half-written dict.
"""
import threading
from typing import Dict, Iterable, List, Optional

from domain.models import ExerciseMemory, PersonalRecordEntry


class InMemoryPersonalRecordRepository:
    """In-memory implementation of PersonalRecordRepository."""

    def __init__(self):
        self._entries: Dict[str, PersonalRecordEntry] = {}
        self._lock = threading.Lock()

    def get(self, exercise_name: str) -> Optional[PersonalRecordEntry]:
        with self._lock:
            return self._entries.get(exercise_name)

    def save(self, entry: PersonalRecordEntry) -> None:
        with self._lock:
            self._entries[entry.exercise_name] = entry

    def delete(self, exercise_name: str) -> None:
        with self._lock:
            self._entries.pop(exercise_name, None)

    def list_all(self) -> List[PersonalRecordEntry]:
        with self._lock:
            return list(self._entries.values())

    def replace_all(self, entries: Iterable[PersonalRecordEntry]) -> None:
        replacement = {entry.exercise_name: entry for entry in entries}
        with self._lock:
            self._entries = replacement


class InMemoryExerciseMemoryRepository:
    """In-memory implementation of ExerciseMemoryRepository."""

    def __init__(self):
        self._memories: Dict[str, ExerciseMemory] = {}
        self._lock = threading.Lock()

    def get(self, exercise_name: str) -> Optional[ExerciseMemory]:
        with self._lock:
            return self._memories.get(exercise_name)

    def save(self, memory: ExerciseMemory) -> None:
        with self._lock:
            self._memories[memory.normalized_name] = memory

    def list_all(self) -> List[ExerciseMemory]:
        with self._lock:
            return list(self._memories.values())
