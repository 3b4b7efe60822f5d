"""
Storage adapters for the analytics engine ports.

- InMemoryPersonalRecordRepository: process-local PR ledger storage
- InMemoryExerciseMemoryRepository: process-local exercise memory
- YamlExerciseLibraryRepository: exercise catalog loaded from YAML
"""

from infrastructure.storage.exercise_library_repository import (
    DEFAULT_LIBRARY_PATH,
    YamlExerciseLibraryRepository,
    load_exercise_library,
)
from infrastructure.storage.memory_repositories import (
    InMemoryExerciseMemoryRepository,
    InMemoryPersonalRecordRepository,
)

__all__ = [
    "InMemoryPersonalRecordRepository",
    "InMemoryExerciseMemoryRepository",
    "YamlExerciseLibraryRepository",
    "load_exercise_library",
    "DEFAULT_LIBRARY_PATH",
]
