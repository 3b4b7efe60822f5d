"""
Infrastructure Layer for the Training Analytics API.

This package contains concrete implementations of the repository
interfaces in application.ports:
- storage/: in-memory stores and the YAML exercise library
"""

from infrastructure.storage import (
    InMemoryExerciseMemoryRepository,
    InMemoryPersonalRecordRepository,
    YamlExerciseLibraryRepository,
)

__all__ = [
    "InMemoryPersonalRecordRepository",
    "InMemoryExerciseMemoryRepository",
    "YamlExerciseLibraryRepository",
]
