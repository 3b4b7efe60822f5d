"""
Repository Interfaces (Ports) for the training analytics engine.

This package defines abstract interfaces that decouple the engine from the
storage collaborator. Implementations are provided in the infrastructure
layer (and as fakes in tests/fakes).

Architecture follows the Ports & Adapters (Hexagonal) pattern:
- Ports: Abstract interfaces defined here (what the engine needs)
- Adapters: Concrete implementations in infrastructure/ (how it's provided)

Usage:
    from application.ports import PersonalRecordRepository

    class PersonalRecordLedger:
        def __init__(self, repository: PersonalRecordRepository):
            self._repository = repository
"""

# Personal record storage
from application.ports.personal_record_repository import PersonalRecordRepository

# Exercise memory storage
from application.ports.exercise_memory_repository import ExerciseMemoryRepository

# Exercise catalog
from application.ports.exercise_library_repository import ExerciseLibraryRepository

__all__ = [
    "PersonalRecordRepository",
    "ExerciseMemoryRepository",
    "ExerciseLibraryRepository",
]
