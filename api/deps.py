"""
FastAPI Dependency Providers for the Training Analytics API.

This module provides FastAPI dependency injection functions that return
interface types (Protocols) rather than concrete implementations. This
enables clean separation of concerns and easy testing with fake
implementations.

Architecture:
- Settings are cached per-process (lru_cache)
- Stores and the engine are cached per-process: the engine owns the PR
  ledger state and must be shared by every request

Usage in routers:
    from api.deps import get_analytics_engine
    from backend.core.engine import TrainingAnalyticsEngine

    @router.get("/records")
    def list_records(engine: TrainingAnalyticsEngine = Depends(get_analytics_engine)):
        return engine.records()

Testing:
    # Override dependencies in tests
    app.dependency_overrides[get_analytics_engine] = lambda: engine
"""

from functools import lru_cache

# Protocol types (interfaces)
from application.ports import (
    ExerciseLibraryRepository,
    ExerciseMemoryRepository,
    PersonalRecordRepository,
)
from backend.core.engine import TrainingAnalyticsEngine

# Settings
from backend.settings import Settings, get_settings as _get_settings

# Concrete implementations
from infrastructure import (
    InMemoryExerciseMemoryRepository,
    InMemoryPersonalRecordRepository,
    YamlExerciseLibraryRepository,
)


# =============================================================================
# Settings Provider
# =============================================================================


def get_settings() -> Settings:
    """
    Get application settings.

    Returns cached Settings instance from backend.settings.
    Use this as a FastAPI dependency for settings access.

    Returns:
        Settings: Application settings instance
    """
    return _get_settings()


# =============================================================================
# Repository Providers
# =============================================================================


@lru_cache
def get_record_repo() -> PersonalRecordRepository:
    """
    Get the PersonalRecordRepository implementation (process-wide).

    Returns:
        PersonalRecordRepository: Storage for the PR ledger
    """
    return InMemoryPersonalRecordRepository()


@lru_cache
def get_memory_repo() -> ExerciseMemoryRepository:
    """
    Get the ExerciseMemoryRepository implementation (process-wide).

    Returns:
        ExerciseMemoryRepository: Storage for exercise memory
    """
    return InMemoryExerciseMemoryRepository()


@lru_cache
def get_library_repo() -> ExerciseLibraryRepository:
    """
    Get the ExerciseLibraryRepository implementation.

    Loads EXERCISE_LIBRARY_PATH when configured, the bundled library
    otherwise.

    Returns:
        ExerciseLibraryRepository: The exercise catalog
    """
    settings = _get_settings()
    return YamlExerciseLibraryRepository(settings.exercise_library_path)


# =============================================================================
# Engine Provider
# =============================================================================


@lru_cache
def get_analytics_engine() -> TrainingAnalyticsEngine:
    """
    Get the TrainingAnalyticsEngine (process-wide).

    Returns:
        TrainingAnalyticsEngine: Engine wired to the cached repositories
    """
    settings = _get_settings()
    return TrainingAnalyticsEngine(
        get_record_repo(),
        get_memory_repo(),
        get_library_repo(),
        stale_record_days=settings.stale_record_days,
        suggestion_limit=settings.suggestion_limit,
    )


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    # Settings
    "get_settings",
    # Repositories
    "get_record_repo",
    "get_memory_repo",
    "get_library_repo",
    # Engine
    "get_analytics_engine",
]
