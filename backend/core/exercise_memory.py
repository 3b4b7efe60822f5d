"""
Exercise memory: remember what the user last did for each exercise and
pre-fill the next entry from it.
"""
import logging
import math
from datetime import datetime
from typing import List, Optional

from application.ports import ExerciseMemoryRepository
from backend.core.normalize import normalize_exercise_name
from domain.models import ExerciseMemory, SetKind, SetRecord, WorkoutRecord

logger = logging.getLogger(__name__)


def memory_from_workout(workout: WorkoutRecord, *, now: Optional[datetime] = None) -> List[ExerciseMemory]:
    """
    Build one memory per exercise that has at least one set.

    The last set (highest sort position) provides reps and weight; the set
    count is the number of sets logged. When an exercise appears more than
    once in a workout, the later occurrence wins.
    """
    memories = {}
    for exercise in workout.exercises:
        key = exercise.normalized_name
        if not key or not exercise.sets:
            continue
        last = exercise.sets_by_order[-1]
        memories[key] = ExerciseMemory(
            name=exercise.name.strip(),
            last_reps=max(last.reps, 0),
            last_weight=last.weight if math.isfinite(last.weight) and last.weight > 0 else 0.0,
            last_sets=len(exercise.sets),
            updated_at=now or workout.end_time or workout.date,
        )
    return list(memories.values())


def remember_workout(
    repository: ExerciseMemoryRepository,
    workout: WorkoutRecord,
    *,
    now: Optional[datetime] = None,
) -> List[ExerciseMemory]:
    """Store exercise memory for every exercise in a finished workout."""
    if workout.is_template:
        return []

    memories = memory_from_workout(workout, now=now)
    for memory in memories:
        existing = repository.get(memory.normalized_name)
        if existing is not None and existing.note:
            memory = memory.model_copy(update={"note": existing.note})
        repository.save(memory)

    logger.debug("Remembered %d exercise(s) from workout %s", len(memories), workout.id)
    return memories


def prefill_sets(repository: ExerciseMemoryRepository, exercise_name: str) -> List[SetRecord]:
    """
    Pre-filled working sets for a newly added exercise.

    Returns ``last_sets`` copies of the remembered reps and weight, or an
    empty list when the exercise was never remembered.
    """
    memory = repository.get(normalize_exercise_name(exercise_name))
    if memory is None:
        return []
    return [
        SetRecord(
            reps=memory.last_reps,
            weight=memory.last_weight,
            kind=SetKind.WORKING,
            sort_order=index,
        )
        for index in range(memory.last_sets)
    ]
