"""
Exercise Suggestion Ranker.

Suggests exercises to add next: library exercises that fit the muscle
groups already being trained, ranked by how often the user has done them.

1. Infer relevant groups from the workout's exercises: library matches
   contribute their tag, custom exercises are matched by keyword against
   push / pull / legs vocabularies.
2. Expand push to chest, shoulders and arms; pull to back and arms; legs
   to legs. Arms count as both push and pull.
3. Candidates are library exercises in those groups that are not already
   in the workout. An empty workout makes every library exercise a
   candidate. A non-empty workout with no candidates gets no suggestions.
4. Rank by frequency (descending), then alphabetically; truncate.
"""
import logging
from collections import Counter
from typing import Dict, Iterable, List, Mapping, Sequence, Set

from backend.core.history import completed_workouts
from backend.core.normalize import collation_key
from domain.models import ExerciseRecord, LibraryExercise, MuscleGroup, WorkoutRecord

logger = logging.getLogger(__name__)

DEFAULT_SUGGESTION_LIMIT = 5

PUSH_KEYWORDS = ("bench", "press", "shoulder", "tricep", "chest", "push")
PULL_KEYWORDS = ("pull", "row", "lat", "bicep", "back", "deadlift")
LEGS_KEYWORDS = ("squat", "leg", "calf", "lunge", "hip", "thrust")

PUSH_GROUPS = {MuscleGroup.CHEST, MuscleGroup.SHOULDERS, MuscleGroup.ARMS}
PULL_GROUPS = {MuscleGroup.BACK, MuscleGroup.ARMS}
LEGS_GROUPS = {MuscleGroup.LEGS}


def exercise_frequency(workouts: Iterable[WorkoutRecord]) -> Dict[str, int]:
    """
    Count, per normalized exercise name, the completed non-template
    workouts that contain it. An exercise logged twice in one workout
    counts once.

    Raises:
        DuplicateWorkoutError: If the history contains duplicate workout ids
    """
    counts: Counter = Counter()
    for workout in completed_workouts(workouts):
        counts.update(name for name in workout.exercise_names if name)
    return dict(counts)


def index_library(library: Iterable[LibraryExercise]) -> Dict[str, LibraryExercise]:
    """Library keyed by normalized name; the first entry wins on duplicates."""
    index: Dict[str, LibraryExercise] = {}
    for exercise in library:
        index.setdefault(exercise.normalized_name, exercise)
    return index


def infer_muscle_groups(
    exercises: Sequence[ExerciseRecord],
    library_index: Mapping[str, LibraryExercise],
) -> Set[MuscleGroup]:
    """Muscle groups relevant to a workout's current exercises."""
    groups: Set[MuscleGroup] = set()
    has_push = has_pull = has_legs = False

    for exercise in exercises:
        name = exercise.normalized_name
        library_match = library_index.get(name)
        if library_match is not None:
            group = library_match.muscle_group
            groups.add(group)
            if group in (MuscleGroup.CHEST, MuscleGroup.SHOULDERS):
                has_push = True
            elif group == MuscleGroup.BACK:
                has_pull = True
            elif group == MuscleGroup.ARMS:
                has_push = has_pull = True
            elif group == MuscleGroup.LEGS:
                has_legs = True
            continue

        # Custom exercise
        if any(keyword in name for keyword in PUSH_KEYWORDS):
            has_push = True
        if any(keyword in name for keyword in PULL_KEYWORDS):
            has_pull = True
        if any(keyword in name for keyword in LEGS_KEYWORDS):
            has_legs = True

    if has_push:
        groups |= PUSH_GROUPS
    if has_pull:
        groups |= PULL_GROUPS
    if has_legs:
        groups |= LEGS_GROUPS
    return groups


def suggest_exercises(
    workout: WorkoutRecord,
    library: Iterable[LibraryExercise],
    frequency: Mapping[str, int],
    limit: int = DEFAULT_SUGGESTION_LIMIT,
) -> List[str]:
    """
    Rank exercises to add to ``workout``.

    Args:
        workout: The workout being built
        library: Exercise catalog
        frequency: Workout counts keyed by normalized exercise name
            (see exercise_frequency)
        limit: Maximum suggestions

    Returns:
        Library exercise names, most relevant first. Never includes an
        exercise already in the workout.
    """
    if limit <= 0:
        return []

    library_index = index_library(library)
    current = workout.exercise_names

    if not workout.exercises:
        candidates = list(library_index.values())
    else:
        groups = infer_muscle_groups(workout.exercises, library_index)
        candidates = [
            exercise for key, exercise in library_index.items()
            if exercise.muscle_group in groups and key not in current
        ]

    if not candidates:
        logger.debug("No suggestion candidates for workout %s", workout.id)
        return []

    ranked = sorted(
        candidates,
        key=lambda e: (-frequency.get(e.normalized_name, 0), collation_key(e.name)),
    )
    return [exercise.name for exercise in ranked[:limit]]
