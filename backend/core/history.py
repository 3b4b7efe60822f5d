"""
History Aggregator.

Turns a workout history into a per-exercise chronological sequence of
representative performance points (chart data). Pure functions of their
inputs: identical history always yields identical output.
"""
import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence, Tuple

from backend.core.normalize import normalize_exercise_name
from backend.core.strength import estimate_1rm, score_set
from backend.errors import DuplicateWorkoutError
from domain.models import ChartDataPoint, SetRecord, TimeRange, WorkoutRecord

logger = logging.getLogger(__name__)


# =============================================================================
# History helpers
# =============================================================================


def ensure_unique_workouts(workouts: Iterable[WorkoutRecord]) -> List[WorkoutRecord]:
    """
    Materialize ``workouts`` and reject duplicate identities.

    Raises:
        DuplicateWorkoutError: If two records share an id
    """
    materialized = list(workouts)
    seen = set()
    for workout in materialized:
        if workout.id in seen:
            raise DuplicateWorkoutError(workout.id)
        seen.add(workout.id)
    return materialized


def completed_workouts(workouts: Iterable[WorkoutRecord]) -> List[WorkoutRecord]:
    """Completed, non-template workouts in ascending date order."""
    unique = ensure_unique_workouts(workouts)
    completed = [w for w in unique if w.is_completed]
    # sorted() is stable, so same-date workouts keep their input order
    return sorted(completed, key=lambda w: as_utc(w.date))


def as_utc(moment: datetime) -> datetime:
    """Treat naive datetimes as UTC so naive and aware values compare."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def countable_sets_for(workout: WorkoutRecord, exercise_name: str) -> List[Tuple[str, SetRecord]]:
    """
    Working sets with positive reps for ``exercise_name`` in ``workout``.

    When the same exercise appears more than once in a workout, its sets
    are concatenated in exercise order. Each set is paired with the
    display name of the entry it was logged under.
    """
    return [
        (exercise.name.strip(), set_record)
        for exercise in workout.exercises_named(exercise_name)
        for set_record in exercise.countable_sets
    ]


def _rank(set_record: SetRecord, index: int) -> Tuple[bool, float, float, int]:
    _, score = score_set(set_record.weight, set_record.reps)
    return (set_record.weight > 0, score, set_record.weight, -index)


def representative_set(sets: Sequence[SetRecord]) -> Optional[SetRecord]:
    """
    Pick the set that represents a workout for one exercise.

    Highest estimated 1RM wins; ties go to the heavier set, then to the
    earlier set. Weighted sets outrank bodyweight sets, and bodyweight
    sets rank by reps.
    """
    if not sets:
        return None
    best_index = max(range(len(sets)), key=lambda i: _rank(sets[i], i))
    return sets[best_index]


def make_point(exercise_name: str, workout: WorkoutRecord, set_record: SetRecord) -> ChartDataPoint:
    basis, _ = score_set(set_record.weight, set_record.reps)
    return ChartDataPoint(
        exercise_name=exercise_name,
        workout_id=workout.id,
        date=workout.date,
        weight=set_record.weight,
        reps=set_record.reps,
        estimated_1rm=estimate_1rm(set_record.weight, set_record.reps),
        basis=basis,
    )


# =============================================================================
# History Aggregator
# =============================================================================


def exercise_history(
    exercise_name: str,
    workouts: Iterable[WorkoutRecord],
    *,
    descending: bool = False,
) -> List[ChartDataPoint]:
    """
    Build the chart history for one exercise.

    Args:
        exercise_name: Exercise name (matched after normalization)
        workouts: Full workout history; templates and unfinished workouts
            are ignored
        descending: Return most recent first instead of chronological order

    Returns:
        One ChartDataPoint per completed workout containing at least one
        working set of the exercise. Unknown exercises yield an empty list.

    Raises:
        DuplicateWorkoutError: If the history contains duplicate workout ids
    """
    key = normalize_exercise_name(exercise_name)
    history = completed_workouts(workouts)
    if not key:
        return []

    points: List[ChartDataPoint] = []
    for workout in history:
        named_sets = countable_sets_for(workout, key)
        best = representative_set([s for _, s in named_sets])
        if best is None:
            continue
        display_name = next(name for name, s in named_sets if s is best)
        points.append(make_point(display_name, workout, best))

    if descending:
        points.reverse()
    return points


def filter_time_range(
    points: Iterable[ChartDataPoint],
    time_range: TimeRange,
    *,
    now: Optional[datetime] = None,
) -> List[ChartDataPoint]:
    """
    Keep the points inside a chart window.

    Args:
        points: Chart points, in any order (order is preserved)
        time_range: Window to apply
        now: Reference time (defaults to the current UTC time)
    """
    now = as_utc(now or datetime.now(timezone.utc))
    start = time_range.start_date(now)
    if start is None:
        return list(points)
    return [p for p in points if as_utc(p.date) >= start]
