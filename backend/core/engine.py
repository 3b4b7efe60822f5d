"""
Training Analytics Engine.

The single entry point used by the UI and HTTP layers. An engine instance
owns the PR ledger state and is constructed once with its storage
collaborators, then passed by reference to callers:

    engine = TrainingAnalyticsEngine(record_repo, memory_repo, library_repo)
    engine.record_attempt("Bench Press", 225, 5, workout_id="w1")
    engine.end_workout(workout)

Query methods (history, breakthroughs, timeline, suggest) are pure
functions of their inputs and the current ledger. Callers that need to
refresh on change can subscribe to AnalyticsEvent notifications, emitted
after every ledger mutation.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional

from application.ports import (
    ExerciseLibraryRepository,
    ExerciseMemoryRepository,
    PersonalRecordRepository,
)
from backend.core.breakthroughs import detect_breakthroughs, gain_over
from backend.core.exercise_memory import prefill_sets, remember_workout
from backend.core.history import exercise_history, filter_time_range
from backend.core.pr_ledger import PersonalRecordLedger
from backend.core.strength import improves_on
from backend.core.suggestions import DEFAULT_SUGGESTION_LIMIT, exercise_frequency, suggest_exercises
from backend.core.timeline import DEFAULT_STALE_RECORD_DAYS, build_timeline
from domain.models import (
    ChartDataPoint,
    ExerciseProgressSummary,
    LibraryExercise,
    PersonalRecordEntry,
    PRBreakthrough,
    SetKind,
    SetRecord,
    TimeRange,
    TimelineEntry,
    TimelineFilter,
    TimelineSort,
    WorkoutRecord,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Change notifications
# =============================================================================


class AnalyticsEventKind(str, Enum):
    RECORD_UPDATED = "record_updated"
    WORKOUT_RECONCILED = "workout_reconciled"
    RECORDS_REBUILT = "records_rebuilt"


@dataclass
class AnalyticsEvent:
    """Emitted after the PR ledger changes."""

    kind: AnalyticsEventKind
    exercise_names: List[str] = field(default_factory=list)
    workout_id: Optional[str] = None


AnalyticsListener = Callable[[AnalyticsEvent], None]


# =============================================================================
# Engine
# =============================================================================


class TrainingAnalyticsEngine:
    """Personal records, progress history and exercise suggestions."""

    def __init__(
        self,
        record_repo: PersonalRecordRepository,
        memory_repo: ExerciseMemoryRepository,
        library_repo: ExerciseLibraryRepository,
        *,
        stale_record_days: int = DEFAULT_STALE_RECORD_DAYS,
        suggestion_limit: int = DEFAULT_SUGGESTION_LIMIT,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """
        Initialize the engine with its collaborators.

        Args:
            record_repo: Storage for personal records
            memory_repo: Storage for exercise memory
            library_repo: Exercise catalog
            stale_record_days: Timeline staleness threshold in days
            suggestion_limit: Default number of suggestions
            clock: Source of "now" (injectable for tests)
        """
        self._ledger = PersonalRecordLedger(record_repo, clock=clock)
        self._memory_repo = memory_repo
        self._library_repo = library_repo
        self._stale_record_days = stale_record_days
        self._suggestion_limit = suggestion_limit
        self._clock = clock
        self._listeners: List[AnalyticsListener] = []

    # -------------------------------------------------------------------------
    # Notifications
    # -------------------------------------------------------------------------

    def subscribe(self, listener: AnalyticsListener) -> Callable[[], None]:
        """
        Register a change listener.

        Returns:
            A callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, event: AnalyticsEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    # -------------------------------------------------------------------------
    # PR Ledger
    # -------------------------------------------------------------------------

    def record_attempt(
        self,
        exercise_name: str,
        weight: float,
        reps: int,
        workout_id: str,
        kind: SetKind = SetKind.WORKING,
    ) -> bool:
        """Record a logged set; True when it is a new personal record."""
        is_new_record = self._ledger.record_attempt(exercise_name, weight, reps, workout_id, kind)
        if is_new_record:
            self._notify(AnalyticsEvent(
                kind=AnalyticsEventKind.RECORD_UPDATED,
                exercise_names=[exercise_name.strip()],
                workout_id=workout_id,
            ))
        return is_new_record

    def reconcile_workout(self, workout: WorkoutRecord) -> List[str]:
        """Authoritative PR list for a finished workout."""
        confirmed = self._ledger.reconcile_workout(workout)
        self._notify(AnalyticsEvent(
            kind=AnalyticsEventKind.WORKOUT_RECONCILED,
            exercise_names=confirmed,
            workout_id=workout.id,
        ))
        return confirmed

    def end_workout(self, workout: WorkoutRecord, now: Optional[datetime] = None) -> List[str]:
        """
        Finish a workout: reconcile its records, then remember each
        exercise's last set for pre-filling. Once a completed workout is
        reconciled here its baselines are released.

        Returns:
            The reconciled PR list
        """
        confirmed = self._ledger.reconcile_workout(workout)
        remember_workout(self._memory_repo, workout, now=now or self._clock())
        if workout.is_completed:
            self._ledger.discard_workout(workout.id)
        self._notify(AnalyticsEvent(
            kind=AnalyticsEventKind.WORKOUT_RECONCILED,
            exercise_names=confirmed,
            workout_id=workout.id,
        ))
        return confirmed

    def discard_workout(self, workout_id: str) -> None:
        """Drop reconciliation state for a workout that was deleted unfinished."""
        self._ledger.discard_workout(workout_id)

    def rebuild_records(self, workouts: Iterable[WorkoutRecord]) -> List[PersonalRecordEntry]:
        """Recompute every personal record from completed history."""
        entries = self._ledger.rebuild(workouts)
        self._notify(AnalyticsEvent(
            kind=AnalyticsEventKind.RECORDS_REBUILT,
            exercise_names=[e.display_name for e in entries],
        ))
        return entries

    def record(self, exercise_name: str) -> Optional[PersonalRecordEntry]:
        return self._ledger.get(exercise_name)

    def records(self) -> List[PersonalRecordEntry]:
        return self._ledger.all_records()

    # -------------------------------------------------------------------------
    # History and breakthroughs
    # -------------------------------------------------------------------------

    def history(
        self,
        exercise_name: str,
        workouts: Iterable[WorkoutRecord],
        *,
        time_range: TimeRange = TimeRange.ALL_TIME,
        descending: bool = False,
        now: Optional[datetime] = None,
    ) -> List[ChartDataPoint]:
        """Chart history for one exercise, oldest first unless ``descending``."""
        points = exercise_history(exercise_name, workouts, descending=descending)
        if time_range == TimeRange.ALL_TIME:
            return points
        return filter_time_range(points, time_range, now=now or self._clock())

    def breakthroughs(
        self,
        points: Iterable[ChartDataPoint],
        *,
        newest_first: bool = False,
    ) -> List[PRBreakthrough]:
        """Breakthroughs in a chronological point sequence."""
        return detect_breakthroughs(points, newest_first=newest_first)

    def progress_summary(
        self,
        exercise_name: str,
        workouts: Iterable[WorkoutRecord],
        time_range: TimeRange = TimeRange.ALL_TIME,
        now: Optional[datetime] = None,
    ) -> ExerciseProgressSummary:
        """
        Headline progress numbers for an exercise.

        Totals, best, latest and average gain cover the points inside
        ``time_range``. Breakthroughs are detected over the full history
        and counted when they fall inside the range.
        """
        now = now or self._clock()
        all_points = exercise_history(exercise_name, workouts)
        points = filter_time_range(all_points, time_range, now=now)
        in_range = {p.workout_id for p in points}
        breakthroughs = [b for b in detect_breakthroughs(all_points) if b.workout_id in in_range]

        name = points[0].exercise_name if points else exercise_name.strip()
        if not points:
            return ExerciseProgressSummary(exercise_name=name)

        best = points[0]
        for point in points[1:]:
            if improves_on(best, point.weight, point.reps):
                best = point

        average_gain = None
        if len(points) >= 2:
            average_gain = gain_over(points[0], points[-1])

        return ExerciseProgressSummary(
            exercise_name=name,
            total_workouts=len(points),
            best=best,
            latest=points[-1],
            average_gain_percent=average_gain,
            breakthrough_count=len(breakthroughs),
        )

    # -------------------------------------------------------------------------
    # Timeline
    # -------------------------------------------------------------------------

    def timeline(
        self,
        records: Optional[Iterable[PersonalRecordEntry]] = None,
        timeline_filter: TimelineFilter = TimelineFilter.ALL,
        timeline_sort: TimelineSort = TimelineSort.RECENT,
        *,
        now: Optional[datetime] = None,
    ) -> List[TimelineEntry]:
        """
        Cross-exercise PR timeline.

        Args:
            records: Records to show; defaults to the whole ledger
            timeline_filter: Which records to keep
            timeline_sort: Output ordering
            now: Reference time for relative time and staleness
        """
        if records is None:
            records = self._ledger.all_records()
        return build_timeline(
            records,
            timeline_filter,
            timeline_sort,
            now=now or self._clock(),
            stale_after_days=self._stale_record_days,
        )

    # -------------------------------------------------------------------------
    # Suggestions and memory
    # -------------------------------------------------------------------------

    def exercise_frequency(self, workouts: Iterable[WorkoutRecord]) -> Dict[str, int]:
        return exercise_frequency(workouts)

    def suggest(
        self,
        workout: WorkoutRecord,
        library: Optional[Iterable[LibraryExercise]] = None,
        frequency: Optional[Dict[str, int]] = None,
        limit: Optional[int] = None,
        *,
        workouts: Optional[Iterable[WorkoutRecord]] = None,
    ) -> List[str]:
        """
        Exercises to add next to ``workout``.

        Args:
            workout: The workout being built
            library: Catalog to choose from; defaults to the library repository
            frequency: Workout counts by normalized name; computed from
                ``workouts`` when omitted
            limit: Maximum suggestions; defaults to the configured limit
            workouts: History used to compute ``frequency`` when it is omitted
        """
        if library is None:
            library = self._library_repo.get_all()
        if frequency is None:
            frequency = exercise_frequency(workouts or [])
        if limit is None:
            limit = self._suggestion_limit
        return suggest_exercises(workout, library, frequency, limit)

    def prefill_sets(self, exercise_name: str) -> List[SetRecord]:
        """Pre-filled sets for a newly added exercise, from exercise memory."""
        return prefill_sets(self._memory_repo, exercise_name)
