"""
PR Ledger.

Keeps one PersonalRecordEntry per normalized exercise name and decides,
set by set, whether a logged set is a new personal record.

Two entry points exist:

- record_attempt: called on every set save/edit during live logging. It
  only ever ratchets a record upward and its result drives immediate
  in-session feedback. It may over-report (a flagged value the user later
  lowers) but never under-reports.
- reconcile_workout: called once a workout ends. It re-evaluates the
  workout's final sets against the ledger as it stood before the workout
  first touched each exercise, corrects provisional entries that the final
  sets no longer support, and returns the authoritative PR list.
"""
import logging
import threading
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from application.ports import PersonalRecordRepository
from backend.core.history import completed_workouts
from backend.core.normalize import normalize_exercise_name
from backend.core.strength import estimate_1rm, improves_on, is_valid_set, score_set
from domain.models import PersonalRecordEntry, SetKind, SetRecord, WorkoutRecord

logger = logging.getLogger(__name__)

# Workouts whose pre-workout baselines are kept for reconciliation
MAX_OPEN_WORKOUTS = 16


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def build_entry(
    exercise_name: str,
    weight: float,
    reps: int,
    workout_id: str,
    achieved_at: datetime,
) -> PersonalRecordEntry:
    """Create a ledger entry for a set, keyed by the normalized name."""
    basis, _ = score_set(weight, reps)
    return PersonalRecordEntry(
        exercise_name=normalize_exercise_name(exercise_name),
        display_name=exercise_name.strip(),
        weight=weight,
        reps=reps,
        estimated_1rm=estimate_1rm(weight, reps),
        basis=basis,
        workout_id=workout_id,
        achieved_at=achieved_at,
    )


class PersonalRecordLedger:
    """
    Authoritative per-exercise personal records.

    The read-compare-write of every mutation runs under a single lock, so
    concurrent callers never lose an improvement.
    """

    def __init__(
        self,
        repository: PersonalRecordRepository,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """
        Initialize the ledger.

        Args:
            repository: Storage for PersonalRecordEntry values
            clock: Source of "now" for record dates (injectable for tests)
        """
        self._repository = repository
        self._clock = clock
        self._lock = threading.Lock()
        # workout id -> normalized name -> entry before the workout touched it,
        # least recently used first
        self._baselines: "OrderedDict[str, Dict[str, Optional[PersonalRecordEntry]]]" = OrderedDict()

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get(self, exercise_name: str) -> Optional[PersonalRecordEntry]:
        """Current record for an exercise, or None."""
        return self._repository.get(normalize_exercise_name(exercise_name))

    def all_records(self) -> List[PersonalRecordEntry]:
        return self._repository.list_all()

    @property
    def open_workouts(self) -> List[str]:
        """Workout ids whose baselines are held for reconciliation."""
        with self._lock:
            return list(self._baselines)

    # -------------------------------------------------------------------------
    # Live logging
    # -------------------------------------------------------------------------

    def record_attempt(
        self,
        exercise_name: str,
        weight: float,
        reps: int,
        workout_id: str,
        kind: SetKind = SetKind.WORKING,
    ) -> bool:
        """
        Record a logged set and report whether it is a new personal record.

        Args:
            exercise_name: Exercise name as typed (normalized for lookup)
            weight: Weight lifted; 0 for bodyweight
            reps: Repetitions completed
            workout_id: Workout the set belongs to
            kind: Warmup sets never count

        Returns:
            True if the set replaced (or created) the exercise's record
        """
        if kind != SetKind.WORKING or not is_valid_set(weight, reps):
            logger.debug(
                "Ignoring attempt for %r: kind=%s weight=%s reps=%s",
                exercise_name, kind, weight, reps,
            )
            return False

        key = normalize_exercise_name(exercise_name)
        if not key:
            return False

        with self._lock:
            current = self._repository.get(key)
            self._baselines_for(workout_id).setdefault(key, current)

            if current is not None and not improves_on(current, weight, reps):
                return False

            entry = build_entry(exercise_name, weight, reps, workout_id, self._clock())
            self._repository.save(entry)

        logger.info(
            "New PR for %s: %s (workout %s)", entry.display_name, entry.display_string, workout_id
        )
        return True

    # -------------------------------------------------------------------------
    # Workout end
    # -------------------------------------------------------------------------

    def reconcile_workout(self, workout: WorkoutRecord) -> List[str]:
        """
        Confirm the workout's personal records from its final sets.

        Each exercise's best final working set is compared with the record
        as it stood before this workout first touched the exercise. Entries
        provisionally granted by record_attempt during this workout are
        replaced by the confirmed set, or rolled back to the baseline when
        no final set beats it. Reconciling the same workout again (after
        an edit) uses the same baselines, so the result is repeatable.

        Args:
            workout: The finished workout

        Returns:
            Display names of exercises with a confirmed new record, in
            workout order. Templates and workouts that have not ended
            are left untouched and yield an empty list.
        """
        if workout.is_template:
            return []
        if not workout.is_completed:
            logger.warning("Not reconciling workout %s: it has not ended", workout.id)
            return []

        achieved_at = workout.end_time or workout.date
        confirmed: List[str] = []

        with self._lock:
            baselines = self._baselines_for(workout.id)
            sets_by_key = self._final_sets(workout)

            for key, named_sets in sets_by_key.items():
                current = self._repository.get(key)
                baseline = baselines.setdefault(key, current)
                best = self._best_improvement(baseline, named_sets, workout.id, achieved_at)

                if best is None:
                    self._roll_back(key, current, baseline, workout.id)
                    continue

                confirmed.append(best.display_name)
                if current is None or current.workout_id == workout.id:
                    self._repository.save(self._keep_date(current, best))
                elif improves_on(current, best.weight, best.reps):
                    self._repository.save(best)

            # Exercises flagged during logging but removed before the end
            for key, baseline in baselines.items():
                if key not in sets_by_key:
                    self._roll_back(key, self._repository.get(key), baseline, workout.id)

        logger.info("Reconciled workout %s: %d confirmed PR(s)", workout.id, len(confirmed))
        return confirmed

    def discard_workout(self, workout_id: str) -> None:
        """Forget the baselines captured for a workout that will not be reconciled."""
        with self._lock:
            self._baselines.pop(workout_id, None)

    # -------------------------------------------------------------------------
    # Bulk rebuild
    # -------------------------------------------------------------------------

    def rebuild(self, workouts: Iterable[WorkoutRecord]) -> List[PersonalRecordEntry]:
        """
        Recompute every record from completed history.

        Sets are replayed chronologically through the same ratchet used by
        record_attempt, so the result matches what live logging of that
        history would have produced. Record dates are the workout dates.

        Raises:
            DuplicateWorkoutError: If the history contains duplicate workout ids
        """
        entries: Dict[str, PersonalRecordEntry] = {}
        for workout in completed_workouts(workouts):
            for exercise in workout.exercises:
                key = exercise.normalized_name
                if not key:
                    continue
                for set_record in exercise.countable_sets:
                    current = entries.get(key)
                    if current is None or improves_on(current, set_record.weight, set_record.reps):
                        entries[key] = build_entry(
                            exercise.name, set_record.weight, set_record.reps,
                            workout.id, workout.date,
                        )

        with self._lock:
            self._repository.replace_all(entries.values())
            self._baselines.clear()

        logger.info("Rebuilt PR ledger: %d exercise(s)", len(entries))
        return list(entries.values())

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _baselines_for(self, workout_id: str) -> Dict[str, Optional[PersonalRecordEntry]]:
        """Baselines for a workout; the least recently used workout is evicted past the cap."""
        baselines = self._baselines.get(workout_id)
        if baselines is not None:
            self._baselines.move_to_end(workout_id)
            return baselines

        baselines = self._baselines[workout_id] = {}
        while len(self._baselines) > MAX_OPEN_WORKOUTS:
            evicted, _ = self._baselines.popitem(last=False)
            logger.debug("Dropped reconciliation baselines for workout %s", evicted)
        return baselines

    @staticmethod
    def _final_sets(workout: WorkoutRecord) -> Dict[str, List[Tuple[str, SetRecord]]]:
        """Countable sets per normalized name, each paired with its entry's display name."""
        grouped: Dict[str, List[Tuple[str, SetRecord]]] = {}
        for exercise in workout.exercises:
            key = exercise.normalized_name
            if not key:
                continue
            grouped.setdefault(key, []).extend(
                (exercise.name.strip(), set_record) for set_record in exercise.countable_sets
            )
        return grouped

    @staticmethod
    def _best_improvement(
        baseline: Optional[PersonalRecordEntry],
        named_sets: List[Tuple[str, SetRecord]],
        workout_id: str,
        achieved_at: datetime,
    ) -> Optional[PersonalRecordEntry]:
        """
        Entry for the best set that beats ``baseline``, or None.

        Sets are replayed in order through the ratchet; the last strict
        improvement is the best one.
        """
        best: Optional[PersonalRecordEntry] = None
        reference = baseline
        for display_name, set_record in named_sets:
            if reference is None or improves_on(reference, set_record.weight, set_record.reps):
                best = build_entry(
                    display_name, set_record.weight, set_record.reps, workout_id, achieved_at
                )
                reference = best
        return best

    @staticmethod
    def _keep_date(
        current: Optional[PersonalRecordEntry],
        confirmed: PersonalRecordEntry,
    ) -> PersonalRecordEntry:
        """Keep the live-logging timestamp when the confirmed set is the one flagged."""
        if current is not None and (current.weight, current.reps) == (confirmed.weight, confirmed.reps):
            return confirmed.model_copy(update={"achieved_at": current.achieved_at})
        return confirmed

    def _roll_back(
        self,
        key: str,
        current: Optional[PersonalRecordEntry],
        baseline: Optional[PersonalRecordEntry],
        workout_id: str,
    ) -> None:
        """Undo a provisional record from ``workout_id`` that final sets do not support."""
        if current is None or current.workout_id != workout_id:
            return
        if baseline is None:
            self._repository.delete(key)
        else:
            self._repository.save(baseline)
        logger.info("Rolled back provisional PR for %s from workout %s", key, workout_id)
