"""
Unit tests for backend/core/pr_ledger.py

Tests cover:
- record_attempt ratchet semantics and input rejection
- Bodyweight and extreme-rep comparisons
- reconcile_workout corrections against the pre-workout baseline
- rebuild from history
- Concurrent attempts
"""
import threading
from datetime import timedelta

import pytest

from backend.core.pr_ledger import MAX_OPEN_WORKOUTS, PersonalRecordLedger, build_entry
from backend.core.strength import improves_on
from backend.errors import DuplicateWorkoutError
from domain.models import RecordBasis, SetKind
from tests.fakes import at, make_exercise, make_workout


@pytest.mark.unit
class TestRecordAttempt:
    """Live PR detection."""

    def test_first_attempt_is_a_record(self, ledger):
        assert ledger.record_attempt("Bench Press", 135, 10, "w1") is True
        entry = ledger.get("bench press")
        assert entry.weight == 135
        assert entry.reps == 10
        assert entry.estimated_1rm == pytest.approx(180.0)
        assert entry.workout_id == "w1"

    def test_identical_attempt_twice_is_true_then_false(self, ledger):
        assert ledger.record_attempt("Bench Press", 135, 10, "w1") is True
        assert ledger.record_attempt("Bench Press", 135, 10, "w1") is False

    def test_strictly_better_replaces(self, ledger):
        ledger.record_attempt("Bench Press", 135, 10, "w1")
        assert ledger.record_attempt("Bench Press", 140, 10, "w1") is True
        assert ledger.get("Bench Press").weight == 140

    def test_lower_value_never_revokes(self, ledger):
        ledger.record_attempt("Bench Press", 200, 5, "w1")
        assert ledger.record_attempt("Bench Press", 150, 5, "w1") is False
        assert ledger.get("Bench Press").weight == 200

    def test_same_1rm_is_not_a_record(self, ledger):
        # 180 x 1 and 135 x 10 both estimate to 180
        ledger.record_attempt("Bench Press", 135, 10, "w1")
        assert ledger.record_attempt("Bench Press", 180, 1, "w1") is False

    def test_names_are_normalized(self, ledger):
        ledger.record_attempt("  Bench Press ", 135, 10, "w1")
        assert ledger.record_attempt("BENCH PRESS", 135, 10, "w1") is False
        entry = ledger.get("bench press")
        assert entry.exercise_name == "bench press"
        assert entry.display_name == "Bench Press"

    def test_record_date_comes_from_clock(self, ledger, clock):
        clock.advance(days=3)
        ledger.record_attempt("Squat", 225, 5, "w1")
        assert ledger.get("Squat").achieved_at == at(3)

    @pytest.mark.parametrize("weight,reps,kind", [
        (135, 10, SetKind.WARMUP),
        (135, 0, SetKind.WORKING),
        (135, -2, SetKind.WORKING),
        (-10, 5, SetKind.WORKING),
        (float("nan"), 5, SetKind.WORKING),
    ])
    def test_invalid_attempts_are_rejected_without_mutation(self, ledger, record_repo, weight, reps, kind):
        assert ledger.record_attempt("Bench Press", weight, reps, "w1", kind) is False
        assert record_repo.write_count == 0
        assert ledger.get("Bench Press") is None

    def test_blank_name_is_rejected(self, ledger, record_repo):
        assert ledger.record_attempt("   ", 100, 5, "w1") is False
        assert record_repo.write_count == 0


@pytest.mark.unit
class TestComparisonBasis:
    """Bodyweight and extreme-rep records."""

    def test_bodyweight_ranks_by_reps(self, ledger):
        assert ledger.record_attempt("Pull-Up", 0, 10, "w1") is True
        assert ledger.record_attempt("Pull-Up", 0, 9, "w1") is False
        assert ledger.record_attempt("Pull-Up", 0, 12, "w1") is True

        entry = ledger.get("pull-up")
        assert entry.is_bodyweight
        assert entry.basis == RecordBasis.REPS
        assert entry.estimated_1rm == 0
        assert entry.display_string == "BW × 12"

    def test_extreme_reps_compare_by_raw_weight(self, ledger):
        ledger.record_attempt("Leg Press", 100, 5, "w1")
        # 1RM undefined at 40 reps: heavier raw weight wins
        assert ledger.record_attempt("Leg Press", 110, 40, "w1") is True
        entry = ledger.get("Leg Press")
        assert entry.basis == RecordBasis.WEIGHT
        assert entry.estimated_1rm is None
        assert ledger.record_attempt("Leg Press", 105, 40, "w1") is False

    def test_extreme_reps_lighter_weight_is_not_a_record(self, ledger):
        ledger.record_attempt("Leg Press", 100, 5, "w1")
        assert ledger.record_attempt("Leg Press", 90, 50, "w1") is False

    def test_improves_on_uses_entry_basis(self):
        bodyweight = build_entry("Dip", 0, 10, "w1", at(0))
        assert improves_on(bodyweight, 0, 11)
        assert not improves_on(bodyweight, 0, 10)


@pytest.mark.unit
class TestReconcileWorkout:
    """End-of-workout reconciliation."""

    def _establish(self, ledger, weight=180, reps=5):
        """Record and reconcile a baseline workout w1."""
        ledger.record_attempt("Bench Press", weight, reps, "w1")
        ledger.reconcile_workout(
            make_workout("w1", at(0), [make_exercise("Bench Press", (weight, reps))])
        )

    def test_confirms_genuine_improvement(self, ledger):
        self._establish(ledger)
        workout = make_workout("w2", at(7), [make_exercise("Bench Press", (190, 5))])

        assert ledger.reconcile_workout(workout) == ["Bench Press"]
        entry = ledger.get("Bench Press")
        assert entry.weight == 190
        assert entry.workout_id == "w2"
        assert entry.achieved_at == workout.end_time

    def test_edit_after_flag_is_rolled_back(self, ledger):
        self._establish(ledger)
        # Flagged live at 200, then lowered to 150 before the workout ended
        assert ledger.record_attempt("Bench Press", 200, 5, "w2") is True
        workout = make_workout("w2", at(7), [make_exercise("Bench Press", (150, 5))])

        assert ledger.reconcile_workout(workout) == []
        entry = ledger.get("Bench Press")
        assert entry.weight == 180
        assert entry.workout_id == "w1"

    def test_edit_down_to_smaller_improvement_is_corrected(self, ledger):
        self._establish(ledger)
        ledger.record_attempt("Bench Press", 200, 5, "w2")
        workout = make_workout("w2", at(7), [make_exercise("Bench Press", (185, 5))])

        assert ledger.reconcile_workout(workout) == ["Bench Press"]
        assert ledger.get("Bench Press").weight == 185

    def test_live_timestamp_is_kept_for_the_flagged_set(self, ledger, clock):
        clock.advance(days=7, minutes=20)
        ledger.record_attempt("Squat", 225, 5, "w1")
        workout = make_workout("w1", at(7), [make_exercise("Squat", (225, 5))])

        ledger.reconcile_workout(workout)
        assert ledger.get("Squat").achieved_at == at(7) + timedelta(minutes=20)

    def test_first_ever_record_without_live_attempts(self, ledger):
        workout = make_workout("w1", at(0), [make_exercise("Deadlift", (315, 3), (335, 1))])
        assert ledger.reconcile_workout(workout) == ["Deadlift"]
        assert ledger.get("Deadlift").weight == 335

    def test_reconcile_is_repeatable(self, ledger):
        self._establish(ledger)
        ledger.record_attempt("Bench Press", 200, 5, "w2")
        workout = make_workout("w2", at(7), [make_exercise("Bench Press", (190, 5))])

        first = ledger.reconcile_workout(workout)
        second = ledger.reconcile_workout(workout)
        assert first == second == ["Bench Press"]
        assert ledger.get("Bench Press").weight == 190

    def test_reconcile_after_further_edit_uses_original_baseline(self, ledger):
        self._establish(ledger)
        workout = make_workout("w2", at(7), [make_exercise("Bench Press", (190, 5))])
        ledger.reconcile_workout(workout)

        edited = make_workout("w2", at(7), [make_exercise("Bench Press", (170, 5))])
        assert ledger.reconcile_workout(edited) == []
        assert ledger.get("Bench Press").weight == 180

    def test_removed_exercise_is_rolled_back(self, ledger):
        ledger.record_attempt("Curl", 50, 10, "w1")
        workout = make_workout("w1", at(0), [make_exercise("Squat", (225, 5))])

        assert ledger.reconcile_workout(workout) == ["Squat"]
        assert ledger.get("Curl") is None

    def test_warmups_are_ignored(self, ledger):
        self._establish(ledger)
        workout = make_workout(
            "w2", at(7), [make_exercise("Bench Press", (150, 5), warmups=[(225, 5)])]
        )
        assert ledger.reconcile_workout(workout) == []
        assert ledger.get("Bench Press").weight == 180

    def test_template_is_never_reconciled(self, ledger, record_repo):
        template = make_workout(
            "t1", at(0), [make_exercise("Bench Press", (300, 5))], is_template=True
        )
        assert ledger.reconcile_workout(template) == []
        assert record_repo.write_count == 0

    def test_record_from_another_workout_is_not_overwritten_by_weaker_set(self, ledger):
        # w3 ran concurrently and set a higher record
        ledger.record_attempt("Row", 150, 5, "w2")
        ledger.record_attempt("Row", 200, 5, "w3")
        workout = make_workout("w2", at(1), [make_exercise("Row", (150, 5))])

        assert ledger.reconcile_workout(workout) == ["Row"]
        assert ledger.get("Row").workout_id == "w3"

    def test_returns_names_in_workout_order(self, ledger):
        workout = make_workout("w1", at(0), [
            make_exercise("Squat", (225, 5)),
            make_exercise("Bench Press", (185, 5)),
            make_exercise("Row", (135, 8)),
        ])
        assert ledger.reconcile_workout(workout) == ["Squat", "Bench Press", "Row"]

    def test_confirmed_name_comes_from_the_entry_holding_the_record(self, ledger):
        workout = make_workout("w1", at(0), [
            make_exercise("squat", warmups=[(135, 5)], exercise_id="e1"),
            make_exercise("Squat", (275, 3), exercise_id="e3"),
        ])
        assert ledger.reconcile_workout(workout) == ["Squat"]
        assert ledger.get("squat").display_name == "Squat"

    def test_unfinished_workout_is_not_reconciled(self, ledger, record_repo):
        ledger.record_attempt("Squat", 315, 1, "w1")
        writes = record_repo.write_count
        workout = make_workout("w1", at(0), [make_exercise("Squat", (225, 5))], completed=False)

        assert ledger.reconcile_workout(workout) == []
        assert record_repo.write_count == writes
        assert ledger.get("Squat").weight == 315


@pytest.mark.unit
class TestBaselineRetention:
    """Pre-workout baselines held for reconciliation."""

    def test_reconcile_keeps_baselines_for_a_later_edit(self, ledger):
        ledger.record_attempt("Squat", 225, 5, "w1")
        ledger.reconcile_workout(make_workout("w1", at(0), [make_exercise("Squat", (225, 5))]))
        assert ledger.open_workouts == ["w1"]

    def test_discard_releases_baselines(self, ledger):
        ledger.record_attempt("Squat", 225, 5, "w1")
        ledger.discard_workout("w1")
        assert ledger.open_workouts == []

    def test_baselines_are_capped_to_recent_workouts(self, ledger):
        for i in range(MAX_OPEN_WORKOUTS + 10):
            ledger.record_attempt("Squat", 100 + i, 5, f"w{i}")

        open_workouts = ledger.open_workouts
        assert len(open_workouts) == MAX_OPEN_WORKOUTS
        assert open_workouts[-1] == f"w{MAX_OPEN_WORKOUTS + 9}"
        assert "w0" not in open_workouts

    def test_touching_a_workout_keeps_it_open(self, ledger):
        ledger.record_attempt("Squat", 100, 5, "w0")
        for i in range(1, MAX_OPEN_WORKOUTS):
            ledger.record_attempt("Bench Press", 100 + i, 5, f"w{i}")
        ledger.record_attempt("Squat", 90, 5, "w0")
        ledger.record_attempt("Row", 100, 5, "w-new")

        assert "w0" in ledger.open_workouts
        assert "w1" not in ledger.open_workouts


@pytest.mark.unit
class TestRebuild:
    """Rebuilding the ledger from history."""

    def test_rebuild_keeps_best_per_exercise(self, ledger):
        history = [
            make_workout("w1", at(0), [make_exercise("Bench Press", (135, 10))]),
            make_workout("w2", at(7), [make_exercise("bench press", (155, 8))]),
            make_workout("w3", at(14), [make_exercise("Bench Press", (145, 8))]),
            make_workout("w4", at(21), [make_exercise("Bench Press", (400, 1))], completed=False),
        ]
        entries = ledger.rebuild(history)

        assert len(entries) == 1
        entry = ledger.get("Bench Press")
        assert entry.weight == 155
        assert entry.workout_id == "w2"
        assert entry.achieved_at == at(7)

    def test_rebuild_replaces_existing_entries(self, ledger):
        ledger.record_attempt("Curl", 60, 10, "live")
        ledger.rebuild([make_workout("w1", at(0), [make_exercise("Squat", (225, 5))])])
        assert ledger.get("Curl") is None
        assert [e.exercise_name for e in ledger.all_records()] == ["squat"]

    def test_rebuild_rejects_duplicate_workouts(self, ledger):
        workout = make_workout("w1", at(0), [make_exercise("Squat", (225, 5))])
        with pytest.raises(DuplicateWorkoutError) as exc_info:
            ledger.rebuild([workout, workout])
        assert exc_info.value.workout_id == "w1"


@pytest.mark.unit
class TestConcurrency:

    def test_concurrent_attempts_keep_the_best(self, record_repo, clock):
        ledger = PersonalRecordLedger(record_repo, clock=clock)
        weights = list(range(100, 300, 2))
        results = []

        def log(weight):
            results.append(ledger.record_attempt("Bench Press", weight, 5, "w1"))

        threads = [threading.Thread(target=log, args=(w,)) for w in weights]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert ledger.get("Bench Press").weight == max(weights)
        assert any(results)
