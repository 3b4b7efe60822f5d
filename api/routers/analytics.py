"""
Analytics router: personal records, progress history and suggestions.

A thin HTTP adapter over TrainingAnalyticsEngine. History-based endpoints
take the workout history in the request body; the PR ledger and exercise
memory live in the engine's stores.

Endpoints:
- POST /analytics/attempts: live PR detection for one logged set
- POST /analytics/workouts/reconcile: authoritative PR list for a workout
- POST /analytics/workouts/end: reconcile and remember exercise values
- POST /analytics/records/rebuild: recompute the ledger from history
- GET  /analytics/records: PR timeline (filter + sort)
- POST /analytics/history: chart points for an exercise
- POST /analytics/breakthroughs: breakthroughs for an exercise
- POST /analytics/summary: progress summary for an exercise
- POST /analytics/suggestions: exercises to add next
- GET  /analytics/library: search the exercise library
- GET  /analytics/prefill: pre-filled sets for a new exercise
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from api.deps import get_analytics_engine, get_library_repo
from application.ports import ExerciseLibraryRepository
from backend.core.engine import TrainingAnalyticsEngine
from backend.errors import DuplicateWorkoutError
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

router = APIRouter(
    prefix="/analytics",
    tags=["Analytics"],
)


# =============================================================================
# Request Models
# =============================================================================


class AttemptRequest(BaseModel):
    """A set saved or edited during live logging."""
    exercise_name: str = Field(..., min_length=1)
    weight: float
    reps: int
    workout_id: str
    kind: SetKind = SetKind.WORKING


class ExerciseHistoryRequest(BaseModel):
    """An exercise plus the workout history to analyse."""
    exercise_name: str
    workouts: List[WorkoutRecord] = Field(default_factory=list)
    time_range: TimeRange = TimeRange.ALL_TIME
    descending: bool = False


class RebuildRequest(BaseModel):
    workouts: List[WorkoutRecord] = Field(default_factory=list)


class SuggestionRequest(BaseModel):
    """The workout being built plus history for frequency ranking."""
    workout: WorkoutRecord
    workouts: List[WorkoutRecord] = Field(default_factory=list)
    limit: Optional[int] = Field(default=None, ge=1, le=50)


# =============================================================================
# Response Models
# =============================================================================


class AttemptResponse(BaseModel):
    is_new_record: bool
    record: Optional[PersonalRecordEntry] = None


class WorkoutRecordsResponse(BaseModel):
    """Confirmed personal records for a workout."""
    workout_id: str
    personal_records: List[str]


class RebuildResponse(BaseModel):
    records: List[PersonalRecordEntry]
    total: int


class TimelineResponse(BaseModel):
    records: List[TimelineEntry]
    total: int


class HistoryResponse(BaseModel):
    exercise_name: str
    points: List[ChartDataPoint]


class BreakthroughsResponse(BaseModel):
    exercise_name: str
    breakthroughs: List[PRBreakthrough]


class SuggestionResponse(BaseModel):
    suggestions: List[str]


class LibraryResponse(BaseModel):
    exercises: List[LibraryExercise]
    total: int


class PrefillResponse(BaseModel):
    exercise_name: str
    sets: List[SetRecord]


def _duplicate_workout(error: DuplicateWorkoutError) -> HTTPException:
    logger.warning("Rejected workout history: %s", error)
    return HTTPException(status_code=422, detail=str(error))


# =============================================================================
# PR Ledger Endpoints
# =============================================================================


@router.post("/attempts", response_model=AttemptResponse)
def record_attempt(
    request: AttemptRequest,
    engine: TrainingAnalyticsEngine = Depends(get_analytics_engine),
) -> AttemptResponse:
    """
    Record a logged set and report whether it is a new personal record.

    Used for immediate in-session feedback. The authoritative list comes
    from /workouts/end.
    """
    is_new_record = engine.record_attempt(
        request.exercise_name,
        request.weight,
        request.reps,
        request.workout_id,
        request.kind,
    )
    return AttemptResponse(
        is_new_record=is_new_record,
        record=engine.record(request.exercise_name),
    )


@router.post("/workouts/reconcile", response_model=WorkoutRecordsResponse)
def reconcile_workout(
    workout: WorkoutRecord,
    engine: TrainingAnalyticsEngine = Depends(get_analytics_engine),
) -> WorkoutRecordsResponse:
    """Re-evaluate a workout's final sets and return its confirmed PRs."""
    if not workout.is_completed:
        raise HTTPException(status_code=400, detail="Workout has no end time or is a template")
    return WorkoutRecordsResponse(
        workout_id=workout.id,
        personal_records=engine.reconcile_workout(workout),
    )


@router.post("/workouts/end", response_model=WorkoutRecordsResponse)
def end_workout(
    workout: WorkoutRecord,
    engine: TrainingAnalyticsEngine = Depends(get_analytics_engine),
) -> WorkoutRecordsResponse:
    """Reconcile a finished workout and remember each exercise's last set."""
    if not workout.is_completed:
        raise HTTPException(status_code=400, detail="Workout has no end time or is a template")
    return WorkoutRecordsResponse(
        workout_id=workout.id,
        personal_records=engine.end_workout(workout),
    )


@router.post("/records/rebuild", response_model=RebuildResponse)
def rebuild_records(
    request: RebuildRequest,
    engine: TrainingAnalyticsEngine = Depends(get_analytics_engine),
) -> RebuildResponse:
    """Recompute every personal record from the supplied history."""
    try:
        records = engine.rebuild_records(request.workouts)
    except DuplicateWorkoutError as e:
        raise _duplicate_workout(e)
    return RebuildResponse(records=records, total=len(records))


@router.get("/records", response_model=TimelineResponse)
def get_records(
    timeline_filter: TimelineFilter = Query(
        TimelineFilter.ALL, alias="filter", description="Which records to show"
    ),
    timeline_sort: TimelineSort = Query(TimelineSort.RECENT, alias="sort", description="Ordering"),
    engine: TrainingAnalyticsEngine = Depends(get_analytics_engine),
) -> TimelineResponse:
    """Cross-exercise personal record timeline."""
    entries = engine.timeline(timeline_filter=timeline_filter, timeline_sort=timeline_sort)
    return TimelineResponse(records=entries, total=len(entries))


# =============================================================================
# History Endpoints
# =============================================================================


@router.post("/history", response_model=HistoryResponse)
def get_history(
    request: ExerciseHistoryRequest,
    engine: TrainingAnalyticsEngine = Depends(get_analytics_engine),
) -> HistoryResponse:
    """One chart point per completed workout containing the exercise."""
    try:
        points = engine.history(
            request.exercise_name,
            request.workouts,
            time_range=request.time_range,
            descending=request.descending,
        )
    except DuplicateWorkoutError as e:
        raise _duplicate_workout(e)
    return HistoryResponse(exercise_name=request.exercise_name.strip(), points=points)


@router.post("/breakthroughs", response_model=BreakthroughsResponse)
def get_breakthroughs(
    request: ExerciseHistoryRequest,
    engine: TrainingAnalyticsEngine = Depends(get_analytics_engine),
) -> BreakthroughsResponse:
    """
    Points in the exercise's history that set a new all-time best.

    ``descending`` returns the most recent breakthrough first.
    """
    try:
        points = engine.history(request.exercise_name, request.workouts)
    except DuplicateWorkoutError as e:
        raise _duplicate_workout(e)
    return BreakthroughsResponse(
        exercise_name=request.exercise_name.strip(),
        breakthroughs=engine.breakthroughs(points, newest_first=request.descending),
    )


@router.post("/summary", response_model=ExerciseProgressSummary)
def get_summary(
    request: ExerciseHistoryRequest,
    engine: TrainingAnalyticsEngine = Depends(get_analytics_engine),
) -> ExerciseProgressSummary:
    """Headline progress numbers for an exercise."""
    try:
        return engine.progress_summary(
            request.exercise_name,
            request.workouts,
            time_range=request.time_range,
        )
    except DuplicateWorkoutError as e:
        raise _duplicate_workout(e)


# =============================================================================
# Suggestion and Library Endpoints
# =============================================================================


@router.post("/suggestions", response_model=SuggestionResponse)
def get_suggestions(
    request: SuggestionRequest,
    engine: TrainingAnalyticsEngine = Depends(get_analytics_engine),
) -> SuggestionResponse:
    """Exercises to add next, ranked by how often they were done."""
    try:
        suggestions = engine.suggest(
            request.workout,
            limit=request.limit,
            workouts=request.workouts,
        )
    except DuplicateWorkoutError as e:
        raise _duplicate_workout(e)
    return SuggestionResponse(suggestions=suggestions)


@router.get("/library", response_model=LibraryResponse)
def search_library(
    q: str = Query("", description="Case-insensitive name search"),
    limit: int = Query(20, ge=1, le=200),
    library: ExerciseLibraryRepository = Depends(get_library_repo),
) -> LibraryResponse:
    """Search the exercise library."""
    exercises = library.search(q, limit=limit)
    return LibraryResponse(exercises=exercises, total=len(exercises))


@router.get("/prefill", response_model=PrefillResponse)
def get_prefill(
    exercise_name: str = Query(..., min_length=1),
    engine: TrainingAnalyticsEngine = Depends(get_analytics_engine),
) -> PrefillResponse:
    """Pre-filled sets for a newly added exercise."""
    return PrefillResponse(
        exercise_name=exercise_name.strip(),
        sets=engine.prefill_sets(exercise_name),
    )
