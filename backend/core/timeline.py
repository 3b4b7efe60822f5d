"""
PR Timeline Builder.

Produces the cross-exercise personal-record summary: one entry per
exercise, filterable and sortable, each with a human relative time and a
staleness flag. Relative time and staleness are pure functions of
(record date, now) so they can be tested without a clock.
"""
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Tuple

from backend.core.history import as_utc
from backend.core.normalize import collation_key
from domain.models import PersonalRecordEntry, TimelineEntry, TimelineFilter, TimelineSort

# A record older than this many days is stale
DEFAULT_STALE_RECORD_DAYS = 30

# Movement filters, matched as substrings of the normalized exercise name
MOVEMENT_KEYWORDS: Dict[TimelineFilter, Tuple[str, ...]] = {
    TimelineFilter.PUSH: ("bench", "press", "chest", "shoulder", "dip", "tricep", "fly", "flye", "pushup", "push-up"),
    TimelineFilter.PULL: ("row", "pull", "lat", "back", "bicep", "curl", "chin", "deadlift"),
    TimelineFilter.LEGS: ("squat", "leg", "quad", "hamstring", "calf", "lunge", "glute"),
    TimelineFilter.CORE: ("ab", "core", "plank", "crunch", "sit-up", "situp"),
}


def relative_time(achieved_at: datetime, now: datetime) -> str:
    """
    Describe how long ago ``achieved_at`` was.

    Examples:
        >>> relative_time(datetime(2024, 1, 1, 12), datetime(2024, 1, 1, 15))
        '3 hours ago'
        >>> relative_time(datetime(2024, 1, 1), datetime(2024, 1, 2))
        'Yesterday'
        >>> relative_time(datetime(2024, 1, 1), datetime(2024, 3, 15))
        '2 months ago'
    """
    delta = as_utc(now) - as_utc(achieved_at)
    if delta < timedelta(0):
        return "Just now"

    days = delta.days
    if days == 0:
        hours = delta.seconds // 3600
        if hours == 0:
            return "Just now"
        if hours == 1:
            return "1 hour ago"
        return f"{hours} hours ago"
    if days == 1:
        return "Yesterday"
    if days < 7:
        return f"{days} days ago"
    if days < 14:
        return "1 week ago"
    if days < 30:
        return f"{days // 7} weeks ago"
    if days < 60:
        return "1 month ago"
    return f"{days // 30} months ago"


def is_stale(
    achieved_at: datetime,
    now: datetime,
    stale_after_days: int = DEFAULT_STALE_RECORD_DAYS,
) -> bool:
    """True when the record is older than ``stale_after_days`` days."""
    return as_utc(now) - as_utc(achieved_at) > timedelta(days=stale_after_days)


def to_timeline_entry(
    record: PersonalRecordEntry,
    now: datetime,
    stale_after_days: int = DEFAULT_STALE_RECORD_DAYS,
) -> TimelineEntry:
    return TimelineEntry(
        exercise_name=record.exercise_name,
        display_name=record.display_name,
        weight=record.weight,
        reps=record.reps,
        estimated_1rm=record.estimated_1rm,
        basis=record.basis,
        is_bodyweight=record.is_bodyweight,
        score=record.score,
        workout_id=record.workout_id,
        achieved_at=record.achieved_at,
        relative_time=relative_time(record.achieved_at, now),
        is_stale=is_stale(record.achieved_at, now, stale_after_days),
    )


def matches_filter(entry: TimelineEntry, timeline_filter: TimelineFilter) -> bool:
    if timeline_filter == TimelineFilter.ALL:
        return True
    if timeline_filter == TimelineFilter.BODYWEIGHT:
        return entry.is_bodyweight
    if timeline_filter == TimelineFilter.WEIGHTED:
        return not entry.is_bodyweight
    if timeline_filter == TimelineFilter.STALE:
        return entry.is_stale
    keywords = MOVEMENT_KEYWORDS[timeline_filter]
    return any(keyword in entry.exercise_name for keyword in keywords)


def sort_entries(entries: List[TimelineEntry], timeline_sort: TimelineSort) -> List[TimelineEntry]:
    """Sort timeline entries. Every ordering is stable for equal keys."""
    if timeline_sort == TimelineSort.RECENT:
        return sorted(entries, key=lambda e: as_utc(e.achieved_at), reverse=True)
    if timeline_sort == TimelineSort.OLDEST:
        return sorted(entries, key=lambda e: as_utc(e.achieved_at))
    if timeline_sort == TimelineSort.HEAVIEST:
        return sorted(entries, key=lambda e: e.score, reverse=True)
    if timeline_sort == TimelineSort.LIGHTEST:
        return sorted(entries, key=lambda e: e.score)
    if timeline_sort == TimelineSort.ALPHABETICAL:
        return sorted(entries, key=lambda e: collation_key(e.display_name))
    return sorted(entries, key=lambda e: collation_key(e.display_name), reverse=True)


def build_timeline(
    records: Iterable[PersonalRecordEntry],
    timeline_filter: TimelineFilter = TimelineFilter.ALL,
    timeline_sort: TimelineSort = TimelineSort.RECENT,
    *,
    now: Optional[datetime] = None,
    stale_after_days: int = DEFAULT_STALE_RECORD_DAYS,
) -> List[TimelineEntry]:
    """
    Build the PR timeline.

    Args:
        records: One PersonalRecordEntry per exercise
        timeline_filter: Which records to keep
        timeline_sort: Output ordering
        now: Reference time for relative time and staleness (defaults to
            the current UTC time)
        stale_after_days: Staleness threshold in days

    Returns:
        Filtered, sorted timeline entries
    """
    now = now or datetime.now(timezone.utc)
    entries = [to_timeline_entry(r, now, stale_after_days) for r in records]
    entries = [e for e in entries if matches_filter(e, timeline_filter)]
    return sort_entries(entries, timeline_sort)
