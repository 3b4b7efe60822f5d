"""
PR timeline view models and chart time ranges.
"""

import calendar
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from domain.models.records import RecordBasis, format_number


class TimelineFilter(str, Enum):
    """Which records a timeline shows."""

    ALL = "all"
    BODYWEIGHT = "bodyweight"
    WEIGHTED = "weighted"
    STALE = "stale"
    # Movement filters, matched by keyword on the exercise name
    PUSH = "push"
    PULL = "pull"
    LEGS = "legs"
    CORE = "core"


class TimelineSort(str, Enum):
    """Timeline ordering."""

    RECENT = "recent"
    OLDEST = "oldest"
    HEAVIEST = "heaviest"
    LIGHTEST = "lightest"
    ALPHABETICAL = "alphabetical"
    REVERSE_ALPHABETICAL = "reverse_alphabetical"


class TimelineEntry(BaseModel):
    """One exercise's record as shown in the cross-exercise timeline."""

    exercise_name: str = Field(..., description="Normalized exercise name")
    display_name: str
    weight: float
    reps: int
    estimated_1rm: Optional[float] = None
    basis: RecordBasis
    is_bodyweight: bool
    score: float
    workout_id: str
    achieved_at: datetime
    relative_time: str = Field(..., description='Human relative time, e.g. "3 days ago"')
    is_stale: bool

    @property
    def display_string(self) -> str:
        if self.is_bodyweight:
            return f"BW × {self.reps}"
        return f"{format_number(self.weight)} × {self.reps}"


def _subtract_months(moment: datetime, months: int) -> datetime:
    """Shift ``moment`` back by whole months, clamping the day of month."""
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


class TimeRange(str, Enum):
    """Chart window."""

    THREE_MONTHS = "3m"
    SIX_MONTHS = "6m"
    ONE_YEAR = "1y"
    ALL_TIME = "all"

    def start_date(self, now: datetime) -> Optional[datetime]:
        """First moment inside the window, or None for all time."""
        if self == TimeRange.THREE_MONTHS:
            return _subtract_months(now, 3)
        if self == TimeRange.SIX_MONTHS:
            return _subtract_months(now, 6)
        if self == TimeRange.ONE_YEAR:
            return _subtract_months(now, 12)
        return None
