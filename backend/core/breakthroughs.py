"""
Breakthrough Detector.

Extracts the strictly-improving prefix-maximum subsequence of an
exercise's chart history: the points that set a new all-time best.
"""
from typing import Iterable, List, Optional

from backend.core.strength import basis_values, improves_on
from domain.models import ChartDataPoint, PRBreakthrough


def improvement_percent(previous: float, current: float) -> Optional[float]:
    """Percentage gain from ``previous`` to ``current``; None when undefined."""
    if previous <= 0:
        return None
    return (current - previous) / previous * 100.0


def gain_over(best: ChartDataPoint, point: ChartDataPoint) -> Optional[float]:
    """Percentage gain of ``point`` over ``best``, measured in best's basis."""
    previous, value = basis_values(best, point.weight, point.reps)
    return improvement_percent(previous, value)


def detect_breakthroughs(
    points: Iterable[ChartDataPoint],
    *,
    newest_first: bool = False,
) -> List[PRBreakthrough]:
    """
    Find the points that beat every earlier point.

    A single forward pass keeps the running best point. Each later point
    is measured in the running best's basis, exactly as the PR ledger
    compares a set with the stored record: 1RM, raw weight past the
    estimator's range, or reps for bodyweight. The first point is always a
    breakthrough; later points must strictly beat the running best. Ties
    are not breakthroughs.

    Args:
        points: Chart points in chronological order, as produced by
            exercise_history
        newest_first: Reverse the result for most-recent-first display

    Returns:
        Breakthroughs, each carrying the improvement over the previous
        breakthrough (None for the first)
    """
    breakthroughs: List[PRBreakthrough] = []
    best: Optional[ChartDataPoint] = None

    for point in points:
        if best is not None and not improves_on(best, point.weight, point.reps):
            continue

        breakthroughs.append(PRBreakthrough(
            **point.model_dump(),
            improvement_percent=gain_over(best, point) if best is not None else None,
            previous_best=best.score if best is not None else None,
        ))
        best = point

    if newest_first:
        breakthroughs.reverse()
    return breakthroughs
