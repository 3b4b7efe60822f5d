"""
Strength estimation.

1RM is estimated with the Brzycki relation:

    1RM = weight * 36 / (37 - reps)

The relation is only defined for 1-36 reps. At 37 reps and above the
denominator is non-positive, so the estimate is reported as undefined and
callers rank by raw weight instead. Bodyweight sets (weight == 0) estimate
to 0 and are ranked by reps.
"""

import math
from typing import Optional, Tuple, Union

from domain.models.records import ChartDataPoint, PersonalRecordEntry, RecordBasis

BRZYCKI_MAX_REPS = 36


def estimate_1rm(weight: float, reps: int) -> Optional[float]:
    """
    Estimate a one-rep max.

    Args:
        weight: Weight lifted (canonical unit)
        reps: Repetitions completed

    Returns:
        The Brzycki estimate, ``0.0`` for bodyweight sets, or ``None`` when
        the estimate is undefined (reps outside 1-36, negative or
        non-finite weight).

    Examples:
        >>> estimate_1rm(225, 1)
        225.0
        >>> estimate_1rm(0, 10)
        0.0
        >>> estimate_1rm(50, 37) is None
        True
    """
    if reps <= 0 or not math.isfinite(weight) or weight < 0:
        return None
    if weight == 0:
        return 0.0
    if reps > BRZYCKI_MAX_REPS:
        return None
    return weight * 36.0 / (37.0 - reps)


def record_basis(weight: float, reps: int) -> RecordBasis:
    """The basis a single set is naturally ranked by."""
    if weight == 0:
        return RecordBasis.REPS
    if reps > BRZYCKI_MAX_REPS:
        return RecordBasis.WEIGHT
    return RecordBasis.ONE_REP_MAX


def score_set(weight: float, reps: int) -> Tuple[RecordBasis, float]:
    """
    Rank a set in its own basis.

    Returns:
        (basis, comparison value)
    """
    basis = record_basis(weight, reps)
    value = score_in_basis(basis, weight, reps)
    return basis, value if value is not None else 0.0


def score_in_basis(basis: RecordBasis, weight: float, reps: int) -> Optional[float]:
    """
    Value of a set measured in ``basis``.

    Used to compare a new set against an existing record on the record's
    own terms. Returns None when the set has no value in that basis
    (a one_rep_max measurement of a set beyond the estimator's range).
    """
    if basis == RecordBasis.REPS:
        return float(reps)
    if basis == RecordBasis.WEIGHT:
        return float(weight)
    return estimate_1rm(weight, reps)


def is_valid_set(weight: float, reps: int) -> bool:
    """True when a set may feed records or charts."""
    return reps > 0 and math.isfinite(weight) and weight >= 0


def improves_on(
    best: Union[PersonalRecordEntry, ChartDataPoint],
    weight: float,
    reps: int,
) -> bool:
    """
    True when a set strictly beats ``best``, measured in best's basis.

    Used by both the PR ledger and the breakthrough detector. A set beyond
    the 1RM estimator's range is compared to a one_rep_max best by raw
    weight.
    """
    previous, value = basis_values(best, weight, reps)
    return value > previous


def basis_values(
    best: Union[PersonalRecordEntry, ChartDataPoint],
    weight: float,
    reps: int,
) -> Tuple[float, float]:
    """(best's value, the set's value), both in best's basis."""
    value = score_in_basis(best.basis, weight, reps)
    if value is None:
        return float(best.weight), float(weight)
    return best.score, value
