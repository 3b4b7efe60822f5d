"""
Exercise name normalization and collation.

The join key itself lives with the domain models; this module adds the
sort key used for user-facing alphabetical ordering.
"""

import re
import unicodedata

from domain.models.names import normalize_exercise_name

__all__ = ["collation_key", "normalize_exercise_name"]


def collation_key(name: str) -> tuple:
    """
    Sort key for user-facing alphabetical ordering.

    Accents are folded, case is ignored and embedded numbers compare
    numerically, so "Row 2" sorts before "Row 10".
    """
    folded = unicodedata.normalize("NFKD", name.strip())
    folded = "".join(c for c in folded if not unicodedata.combining(c)).casefold()
    parts = re.split(r"(\d+)", folded)
    return tuple((0, int(p)) if p.isdigit() else (1, p) for p in parts if p)
