"""
Exercise name identity.

Every subsystem joins exercises on the normalized name: surrounding
whitespace trimmed and case folded. Display names are kept separately
wherever they are shown to a user.
"""


def normalize_exercise_name(name: str) -> str:
    """
    Return the join key for an exercise name.

    Examples:
        >>> normalize_exercise_name("  Bench Press ")
        'bench press'
        >>> normalize_exercise_name("BENCH PRESS") == normalize_exercise_name("bench press")
        True
    """
    if not name:
        return ""
    return name.strip().casefold()
