"""Edit-distance similarity for normalized strings.

This module provides pure, deterministic functions. ``similarity`` is
symmetric, reflexive (``similarity(a, a) == 1.0``) and bounded in [0, 1].
"""

from rapidfuzz.distance import Levenshtein


def edit_distance(a: str, b: str) -> int:
    """Classic Levenshtein distance.

    Insertions, deletions and substitutions each cost 1.

    Parameters
    ----------
    a : str
        First string.
    b : str
        Second string.

    Returns
    -------
    int
        Minimum number of single-character edits turning ``a`` into ``b``.
    """
    return Levenshtein.distance(a, b)


def similarity(a: str, b: str) -> float:
    """Normalized inverse edit distance.

    Parameters
    ----------
    a : str
        First (normalized) string.
    b : str
        Second (normalized) string.

    Returns
    -------
    float
        ``1 - edit_distance(a, b) / max(len(a), len(b))``.

    Notes
    -----
    Equal strings (including two empty strings) score 1.0. When exactly one
    string is empty the score is 0.0 without computing a distance.
    """
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0

    max_length = max(len(a), len(b))
    return 1.0 - edit_distance(a, b) / max_length
