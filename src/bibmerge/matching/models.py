"""Data models for duplicate matching.

This module defines the match kinds, the fuzzy-match thresholds and the
Match record produced for every candidate duplicate pair.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from bibmerge.models import BibRecord

DEFAULT_TITLE_THRESHOLD = 0.85
DEFAULT_AUTHOR_THRESHOLD = 0.80


class MatchKind(StrEnum):
    """Dimension that triggered a match, in priority order.

    Attributes
    ----------
    KEY : str
        Identical citation keys.
    DOI : str
        Identical DOIs (case-insensitive).
    TITLE : str
        Normalized titles above the title threshold.
    AUTHOR_YEAR : str
        Same year and normalized authors above the author threshold.
    """

    KEY = "key"
    DOI = "doi"
    TITLE = "title"
    AUTHOR_YEAR = "author-year"

    @property
    def priority(self) -> int:
        """Position in the evaluation order (0 is checked first)."""
        return list(MatchKind).index(self)


@dataclass(frozen=True, slots=True)
class MatchThresholds:
    """Similarity thresholds for the fuzzy dimensions.

    A pair matches only when its similarity is strictly greater than the
    threshold.

    Attributes
    ----------
    title : float
        Title similarity threshold (default: 0.85).
    author : float
        Author similarity threshold (default: 0.80).
    """

    title: float = DEFAULT_TITLE_THRESHOLD
    author: float = DEFAULT_AUTHOR_THRESHOLD

    def __post_init__(self) -> None:
        """Validate thresholds."""
        if not 0.0 <= self.title <= 1.0:
            raise ValueError(f"title threshold must be in [0, 1], got {self.title}")
        if not 0.0 <= self.author <= 1.0:
            raise ValueError(f"author threshold must be in [0, 1], got {self.author}")


@dataclass(frozen=True, slots=True)
class Match:
    """A candidate duplicate pairing.

    Attributes
    ----------
    incoming : BibRecord
        Record from the incoming set (or the earlier record in scan mode).
    existing : BibRecord
        Record from the existing set (or the later record in scan mode).
    kind : MatchKind
        The single dimension reported for this pair.
    score : float
        1.0 for key and DOI matches, the computed similarity otherwise.
    reason : str
        Human-readable explanation, e.g. ``"Similar title (91% match)"``.
    """

    incoming: BibRecord
    existing: BibRecord
    kind: MatchKind
    score: float
    reason: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization.

        Returns
        -------
        dict[str, Any]
            Both keys, kind, score and reason.
        """
        return {
            "incoming_key": self.incoming.key,
            "existing_key": self.existing.key,
            "kind": str(self.kind),
            "score": self.score,
            "reason": self.reason,
        }
