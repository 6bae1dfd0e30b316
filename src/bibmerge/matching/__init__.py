"""Duplicate detection: ordered match rules over normalized fields."""

from bibmerge.matching.detector import detect, matched_incoming_keys, rank_matches, scan
from bibmerge.matching.models import (
    DEFAULT_AUTHOR_THRESHOLD,
    DEFAULT_TITLE_THRESHOLD,
    Match,
    MatchKind,
    MatchThresholds,
)
from bibmerge.matching.rules import MATCH_RULES, MatchRule, RecordKeys, record_keys

__all__ = [
    "DEFAULT_AUTHOR_THRESHOLD",
    "DEFAULT_TITLE_THRESHOLD",
    "MATCH_RULES",
    "Match",
    "MatchKind",
    "MatchRule",
    "MatchThresholds",
    "RecordKeys",
    "detect",
    "matched_incoming_keys",
    "rank_matches",
    "record_keys",
    "scan",
]
