"""Duplicate detection between record sets.

Detection is pairwise: every incoming record is compared with every
existing record, and each pair yields at most one match (the first rule
satisfied in priority order). Comparison keys are derived once per record.
"""

from collections.abc import Sequence

from bibmerge.matching.models import Match, MatchThresholds
from bibmerge.matching.rules import MATCH_RULES, MatchRule, compare_keys, record_keys
from bibmerge.models import BibRecord


def detect(
    incoming: Sequence[BibRecord],
    existing: Sequence[BibRecord],
    thresholds: MatchThresholds | None = None,
    rules: tuple[MatchRule, ...] = MATCH_RULES,
) -> list[Match]:
    """Find all duplicate pairs between incoming and existing records.

    Parameters
    ----------
    incoming : Sequence[BibRecord]
        Records about to be added.
    existing : Sequence[BibRecord]
        Records already in the target file.
    thresholds : MatchThresholds | None, optional
        Fuzzy-match thresholds. Uses defaults when None.
    rules : tuple[MatchRule, ...], optional
        Ordered rule set (default: MATCH_RULES).

    Returns
    -------
    list[Match]
        Matches in incoming-major order: for each incoming record, matches
        against existing records in existing order. An incoming record may
        appear in several matches.
    """
    thresholds = thresholds or MatchThresholds()
    existing_keys = [record_keys(record) for record in existing]

    matches: list[Match] = []
    for new_record in incoming:
        new_keys = record_keys(new_record)
        for old_keys in existing_keys:
            match = compare_keys(new_keys, old_keys, thresholds, rules)
            if match is not None:
                matches.append(match)
    return matches


def scan(
    records: Sequence[BibRecord],
    thresholds: MatchThresholds | None = None,
    rules: tuple[MatchRule, ...] = MATCH_RULES,
) -> list[Match]:
    """Find duplicate pairs within a single record set.

    Each unordered pair ``i < j`` is compared once, with the earlier record
    in the ``incoming`` slot.

    Parameters
    ----------
    records : Sequence[BibRecord]
        Records of one file.
    thresholds : MatchThresholds | None, optional
        Fuzzy-match thresholds. Uses defaults when None.
    rules : tuple[MatchRule, ...], optional
        Ordered rule set (default: MATCH_RULES).

    Returns
    -------
    list[Match]
        Matches ordered by ``(i, j)``.
    """
    thresholds = thresholds or MatchThresholds()
    keys = [record_keys(record) for record in records]

    matches: list[Match] = []
    for i, first in enumerate(keys):
        for second in keys[i + 1 :]:
            match = compare_keys(first, second, thresholds, rules)
            if match is not None:
                matches.append(match)
    return matches


def rank_matches(matches: Sequence[Match]) -> list[Match]:
    """Order matches by kind priority, then by descending score.

    The sort is stable, so ties keep detection order.
    """
    return sorted(matches, key=lambda m: (m.kind.priority, -m.score))


def matched_incoming_keys(matches: Sequence[Match]) -> list[str]:
    """Distinct incoming keys involved in any match, in first-seen order."""
    seen: dict[str, None] = {}
    for match in matches:
        seen.setdefault(match.incoming.key, None)
    return list(seen)
