"""Match rules evaluated in fixed priority order.

Each rule pairs a match kind with a scorer. A scorer returns a score when
its dimension is satisfied and None otherwise; the first rule that returns
a score decides the pair, so at most one match is reported per pair.
"""

from collections.abc import Callable
from dataclasses import dataclass

from bibmerge.matching.models import Match, MatchKind, MatchThresholds
from bibmerge.models import BibRecord
from bibmerge.normalize import normalize_author, normalize_doi, normalize_title
from bibmerge.scoring import similarity


@dataclass(frozen=True, slots=True)
class RecordKeys:
    """Comparison keys derived once per record.

    Attributes
    ----------
    record : BibRecord
        The source record.
    doi : str
        Casefolded DOI, empty when missing.
    title : str
        Normalized title, empty when missing.
    author : str
        Normalized author token stream, empty when missing.
    year : str | None
        Raw ``year`` field, compared as a literal string.
    """

    record: BibRecord
    doi: str
    title: str
    author: str
    year: str | None


def record_keys(record: BibRecord) -> RecordKeys:
    """Derive comparison keys for a record."""
    return RecordKeys(
        record=record,
        doi=normalize_doi(record.doi),
        title=normalize_title(record.title),
        author=normalize_author(record.author),
        year=record.year,
    )


Scorer = Callable[[RecordKeys, RecordKeys, MatchThresholds], float | None]
Describer = Callable[[RecordKeys, RecordKeys, float], str]


@dataclass(frozen=True, slots=True)
class MatchRule:
    """One dimension of the duplicate check.

    Attributes
    ----------
    kind : MatchKind
        Kind reported when the rule fires.
    scorer : Scorer
        Returns the match score, or None when the dimension is not satisfied.
    describer : Describer
        Builds the human-readable reason.
    """

    kind: MatchKind
    scorer: Scorer
    describer: Describer

    def evaluate(
        self,
        a: RecordKeys,
        b: RecordKeys,
        thresholds: MatchThresholds,
    ) -> Match | None:
        """Run the rule on a pair.

        Parameters
        ----------
        a : RecordKeys
            Keys of the incoming (or earlier) record.
        b : RecordKeys
            Keys of the existing (or later) record.
        thresholds : MatchThresholds
            Fuzzy-match thresholds.

        Returns
        -------
        Match | None
            The match, or None when the rule does not fire.
        """
        score = self.scorer(a, b, thresholds)
        if score is None:
            return None
        return Match(
            incoming=a.record,
            existing=b.record,
            kind=self.kind,
            score=score,
            reason=self.describer(a, b, score),
        )


def score_key(a: RecordKeys, b: RecordKeys, thresholds: MatchThresholds) -> float | None:
    """Exact string equality of citation keys."""
    return 1.0 if a.record.key == b.record.key else None


def score_doi(a: RecordKeys, b: RecordKeys, thresholds: MatchThresholds) -> float | None:
    """Both DOIs present and equal ignoring case."""
    if a.doi and b.doi and a.doi == b.doi:
        return 1.0
    return None


def score_title(a: RecordKeys, b: RecordKeys, thresholds: MatchThresholds) -> float | None:
    """Both titles present and similarity strictly above the threshold."""
    if not a.title or not b.title:
        return None
    sim = similarity(a.title, b.title)
    return sim if sim > thresholds.title else None


def score_author_year(
    a: RecordKeys,
    b: RecordKeys,
    thresholds: MatchThresholds,
) -> float | None:
    """Identical year strings and author similarity above the threshold.

    Years are compared literally: ``"2020"`` and ``"2020."`` differ, while
    two records without a year compare as equal.
    """
    if not a.author or not b.author or a.year != b.year:
        return None
    sim = similarity(a.author, b.author)
    return sim if sim > thresholds.author else None


def _describe_key(a: RecordKeys, b: RecordKeys, score: float) -> str:
    return f"Same citation key: {a.record.key}"


def _describe_doi(a: RecordKeys, b: RecordKeys, score: float) -> str:
    return f"Same DOI: {a.doi}"


def _describe_title(a: RecordKeys, b: RecordKeys, score: float) -> str:
    return f"Similar title ({score:.0%} match)"


def _describe_author_year(a: RecordKeys, b: RecordKeys, score: float) -> str:
    year = a.year if a.year is not None else "no year"
    return f"Similar author and same year ({year})"


# ---------------------------------------------------------------------------
# Rule registry - ordered tuple, first satisfied rule wins
# ---------------------------------------------------------------------------


MATCH_RULES: tuple[MatchRule, ...] = (
    MatchRule(kind=MatchKind.KEY, scorer=score_key, describer=_describe_key),
    MatchRule(kind=MatchKind.DOI, scorer=score_doi, describer=_describe_doi),
    MatchRule(kind=MatchKind.TITLE, scorer=score_title, describer=_describe_title),
    MatchRule(
        kind=MatchKind.AUTHOR_YEAR,
        scorer=score_author_year,
        describer=_describe_author_year,
    ),
)


def compare_keys(
    a: RecordKeys,
    b: RecordKeys,
    thresholds: MatchThresholds,
    rules: tuple[MatchRule, ...] = MATCH_RULES,
) -> Match | None:
    """Evaluate rules in order and return the first match."""
    for rule in rules:
        match = rule.evaluate(a, b, thresholds)
        if match is not None:
            return match
    return None
