"""Public API for merging BibTeX bibliographies.

This module provides the main public API for bibmerge, enabling:
- Parsing BibTeX files into BibRecord objects
- Exporting records to JSONL format
- Detecting duplicates between two texts or within one
- Merging texts and files under a resolution policy
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from bibmerge.clean import DEFAULT_REMOVE_FIELDS
from bibmerge.matching import Match, MatchThresholds, detect, scan
from bibmerge.merge import MergeOutcome, Resolution, apply_resolution
from bibmerge.models import BibRecord
from bibmerge.parse import parse_bibtex
from bibmerge.storage import read_bib_text

if TYPE_CHECKING:
    from bibmerge.engine.config import MergeRunResult

__all__ = [
    "parse_file",
    "write_jsonl",
    "detect_duplicates",
    "scan_text",
    "merge_texts",
    "merge_files",
    "MergeError",
]


class MergeError(Exception):
    """Raised when a file merge fails."""

    def __init__(
        self,
        message: str,
        target: str | None = None,
    ) -> None:
        """Initialize merge error.

        Parameters
        ----------
        message : str
            Error message.
        target : str | None, optional
            Bibliography file the merge was writing to.
        """
        super().__init__(message)
        self.target = target


def parse_file(path: str | Path) -> list[BibRecord]:
    """Parse a BibTeX file.

    Malformed entries are skipped; a file without entries yields no records.

    Parameters
    ----------
    path : str | Path
        Path to file to parse.

    Returns
    -------
    list[BibRecord]
        Parsed records in file order.

    Raises
    ------
    FileNotFoundError
        If file does not exist.

    Examples
    --------
        >>> from bibmerge import parse_file
        >>> records = parse_file("references.bib")  # doctest: +SKIP
        >>> [r.key for r in records]
        ['smith2020', 'doe2019']
    """
    file_path = Path(path)

    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    return parse_bibtex(read_bib_text(file_path))


def write_jsonl(
    records: list[BibRecord],
    path: str | Path,
    *,
    sort_keys: bool = True,
) -> None:
    """Write records to JSONL file (one JSON object per line).

    Parameters
    ----------
    records : list[BibRecord]
        Records to write.
    path : str | Path
        Output file path.
    sort_keys : bool, optional
        Whether to sort dictionary keys for deterministic output,
        by default True.
    """
    file_path = Path(path)

    with file_path.open("w", encoding="utf-8", newline="\n") as f:
        for record in records:
            json_str = json.dumps(
                record.to_dict(),
                ensure_ascii=False,
                sort_keys=sort_keys,
            )
            f.write(json_str + "\n")


def detect_duplicates(
    incoming_text: str,
    existing_text: str,
    *,
    title_threshold: float = 0.85,
    author_threshold: float = 0.80,
) -> list[Match]:
    """Detect duplicates between two BibTeX texts.

    Parameters
    ----------
    incoming_text : str
        BibTeX about to be added.
    existing_text : str
        Current bibliography.
    title_threshold : float, optional
        Title similarity threshold, by default 0.85.
    author_threshold : float, optional
        Author similarity threshold, by default 0.80.

    Returns
    -------
    list[Match]
        At most one match per (incoming, existing) pair, incoming-major.

    Examples
    --------
        >>> matches = detect_duplicates(
        ...     "@article{smith2020, title={A}, year={2020}}",
        ...     "@article{smith2020, title={B}, year={2021}}",
        ... )
        >>> matches[0].kind, matches[0].score
        (<MatchKind.KEY: 'key'>, 1.0)
    """
    thresholds = MatchThresholds(title=title_threshold, author=author_threshold)
    return detect(parse_bibtex(incoming_text), parse_bibtex(existing_text), thresholds)


def scan_text(
    text: str,
    *,
    title_threshold: float = 0.85,
    author_threshold: float = 0.80,
) -> list[Match]:
    """Find duplicate pairs within one BibTeX text.

    Parameters
    ----------
    text : str
        Bibliography to scan.
    title_threshold : float, optional
        Title similarity threshold, by default 0.85.
    author_threshold : float, optional
        Author similarity threshold, by default 0.80.

    Returns
    -------
    list[Match]
        Matches for pairs ``i < j``, earlier record first.
    """
    thresholds = MatchThresholds(title=title_threshold, author=author_threshold)
    return scan(parse_bibtex(text), thresholds)


def merge_texts(
    incoming_text: str,
    existing_text: str,
    decision: Resolution | str,
    *,
    title_threshold: float = 0.85,
    author_threshold: float = 0.80,
) -> MergeOutcome:
    """Detect duplicates and merge two texts in memory.

    Parameters
    ----------
    incoming_text : str
        BibTeX about to be added.
    existing_text : str
        Current bibliography.
    decision : Resolution | str
        Resolution applied when duplicates are found.
    title_threshold : float, optional
        Title similarity threshold, by default 0.85.
    author_threshold : float, optional
        Author similarity threshold, by default 0.80.

    Returns
    -------
    MergeOutcome
        New text (None when nothing must change) plus written/removed keys.
    """
    matches = detect_duplicates(
        incoming_text,
        existing_text,
        title_threshold=title_threshold,
        author_threshold=author_threshold,
    )
    return apply_resolution(incoming_text, existing_text, matches, decision)


def merge_files(
    incoming_path: str | Path,
    target_path: str | Path,
    decision: Resolution | str,
    *,
    remove_fields: Iterable[str] = DEFAULT_REMOVE_FIELDS,
    clean_incoming: bool = True,
    title_threshold: float = 0.85,
    author_threshold: float = 0.80,
    audit_log: str | Path | None = None,
) -> MergeRunResult:
    """Merge a BibTeX file into a target bibliography file.

    Simplified interface to the merge workflow.

    Parameters
    ----------
    incoming_path : str | Path
        File with the new entries.
    target_path : str | Path
        Bibliography to update; created when missing.
    decision : Resolution | str
        Resolution applied when duplicates are found.
    remove_fields : Iterable[str], optional
        Fields stripped from incoming entries, by default annotation and file.
    clean_incoming : bool, optional
        Whether to strip ``remove_fields``, by default True.
    title_threshold : float, optional
        Title similarity threshold, by default 0.85.
    author_threshold : float, optional
        Author similarity threshold, by default 0.80.
    audit_log : str | Path | None, optional
        JSONL audit log path, by default None.

    Returns
    -------
    MergeRunResult
        Run result with matches and outcome.

    Raises
    ------
    FileNotFoundError
        If the incoming file does not exist.
    MergeError
        If the merge fails.

    Examples
    --------
        >>> from bibmerge import merge_files
        >>> result = merge_files("new.bib", "refs.bib", "skip")  # doctest: +SKIP
        >>> result.outcome.written_keys
        ['doe2021']
    """
    from bibmerge.engine import MergeConfig, run_merge

    incoming_file = Path(incoming_path)
    if not incoming_file.exists():
        raise FileNotFoundError(f"Incoming file not found: {incoming_path}")

    config = MergeConfig(
        title_threshold=title_threshold,
        author_threshold=author_threshold,
        remove_fields=tuple(remove_fields),
        clean_incoming=clean_incoming,
        audit_log=Path(audit_log) if audit_log is not None else None,
    )

    result = run_merge(read_bib_text(incoming_file), target_path, Resolution(decision), config)

    if not result.success:
        raise MergeError(f"Merge failed: {result.error_message}", target=str(target_path))

    return result
