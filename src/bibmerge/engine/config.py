"""Merge configuration and result dataclasses."""

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from bibmerge.clean import DEFAULT_REMOVE_FIELDS
from bibmerge.matching import (
    DEFAULT_AUTHOR_THRESHOLD,
    DEFAULT_TITLE_THRESHOLD,
    Match,
    MatchThresholds,
)
from bibmerge.merge import MergeOutcome


@dataclass
class MergeConfig:
    """Configuration for a merge or scan run.

    Attributes
    ----------
    title_threshold : float
        Title similarity must be strictly greater than this (default: 0.85).
    author_threshold : float
        Author similarity must be strictly greater than this (default: 0.80).
    remove_fields : tuple[str, ...]
        Fields stripped from incoming entries before matching.
    clean_incoming : bool
        Whether to strip ``remove_fields`` from incoming text.
    audit_log : Path | None
        JSONL audit log. If None, no events are written.
    report_path : Path | None
        JSON match report. If None, no report is written.
    """

    title_threshold: float = DEFAULT_TITLE_THRESHOLD
    author_threshold: float = DEFAULT_AUTHOR_THRESHOLD
    remove_fields: tuple[str, ...] = DEFAULT_REMOVE_FIELDS
    clean_incoming: bool = True
    audit_log: Path | None = None
    report_path: Path | None = None

    def __post_init__(self) -> None:
        """Normalize field names and paths, then validate."""
        if not 0.0 <= self.title_threshold <= 1.0:
            raise ValueError(f"title_threshold must be in [0, 1], got {self.title_threshold}")

        if not 0.0 <= self.author_threshold <= 1.0:
            raise ValueError(f"author_threshold must be in [0, 1], got {self.author_threshold}")

        if isinstance(self.remove_fields, str):
            raise ValueError("remove_fields must be a sequence of field names, not a string")
        self.remove_fields = tuple(
            name.strip().lower() for name in self.remove_fields if name.strip()
        )

        if self.audit_log is not None:
            self.audit_log = Path(self.audit_log)

        if self.report_path is not None:
            self.report_path = Path(self.report_path)

    @property
    def thresholds(self) -> MatchThresholds:
        """Matching thresholds derived from this config."""
        return MatchThresholds(title=self.title_threshold, author=self.author_threshold)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data = asdict(self)
        data["remove_fields"] = list(self.remove_fields)
        data["audit_log"] = str(self.audit_log) if self.audit_log is not None else None
        data["report_path"] = str(self.report_path) if self.report_path is not None else None
        return data


@dataclass
class MergeRunResult:
    """Results from a merge run.

    Attributes
    ----------
    success : bool
        Whether the run completed without error.
    target : str
        Target bibliography path.
    incoming_count : int
        Records parsed from the incoming text (after cleaning).
    existing_count : int
        Records parsed from the target before the merge.
    matches : list[Match]
        Duplicates detected between incoming and existing records.
    outcome : MergeOutcome | None
        Resolution outcome; None when the run failed before resolving.
    decision : str | None
        Resolution chosen, "append" when no duplicates were found.
    written : bool
        Whether the target file was rewritten.
    error_message : str | None
        Error message if failed.
    """

    success: bool
    target: str
    incoming_count: int = 0
    existing_count: int = 0
    matches: list[Match] = field(default_factory=list)
    outcome: MergeOutcome | None = None
    decision: str | None = None
    written: bool = False
    error_message: str | None = None

    @property
    def message(self) -> str:
        """Human-readable summary of the run."""
        if not self.success:
            return self.error_message or "Merge failed"
        return self.outcome.message if self.outcome is not None else ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "success": self.success,
            "target": self.target,
            "incoming_count": self.incoming_count,
            "existing_count": self.existing_count,
            "matches": [m.to_dict() for m in self.matches],
            "outcome": self.outcome.to_dict() if self.outcome is not None else None,
            "decision": self.decision,
            "written": self.written,
            "error_message": self.error_message,
        }


@dataclass
class ScanRunResult:
    """Results from a whole-file duplicate scan.

    Attributes
    ----------
    success : bool
        Whether the scan completed without error.
    target : str
        Scanned bibliography path.
    record_count : int
        Records parsed from the file.
    matches : list[Match]
        Duplicate pairs found within the file.
    error_message : str | None
        Error message if failed.
    """

    success: bool
    target: str
    record_count: int = 0
    matches: list[Match] = field(default_factory=list)
    error_message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "success": self.success,
            "target": self.target,
            "record_count": self.record_count,
            "matches": [m.to_dict() for m in self.matches],
            "error_message": self.error_message,
        }
