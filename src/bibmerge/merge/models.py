"""Data models for merge resolution."""

from dataclasses import asdict, dataclass, field
from enum import StrEnum
from typing import Any


class Resolution(StrEnum):
    """User-chosen strategy for handling detected duplicates.

    One decision applies uniformly to every match of a run.

    Attributes
    ----------
    SKIP : str
        Drop matched incoming records, append the rest.
    REPLACE : str
        Drop matched existing records, append every incoming record.
    KEEP_BOTH : str
        Append every incoming record, duplicates included.
    CANCEL : str
        Produce nothing; the target must be left untouched.
    """

    SKIP = "skip"
    REPLACE = "replace"
    KEEP_BOTH = "keep-both"
    CANCEL = "cancel"


class MergeStatus(StrEnum):
    """Caller-visible outcome of a merge.

    ``CANCELLED``, ``NOTHING_TO_ADD`` and ``ALL_DUPLICATES`` all mean the
    target file is left untouched; they differ only in the message shown.
    """

    APPENDED = "appended"
    SKIPPED = "skipped"
    REPLACED = "replaced"
    KEPT_BOTH = "kept_both"
    CANCELLED = "cancelled"
    NOTHING_TO_ADD = "nothing_to_add"
    ALL_DUPLICATES = "all_duplicates"


@dataclass(frozen=True)
class MergeOutcome:
    """Result of applying a resolution (or a plain append).

    Attributes
    ----------
    status : MergeStatus
        What happened.
    text : str | None
        Complete new target text, or None when nothing must be written.
    written_keys : list[str]
        Keys of incoming records added to the target, in order.
    removed_keys : list[str]
        Keys of existing records dropped from the target, in order.
    message : str
        Human-readable summary.
    """

    status: MergeStatus
    text: str | None
    written_keys: list[str] = field(default_factory=list)
    removed_keys: list[str] = field(default_factory=list)
    message: str = ""

    @property
    def changed(self) -> bool:
        """Whether the target must be rewritten."""
        return self.text is not None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization (text omitted)."""
        data = asdict(self)
        data.pop("text")
        data["status"] = str(self.status)
        data["changed"] = self.changed
        return data
