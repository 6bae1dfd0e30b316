"""Merge resolution: apply a duplicate decision and write BibTeX text."""

from bibmerge.merge.bib_writer import append_block, format_records, remove_records
from bibmerge.merge.models import MergeOutcome, MergeStatus, Resolution
from bibmerge.merge.policy import append_all, apply_resolution

__all__ = [
    "MergeOutcome",
    "MergeStatus",
    "Resolution",
    "append_all",
    "append_block",
    "apply_resolution",
    "format_records",
    "remove_records",
]
