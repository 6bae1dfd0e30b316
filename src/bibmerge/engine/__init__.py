"""Merge workflow engine.

This package provides the entry points for merging fetched BibTeX into a
bibliography file and for scanning a file for internal duplicates,
including configuration and result types.
"""

from bibmerge.engine.config import MergeConfig, MergeRunResult, ScanRunResult
from bibmerge.engine.runner import Decider, run_merge, run_scan

__all__ = [
    "Decider",
    "MergeConfig",
    "MergeRunResult",
    "ScanRunResult",
    "run_merge",
    "run_scan",
]
