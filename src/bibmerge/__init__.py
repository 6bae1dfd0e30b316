"""Duplicate-aware merging of BibTeX bibliographies.

This package provides:
- Data models (bibmerge.models): BibRecord and field spans
- Parsing (bibmerge.parse): brace-aware BibTeX entry scanner
- Normalization (bibmerge.normalize): title, author and DOI keys
- Scoring (bibmerge.scoring): edit-distance similarity
- Matching (bibmerge.matching): prioritized duplicate rules
- Merge (bibmerge.merge): resolution policies and BibTeX writer
- Clean (bibmerge.clean): field stripping for fetched entries
- Storage (bibmerge.storage): atomic bibliography file I/O
- Engine (bibmerge.engine): merge workflow orchestration
- Audit (bibmerge.audit): logging and traceability
- CLI (bibmerge.cli): command-line interface
- Public API (bibmerge.api): high-level convenience functions
"""

__version__ = "0.1.0"
__license__ = "MIT"

from bibmerge.api import (
    MergeError,
    detect_duplicates,
    merge_files,
    merge_texts,
    parse_file,
    scan_text,
    write_jsonl,
)
from bibmerge.matching import Match, MatchKind
from bibmerge.merge import MergeOutcome, MergeStatus, Resolution
from bibmerge.models import BibRecord
from bibmerge.parse import parse_bibtex

__all__ = [
    "__version__",
    "__license__",
    "BibRecord",
    "Match",
    "MatchKind",
    "MergeError",
    "MergeOutcome",
    "MergeStatus",
    "Resolution",
    "detect_duplicates",
    "merge_files",
    "merge_texts",
    "parse_bibtex",
    "parse_file",
    "scan_text",
    "write_jsonl",
]
