"""BibTeX parsing.

Main entry points:
- parse_bibtex: Parse raw text into BibRecord objects
- extract_keys: Citation keys of every well-formed entry
"""

from bibmerge.parse.bibtex import extract_keys, find_entry_end, parse_bibtex
from bibmerge.parse.fields import parse_fields

__all__ = [
    "extract_keys",
    "find_entry_end",
    "parse_bibtex",
    "parse_fields",
]
