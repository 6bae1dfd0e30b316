"""Field normalization functions.

Each function is pure and deterministic, and maps a raw field value (or
None) to a comparison key; a missing value maps to the empty string.
"""

from .authors import normalize_author, split_author_names
from .doi import normalize_doi
from .title import normalize_title

__all__ = [
    "normalize_author",
    "normalize_doi",
    "normalize_title",
    "split_author_names",
]
