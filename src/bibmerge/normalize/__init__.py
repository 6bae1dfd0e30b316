"""Field normalization for duplicate matching."""

from bibmerge.normalize._fields import (
    normalize_author,
    normalize_doi,
    normalize_title,
    split_author_names,
)
from bibmerge.normalize._helpers import normalize_text_for_matching, strip_accents, strip_markup

__all__ = [
    "normalize_author",
    "normalize_doi",
    "normalize_text_for_matching",
    "normalize_title",
    "split_author_names",
    "strip_accents",
    "strip_markup",
]
