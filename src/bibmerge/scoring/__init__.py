"""String similarity scoring used by duplicate matching."""

from bibmerge.scoring.similarity import edit_distance, similarity

__all__ = [
    "edit_distance",
    "similarity",
]
