"""Common utility functions for bibmerge."""

from bibmerge.utils.hashing import calculate_string_sha256, format_sha256
from bibmerge.utils.timestamps import get_iso_timestamp

__all__ = [
    "get_iso_timestamp",
    "calculate_string_sha256",
    "format_sha256",
]
