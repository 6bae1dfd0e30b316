"""Shared data types for bibmerge.

Domain-specific types live closer to their consumers:
- Match types → bibmerge.matching.models
- Merge outcome types → bibmerge.merge.models
- Audit types → bibmerge.audit.models
"""

from bibmerge.models.records import SCHEMA_VERSION, BibRecord, FieldSpan

__all__ = [
    "SCHEMA_VERSION",
    "BibRecord",
    "FieldSpan",
]
