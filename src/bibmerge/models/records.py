"""Bibliographic record data models for bibmerge.

Records are created fresh by every parse call and never mutated; merge
operations only select subsets of them for re-serialization.
"""

from dataclasses import dataclass, field
from typing import Any

SCHEMA_VERSION = "1.0.0"


@dataclass(frozen=True, slots=True)
class FieldSpan:
    """Location of one field assignment inside a record.

    Attributes
    ----------
    name : str
        Lowercase field name (e.g., 'title', 'doi').
    value : str
        Trimmed field value with the outer delimiters removed.
    start : int
        Offset of the field name, relative to the record's raw text.
    end : int
        Offset just past the value and its trailing comma, relative to the
        record's raw text.
    """

    name: str
    value: str
    start: int
    end: int


@dataclass(frozen=True, slots=True)
class BibRecord:
    """One bibliographic entry.

    Attributes
    ----------
    key : str
        Citation key. Unique within a well-formed file, but not across
        merges; duplication across files is what matching detects.
    entry_type : str
        Lowercase entry category (e.g., 'article', 'book').
    fields : dict[str, str]
        Lowercase field name to trimmed value. When a field is repeated,
        the last occurrence wins.
    raw_text : str
        Exact original text of the entry, from '@' to the closing brace.
    span : tuple[int, int]
        ``[start, end)`` offsets of ``raw_text`` in the parsed source.
    field_spans : tuple[FieldSpan, ...]
        Every field assignment in source order, repeats included.
    """

    key: str
    entry_type: str
    fields: dict[str, str] = field(hash=False)
    raw_text: str
    span: tuple[int, int] = (0, 0)
    field_spans: tuple[FieldSpan, ...] = field(default=(), compare=False, repr=False)

    def get(self, name: str, default: str | None = None) -> str | None:
        """Return a field value by (case-insensitive) name."""
        return self.fields.get(name.lower(), default)

    @property
    def doi(self) -> str | None:
        return self.fields.get("doi")

    @property
    def title(self) -> str | None:
        return self.fields.get("title")

    @property
    def author(self) -> str | None:
        return self.fields.get("author")

    @property
    def year(self) -> str | None:
        return self.fields.get("year")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization.

        Returns
        -------
        dict[str, Any]
            Record with schema version, span as a list and fields sorted
            by name.
        """
        return {
            "schema_version": SCHEMA_VERSION,
            "key": self.key,
            "entry_type": self.entry_type,
            "fields": dict(sorted(self.fields.items())),
            "span": list(self.span),
            "raw_text": self.raw_text,
        }
