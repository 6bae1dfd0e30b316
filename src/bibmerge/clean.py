"""Field stripping for fetched BibTeX.

Exported references often carry fields nobody wants in a shared
bibliography (local attachment paths, reading notes). ``clean_bibtex``
removes such fields from every entry and leaves the rest of each entry
exactly as written.
"""

from collections.abc import Iterable

from bibmerge.merge.bib_writer import RECORD_SEPARATOR
from bibmerge.models import BibRecord
from bibmerge.parse import parse_bibtex

DEFAULT_REMOVE_FIELDS: tuple[str, ...] = ("annotation", "file")


def clean_bibtex(text: str, remove_fields: Iterable[str] = DEFAULT_REMOVE_FIELDS) -> str:
    """Remove unwanted fields from every entry.

    Parameters
    ----------
    text : str
        Raw BibTeX.
    remove_fields : Iterable[str], optional
        Field names to drop, matched case-insensitively. Defaults to
        ``annotation`` and ``file``.

    Returns
    -------
    str
        Cleaned entries joined by a blank line. Text outside entries is not
        kept. When ``remove_fields`` is empty the input is returned as is.

    Examples
    --------
        >>> clean_bibtex("@misc{k,\\n  file = {a.pdf},\\n  year = {2020}\\n}")
        '@misc{k,\\n  year = {2020}\\n}'
    """
    names = {name.strip().lower() for name in remove_fields if name.strip()}
    if not names:
        return text

    return RECORD_SEPARATOR.join(clean_record(record, names) for record in parse_bibtex(text))


def clean_record(record: BibRecord, remove_fields: set[str]) -> str:
    """Return the record's raw text without the given (lowercase) fields."""
    raw = record.raw_text
    doomed = [span for span in record.field_spans if span.name in remove_fields]
    if not doomed:
        return raw

    parts: list[str] = []
    cursor = 0
    for span in doomed:
        start = _line_start(raw, span.start)
        parts.append(raw[cursor:start])
        cursor = span.end
    parts.append(raw[cursor:])
    return "".join(parts)


def _line_start(raw: str, start: int) -> int:
    # Take the field's indentation and preceding newline along with it
    while start > 0 and raw[start - 1] in " \t":
        start -= 1
    if start > 0 and raw[start - 1] == "\n":
        start -= 1
    return start
