"""BibTeX record parser.

Entries: @<entrytype>{citekey, field = {value}, ...}
Special entries (@STRING, @PREAMBLE, @COMMENT) are skipped.
Reference: http://www.bibtex.org/Format/

Entry extraction is an explicit scanner with two states, OUTSIDE and
IN_ENTRY(depth). Outside an entry the scanner looks for the next ``@type{``
marker; inside it counts brace depth (and top-level quoted values) until
the depth returns to zero. Malformed entries never abort the parse: they
are dropped and scanning resumes right after their ``@`` marker.
"""

import re
from enum import Enum

from bibmerge.models import BibRecord
from bibmerge.parse.fields import parse_fields

PARSER_NAME = "bibtex_parser"
PARSER_VERSION = "2.0.0"

ENTRY_START_PATTERN = re.compile(r"@\s*([A-Za-z]\w*)\s*\{")
CITEKEY_PATTERN = re.compile(r"[^\s,{}\"=#]+")

SPECIAL_ENTRY_TYPES = frozenset({"string", "preamble", "comment"})


class ScanState(Enum):
    """Scanner states for entry extraction."""

    OUTSIDE = "outside"
    IN_ENTRY = "in_entry"


def parse_bibtex(text: str) -> list[BibRecord]:
    """Parse BibTeX text into records.

    Parameters
    ----------
    text : str
        Raw bibliographic text. May be empty or contain no entries.

    Returns
    -------
    list[BibRecord]
        Well-formed records in source order. Malformed entries (missing
        key, unterminated braces) are left out without raising.

    Examples
    --------
        >>> records = parse_bibtex("@article{smith2020, title={A}, year={2020}}")
        >>> records[0].key, records[0].fields["year"]
        ('smith2020', '2020')
    """
    records: list[BibRecord] = []
    if not text:
        return records

    pos = 0
    while True:
        entry_start = text.find("@", pos)
        if entry_start == -1:
            break

        header = ENTRY_START_PATTERN.match(text, entry_start)
        if not header:
            pos = entry_start + 1
            continue

        entry_end = find_entry_end(text, header.end())
        if entry_end == -1:
            # Unterminated: drop it and look for the next marker inside it
            pos = entry_start + 1
            continue

        pos = entry_end
        entry_type = header.group(1).lower()
        if entry_type in SPECIAL_ENTRY_TYPES:
            continue

        record = _build_record(text, entry_start, header.end(), entry_end, entry_type)
        if record is not None:
            records.append(record)

    return records


def find_entry_end(text: str, body_start: int) -> int:
    """Find the end of an entry whose opening brace precedes ``body_start``.

    Parameters
    ----------
    text : str
        Complete source text.
    body_start : int
        Offset just after the entry's opening brace.

    Returns
    -------
    int
        Offset just past the matching closing brace, or -1 if the entry is
        never closed.
    """
    state = ScanState.IN_ENTRY
    depth = 1
    in_quotes = False
    i = body_start
    n = len(text)

    while i < n and state is ScanState.IN_ENTRY:
        char = text[i]

        if char == "\\":
            i += 2
            continue

        if char == '"' and depth == 1:
            in_quotes = not in_quotes
        elif char == "{":
            depth += 1
        elif char == "}":
            if in_quotes and depth == 1:
                pass  # unbalanced brace inside a quoted value
            else:
                depth -= 1
                if depth == 0:
                    state = ScanState.OUTSIDE
        i += 1

    return i if state is ScanState.OUTSIDE else -1


def _build_record(
    text: str,
    entry_start: int,
    body_start: int,
    entry_end: int,
    entry_type: str,
) -> BibRecord | None:
    body = text[body_start : entry_end - 1]

    comma = body.find(",")
    key = (body if comma == -1 else body[:comma]).strip()
    if not key or not CITEKEY_PATTERN.fullmatch(key):
        return None

    raw_text = text[entry_start:entry_end]
    if comma == -1:
        field_spans = []
    else:
        fields_offset = body_start - entry_start + comma + 1
        field_spans = parse_fields(body[comma + 1 :], offset=fields_offset)

    return BibRecord(
        key=key,
        entry_type=entry_type,
        fields={span.name: span.value for span in field_spans},
        raw_text=raw_text,
        span=(entry_start, entry_end),
        field_spans=tuple(field_spans),
    )


def extract_keys(text: str) -> list[str]:
    """Return the citation keys of every well-formed entry, in order."""
    return [record.key for record in parse_bibtex(text)]
