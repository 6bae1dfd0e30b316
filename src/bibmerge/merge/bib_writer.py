"""BibTeX text writer for merged bibliographies.

Records are always written from their original ``raw_text``, so entries
that survive a merge are byte-identical to their source.
"""

from collections.abc import Sequence

from bibmerge.models import BibRecord

RECORD_SEPARATOR = "\n\n"


def format_records(records: Sequence[BibRecord], separator: str = RECORD_SEPARATOR) -> str:
    """Serialize records from their raw text.

    Parameters
    ----------
    records : Sequence[BibRecord]
        Records to write.
    separator : str, optional
        Text placed between records, by default a blank line.

    Returns
    -------
    str
        Raw entries joined by ``separator`` (empty for no records).
    """
    return separator.join(record.raw_text for record in records)


def append_block(existing_text: str, block: str) -> str:
    """Append a block of entries after existing text.

    The existing text is kept verbatim; a newline is added when it does not
    already end with one, then a blank line separates it from the block.

    Parameters
    ----------
    existing_text : str
        Current bibliography text (may be empty).
    block : str
        Serialized entries to add.

    Returns
    -------
    str
        Combined text ending with a newline.
    """
    if not block:
        return existing_text
    if not existing_text:
        return block + "\n"

    if not existing_text.endswith("\n"):
        existing_text += "\n"
    return existing_text + "\n" + block + "\n"


def remove_records(text: str, records: Sequence[BibRecord]) -> str:
    """Cut records out of the text they were parsed from.

    Each record's span is removed together with the whitespace that follows
    it. Everything else, including comments and ``@string`` definitions
    between entries, is kept.

    Parameters
    ----------
    text : str
        Source text the records were parsed from.
    records : Sequence[BibRecord]
        Records to remove; their spans must refer to ``text``.

    Returns
    -------
    str
        Text without the records. When anything was removed, trailing
        whitespace is collapsed to a single newline.
    """
    spans = sorted({record.span for record in records})
    if not spans:
        return text

    parts: list[str] = []
    cursor = 0
    for start, end in spans:
        if start < cursor:
            continue
        parts.append(text[cursor:start])
        cursor = end
        while cursor < len(text) and text[cursor].isspace():
            cursor += 1
    parts.append(text[cursor:])

    result = "".join(parts)
    stripped = result.rstrip()
    return stripped + "\n" if stripped else ""
