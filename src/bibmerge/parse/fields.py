"""Field-list parsing for BibTeX entry bodies.

Handles ``name = {value}``, ``name = "value"``, bare numbers/macros and
``#`` concatenation. Parsing is best effort: text that does not look like a
field assignment is skipped up to the next top-level comma.
"""

import re

from bibmerge.models import FieldSpan

FIELD_NAME_PATTERN = re.compile(r"([A-Za-z_][\w\-:.+]*)\s*=\s*")

_BARE_VALUE_STOP = frozenset(',#{}"')


def parse_fields(content: str, offset: int = 0) -> list[FieldSpan]:
    """Parse a field list into field spans.

    Parameters
    ----------
    content : str
        Text following the citation key comma, without the entry's closing
        brace.
    offset : int, optional
        Added to every span offset so spans are relative to the enclosing
        record text, by default 0.

    Returns
    -------
    list[FieldSpan]
        Field assignments in source order, repeats included.
    """
    spans: list[FieldSpan] = []
    n = len(content)
    i = 0

    while i < n:
        while i < n and (content[i].isspace() or content[i] == ","):
            i += 1
        if i >= n:
            break

        match = FIELD_NAME_PATTERN.match(content, i)
        if not match:
            i = _skip_to_next_comma(content, i)
            continue

        start = i
        value, i = _parse_value(content, match.end())

        # Consume the trailing comma so removing the span leaves no orphan
        j = i
        while j < n and content[j].isspace():
            j += 1
        if j < n and content[j] == ",":
            i = j + 1

        spans.append(
            FieldSpan(
                name=match.group(1).lower(),
                value=value.strip(),
                start=offset + start,
                end=offset + i,
            )
        )

    return spans


def _parse_value(content: str, start: int) -> tuple[str, int]:
    parts: list[str] = []
    n = len(content)
    i = start

    while True:
        while i < n and content[i] in " \t\r\n":
            i += 1
        if i >= n:
            break

        if content[i] == "{":
            part, i = _parse_braced_value(content, i)
        elif content[i] == '"':
            part, i = _parse_quoted_value(content, i)
        else:
            part, i = _parse_bare_value(content, i)
        parts.append(part)

        j = i
        while j < n and content[j].isspace():
            j += 1
        if j < n and content[j] == "#":
            i = j + 1
            continue
        break

    return "".join(parts), i


def _parse_braced_value(content: str, start: int) -> tuple[str, int]:
    brace_depth = 0
    value_chars: list[str] = []
    i = start

    while i < len(content):
        char = content[i]
        if char == "\\" and i + 1 < len(content):
            value_chars.append(content[i : i + 2])
            i += 2
            continue
        if char == "{":
            brace_depth += 1
            if brace_depth > 1:
                value_chars.append(char)
        elif char == "}":
            brace_depth -= 1
            if brace_depth == 0:
                return "".join(value_chars), i + 1
            value_chars.append(char)
        else:
            value_chars.append(char)
        i += 1

    return "".join(value_chars), i


def _parse_quoted_value(content: str, start: int) -> tuple[str, int]:
    i = start + 1  # skip opening quote
    brace_depth = 0
    value_chars: list[str] = []

    while i < len(content):
        char = content[i]
        if char == "\\" and i + 1 < len(content):
            value_chars.append(content[i : i + 2])
            i += 2
            continue
        if char == '"' and brace_depth == 0:
            return "".join(value_chars), i + 1
        if char == "{":
            brace_depth += 1
        elif char == "}" and brace_depth > 0:
            brace_depth -= 1
        value_chars.append(char)
        i += 1

    return "".join(value_chars), i


def _parse_bare_value(content: str, start: int) -> tuple[str, int]:
    value_chars: list[str] = []
    i = start

    while i < len(content) and content[i] not in _BARE_VALUE_STOP and not content[i].isspace():
        value_chars.append(content[i])
        i += 1

    return "".join(value_chars), i


def _skip_to_next_comma(content: str, start: int) -> int:
    depth = 0
    i = start

    while i < len(content):
        char = content[i]
        if char == "{":
            depth += 1
        elif char == "}" and depth > 0:
            depth -= 1
        elif char == "," and depth == 0:
            return i + 1
        i += 1

    return max(i, start + 1)
