"""Author-list normalization.

BibTeX joins multiple authors with ``and``; exports from other tools often
use commas instead (``"J. Doe, J. Roe"``). Both are flattened into one
token stream of given-name initials followed by family names, so
``"Jane Doe and John Roe"`` and ``"J. Doe, J. Roe"`` compare as equal.
"""

from .._helpers import (
    AND_SEPARATOR_RE,
    NAME_PART_SPLIT_RE,
    SUFFIX_RE,
    normalize_text_for_matching,
    strip_markup,
)

_OTHERS = frozenset({"others", "et al", "et al."})


def normalize_author(author: str | None) -> str:
    """Normalize an author list for fuzzy comparison.

    Parameters
    ----------
    author : str | None
        Raw author field value.

    Returns
    -------
    str
        Space-separated tokens, each name written as its given-name
        initials followed by its family name (e.g., ``"j doe j roe"``).
        Empty when the field is missing.
    """
    if not author:
        return ""

    tokens: list[str] = []
    for name in split_author_names(strip_markup(author)):
        tokens.extend(_name_tokens(name))

    return normalize_text_for_matching(" ".join(tokens))


def split_author_names(authors: str) -> list[str]:
    """Split an author list into individual names.

    Splits on the ``and`` conjunction first. A part is further split on
    commas only when every comma-separated chunk reads like a complete
    ``Given Family`` name; otherwise the comma is taken as the BibTeX
    ``Family, Given`` separator.

    Parameters
    ----------
    authors : str
        Author list with markup already removed.

    Returns
    -------
    list[str]
        Individual names in order, without ``others`` placeholders.
    """
    names: list[str] = []

    for part in AND_SEPARATOR_RE.split(authors.strip()):
        part = part.strip()
        if not part or part.casefold() in _OTHERS:
            continue
        if _is_comma_separated_list(part):
            names.extend(chunk.strip() for chunk in part.split(",") if chunk.strip())
        else:
            names.append(part)

    return names


def _is_comma_separated_list(part: str) -> bool:
    chunks = [chunk.strip() for chunk in part.split(",")]
    if len(chunks) < 2:
        return False

    for chunk in chunks:
        words = chunk.split()
        if len(words) < 2:
            return False
        # A chunk ending in an initial is the given part of "Family, G."
        if len(words[-1].strip(".")) < 2:
            return False

    return True


def _name_tokens(name: str) -> list[str]:
    name = SUFFIX_RE.sub("", name.strip())

    if "," in name:
        chunks = [chunk.strip() for chunk in name.split(",")]
        family = chunks[0]
        # "von Last, Jr, First" keeps the given name in the last chunk
        given = chunks[-1] if len(chunks) > 1 else ""
    else:
        words = name.split()
        if len(words) <= 1:
            family, given = name, ""
        else:
            split = len(words) - 1
            # Lowercase particles ("van", "de") start the family name
            for k in range(1, len(words) - 1):
                if words[k][:1].islower():
                    split = k
                    break
            given = " ".join(words[:split])
            family = " ".join(words[split:])

    family = SUFFIX_RE.sub("", family)
    initials = [part[0] for part in NAME_PART_SPLIT_RE.split(given) if part]

    return initials + family.split()
