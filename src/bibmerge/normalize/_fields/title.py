"""Title normalization."""

from .._helpers import normalize_text_for_matching


def normalize_title(title: str | None) -> str:
    """Normalize a title for fuzzy comparison.

    Parameters
    ----------
    title : str | None
        Raw title field value.

    Returns
    -------
    str
        Lowercase title without markup or punctuation, whitespace
        collapsed. Empty when the title is missing.
    """
    if not title:
        return ""
    return normalize_text_for_matching(title)
