"""Helper functions and compiled regex patterns for normalization.

This module provides reusable utilities to eliminate boilerplate
and improve performance through pre-compiled regex patterns.
"""

import re
import unicodedata

# Pre-compiled regex patterns
FORMAT_COMMAND_RE = re.compile(
    r"\\(?:emph|textbf|textit|textsc|texttt|textrm|textsf|textsl|underline|mathrm|mathbf|mathit"
    r"|bf|it|em|sc|rm|tt|sf|sl)(?![A-Za-z])\s*"
)
ESCAPE_CHARS_RE = re.compile(r"[{}\\]")
PUNCT_RE = re.compile(r"[^\w\s]")
WHITESPACE_RE = re.compile(r"\s+")
AND_SEPARATOR_RE = re.compile(r"\s+and\s+", re.IGNORECASE)
SUFFIX_RE = re.compile(r"\s+(Jr\.?|Sr\.?|II|III|IV|V)$", re.IGNORECASE)
NAME_PART_SPLIT_RE = re.compile(r"[\s.~\-]+")


# ---------------------------------------------------------------------------
# Text normalization functions
# ---------------------------------------------------------------------------


def strip_accents(text: str) -> str:
    """Remove diacritical marks for cross-locale matching.

    Parameters
    ----------
    text : str
        Input text with potential diacritics.

    Returns
    -------
    str
        Text with diacritical marks removed.
    """
    nfd = unicodedata.normalize("NFD", text)
    stripped = "".join(c for c in nfd if unicodedata.category(c) != "Mn")
    return unicodedata.normalize("NFC", stripped)


def strip_markup(text: str) -> str:
    """Remove LaTeX formatting from a field value.

    Drops font and emphasis commands such as ``\\emph`` and the escape
    characters ``{``, ``}`` and ``\\``. Every other command keeps its
    letters, so ``{\\TeX}book`` becomes ``TeXbook`` and ``{\\o}`` becomes
    ``o``. Case is preserved.

    Parameters
    ----------
    text : str
        Raw field value.

    Returns
    -------
    str
        Value without formatting markup.
    """
    text = unicodedata.normalize("NFKC", text)
    text = FORMAT_COMMAND_RE.sub("", text)
    return ESCAPE_CHARS_RE.sub("", text)


def normalize_text_for_matching(text: str) -> str:
    """Full text normalization for fuzzy comparison.

    Applies markup stripping, casefold, accent stripping, punctuation
    removal and whitespace collapsing. Punctuation is deleted rather than
    replaced by a space, so ``"N.L.P."`` and ``"NLP"`` normalize alike.

    Parameters
    ----------
    text : str
        Raw text to normalize.

    Returns
    -------
    str
        Normalized text ready for matching.
    """
    if not text:
        return ""
    text = strip_markup(text)
    text = text.casefold()
    text = strip_accents(text)
    text = PUNCT_RE.sub("", text)
    return WHITESPACE_RE.sub(" ", text).strip()
