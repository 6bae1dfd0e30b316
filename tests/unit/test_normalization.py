"""Tests for title, author and DOI normalization."""

import pytest

from bibmerge.normalize import (
    normalize_author,
    normalize_doi,
    normalize_text_for_matching,
    normalize_title,
    split_author_names,
    strip_accents,
    strip_markup,
)

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_strip_accents() -> None:
    """Test diacritics are removed."""
    assert strip_accents("Gödel Émile naïve") == "Godel Emile naive"


@pytest.mark.unit
def test_strip_markup_keeps_wrapped_letters() -> None:
    """Test formatting commands and escape characters are dropped."""
    assert strip_markup("\\emph{Deep} {L}earning") == "Deep Learning"
    assert strip_markup("\\textbf{Bold} and \\textit{italic}") == "Bold and italic"


@pytest.mark.unit
@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("The {\\TeX}book", "The TeXbook"),
        ("The \\LaTeX{} Companion", "The LaTeX Companion"),
        ("Stra{\\ss}e und S{\\o}ren", "Strasse und Soren"),
        ("\\emphatic claims", "emphatic claims"),
    ],
)
def test_strip_markup_keeps_letter_commands(raw: str, expected: str) -> None:
    """Test commands that produce letters keep those letters."""
    assert strip_markup(raw) == expected


@pytest.mark.unit
def test_texbook_titles_normalize_alike() -> None:
    """Test a braced TeX command and plain text give the same title key."""
    assert normalize_title("The {\\TeX}book") == normalize_title("The TeXbook") == "the texbook"


@pytest.mark.unit
def test_normalize_text_collapses_whitespace_and_punctuation() -> None:
    """Test casefold, punctuation deletion and whitespace collapsing."""
    assert normalize_text_for_matching("  Hello,   World!\n\tAgain.  ") == "hello world again"


@pytest.mark.unit
def test_normalize_text_empty() -> None:
    """Test empty text normalizes to empty."""
    assert normalize_text_for_matching("") == ""


# ---------------------------------------------------------------------------
# Titles
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_title_punctuation_only_difference_normalizes_equal() -> None:
    """Test titles differing only by punctuation normalize identically."""
    assert normalize_title("Deep Learning for NLP") == normalize_title("Deep Learning for N.L.P.")
    assert normalize_title("Deep Learning for NLP") == "deep learning for nlp"


@pytest.mark.unit
def test_title_braces_and_case() -> None:
    """Test protective braces and case differences vanish."""
    assert normalize_title("{BERT}: Pre-training of {Deep} Transformers") == (
        "bert pretraining of deep transformers"
    )


@pytest.mark.unit
@pytest.mark.parametrize("value", [None, "", "   ", "{}"])
def test_title_missing_or_blank(value: str | None) -> None:
    """Test missing or content-free titles normalize to empty."""
    assert normalize_title(value) == ""


# ---------------------------------------------------------------------------
# Authors
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_author_and_list_vs_comma_list() -> None:
    """Test an 'and' list and a comma list of the same people agree."""
    assert normalize_author("Jane Doe and John Roe") == "j doe j roe"
    assert normalize_author("J. Doe, J. Roe") == "j doe j roe"


@pytest.mark.unit
def test_author_family_first_form() -> None:
    """Test 'Family, Given' names reduce to initials plus family."""
    assert normalize_author("Doe, Jane and Roe, John") == "j doe j roe"


@pytest.mark.unit
def test_author_particles_and_suffixes() -> None:
    """Test lowercase particles stay with the family name and suffixes drop."""
    assert normalize_author("Ludwig van Beethoven") == "l van beethoven"
    assert normalize_author("Martin Luther King Jr.") == "m l king"


@pytest.mark.unit
def test_author_hyphenated_given_name() -> None:
    """Test hyphenated given names contribute one initial per part."""
    assert normalize_author("Jean-Paul Sartre") == "j p sartre"


@pytest.mark.unit
def test_author_others_placeholder_ignored() -> None:
    """Test 'and others' does not contribute tokens."""
    assert normalize_author("Jane Doe and others") == "j doe"


@pytest.mark.unit
def test_author_accents_and_markup() -> None:
    """Test accented and LaTeX-escaped names normalize alike."""
    assert normalize_author("Kurt G{\\\"o}del") == normalize_author("Kurt Gödel") == "k godel"


@pytest.mark.unit
@pytest.mark.parametrize("value", [None, ""])
def test_author_missing(value: str | None) -> None:
    """Test missing author lists normalize to empty."""
    assert normalize_author(value) == ""


@pytest.mark.unit
def test_split_author_names_keeps_family_given_commas() -> None:
    """Test a comma followed by initials is a Family, Given separator."""
    assert split_author_names("Doe, J.") == ["Doe, J."]
    assert split_author_names("Doe, Jane and Roe, John") == ["Doe, Jane", "Roe, John"]
    assert split_author_names("Jane Doe, John Roe") == ["Jane Doe", "John Roe"]


# ---------------------------------------------------------------------------
# DOI
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_doi_case_and_whitespace() -> None:
    """Test DOIs are trimmed and casefolded."""
    assert normalize_doi("  10.1000/ABC.Def ") == "10.1000/abc.def"


@pytest.mark.unit
def test_doi_prefix_not_stripped() -> None:
    """Test URL prefixes are kept, so prefixed DOIs differ from bare ones."""
    assert normalize_doi("https://doi.org/10.1/x") != normalize_doi("10.1/x")


@pytest.mark.unit
def test_doi_missing() -> None:
    """Test a missing DOI normalizes to empty."""
    assert normalize_doi(None) == ""
