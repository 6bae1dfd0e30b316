"""Tests for field stripping."""

import pytest

from bibmerge.clean import DEFAULT_REMOVE_FIELDS, clean_bibtex
from bibmerge.parse import parse_bibtex

FETCHED = (
    "@article{smith2020,\n"
    "  title = {Graph Methods},\n"
    "  file = {/home/me/papers/smith.pdf},\n"
    "  year = {2020},\n"
    "  annotation = {Read twice}\n"
    "}"
)


@pytest.mark.unit
def test_default_fields() -> None:
    """Test annotation and file are stripped by default."""
    assert DEFAULT_REMOVE_FIELDS == ("annotation", "file")


@pytest.mark.unit
def test_clean_removes_whole_lines() -> None:
    """Test removed fields take their line with them."""
    cleaned = clean_bibtex(FETCHED)

    assert cleaned == "@article{smith2020,\n  title = {Graph Methods},\n  year = {2020},\n}"
    assert parse_bibtex(cleaned)[0].fields == {"title": "Graph Methods", "year": "2020"}


@pytest.mark.unit
def test_clean_field_names_case_insensitive() -> None:
    """Test field names match regardless of case."""
    cleaned = clean_bibtex("@misc{k,\n  FILE = {a.pdf},\n  year = {2020}\n}", ["File"])

    assert "a.pdf" not in cleaned
    assert parse_bibtex(cleaned)[0].fields == {"year": "2020"}


@pytest.mark.unit
def test_clean_custom_fields_keep_defaults() -> None:
    """Test an explicit list replaces the defaults."""
    cleaned = clean_bibtex(FETCHED, ["annotation"])

    fields = parse_bibtex(cleaned)[0].fields
    assert "file" in fields
    assert "annotation" not in fields


@pytest.mark.unit
def test_clean_with_no_fields_returns_input() -> None:
    """Test an empty remove list leaves the text untouched."""
    text = "% note\n" + FETCHED

    assert clean_bibtex(text, []) == text


@pytest.mark.unit
def test_clean_leaves_untouched_entries_verbatim() -> None:
    """Test entries without removable fields are kept byte for byte."""
    plain = "@book{k,\n  title   = {Odd   Spacing},\n  year=1999\n}"

    assert clean_bibtex(plain) == plain


@pytest.mark.unit
def test_clean_joins_entries_and_drops_outside_text() -> None:
    """Test several entries are joined by a blank line without comments."""
    text = "% header\n@misc{a,\n  file = {x}\n}\nstray\n@misc{b,\n  year = {1}\n}\n"

    cleaned = clean_bibtex(text)

    assert cleaned == "@misc{a,\n}\n\n@misc{b,\n  year = {1}\n}"


@pytest.mark.unit
def test_clean_one_line_entry() -> None:
    """Test a field on the header line is removed without touching the key."""
    cleaned = clean_bibtex("@misc{k, file = {x}, year = {2020}}")

    record = parse_bibtex(cleaned)[0]
    assert record.key == "k"
    assert record.fields == {"year": "2020"}
