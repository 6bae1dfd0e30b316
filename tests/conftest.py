"""Pytest configuration and fixtures for test suite."""

import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Add src directory to path for imports
SRC_PATH = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(SRC_PATH))

from bibmerge.models import BibRecord  # noqa: E402
from bibmerge.parse import parse_bibtex  # noqa: E402


def format_entry(key: str, entry_type: str = "article", **fields: str) -> str:
    """Render one BibTeX entry with braced values, one field per line."""
    lines = [f"@{entry_type}{{{key},"]
    lines.extend(f"  {name} = {{{value}}}," for name, value in fields.items())
    lines.append("}")
    return "\n".join(lines)


@pytest.fixture
def make_record() -> Callable[..., BibRecord]:
    """Factory for parsed test records with minimal boilerplate.

    Fields are passed as keyword arguments; the record is produced by the
    real parser so spans and raw text are consistent.
    """

    def _factory(key: str = "key2020", entry_type: str = "article", **fields: str) -> BibRecord:
        records = parse_bibtex(format_entry(key, entry_type, **fields))
        assert len(records) == 1
        return records[0]

    return _factory


@pytest.fixture
def existing_bib() -> str:
    """A small, well-formed bibliography with a comment between entries."""
    return (
        "% Project references\n"
        "@article{smith2020,\n"
        "  author = {Smith, Alice and Jones, Bob},\n"
        "  title = {Graph Methods for Citation Analysis},\n"
        "  year = {2020},\n"
        "  doi = {10.1000/graph.2020}\n"
        "}\n"
        "\n"
        "@book{knuth1984,\n"
        "  author = {Donald E. Knuth},\n"
        "  title = {The {\\TeX}book},\n"
        "  publisher = {Addison-Wesley},\n"
        "  year = 1984\n"
        "}\n"
    )
