"""Tests for match summaries and JSON reports."""

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from bibmerge.matching import Match, MatchKind
from bibmerge.models import BibRecord
from bibmerge.report import (
    SUMMARY_LIMIT,
    build_match_report,
    format_match_summary,
    write_match_report,
)


@pytest.fixture
def key_matches(make_record: Callable[..., BibRecord]) -> list[Match]:
    """Five key matches, k0..k4."""
    matches = []
    for i in range(5):
        key = f"k{i}"
        reason = f"Same citation key: {key}"
        matches.append(Match(make_record(key), make_record(key), MatchKind.KEY, 1.0, reason))
    return matches


@pytest.mark.unit
def test_summary_lists_first_three(key_matches: list[Match]) -> None:
    """Test the summary shows SUMMARY_LIMIT bullets and a remainder line."""
    summary = format_match_summary(key_matches)

    lines = summary.splitlines()
    assert lines[0] == "Found 5 potential duplicate(s):"
    assert lines[1] == ""
    assert lines[2] == "• k0 <-> k0 (Same citation key: k0)"
    assert len([line for line in lines if line.startswith("•")]) == SUMMARY_LIMIT
    assert lines[-1] == "... and 2 more"


@pytest.mark.unit
def test_summary_without_remainder(key_matches: list[Match]) -> None:
    """Test no remainder line when every match fits."""
    summary = format_match_summary(key_matches[:2])

    assert "more" not in summary
    assert summary.endswith("• k1 <-> k1 (Same citation key: k1)")


@pytest.mark.unit
def test_summary_unlimited(key_matches: list[Match]) -> None:
    """Test limit=None lists every match."""
    summary = format_match_summary(key_matches, limit=None)

    assert summary.count("•") == 5
    assert "more" not in summary


@pytest.mark.unit
def test_build_report(key_matches: list[Match]) -> None:
    """Test the report carries total and serialized matches."""
    report = build_match_report(key_matches[:1])

    assert report["total"] == 1
    assert report["generated_at"].endswith("Z")
    assert report["matches"] == [
        {
            "incoming_key": "k0",
            "existing_key": "k0",
            "kind": "key",
            "score": 1.0,
            "reason": "Same citation key: k0",
        }
    ]


@pytest.mark.unit
def test_write_report(tmp_path: Path, key_matches: list[Match]) -> None:
    """Test the report is written as JSON and returned."""
    path = tmp_path / "reports" / "matches.json"

    report = write_match_report(key_matches, path)

    assert json.loads(path.read_text(encoding="utf-8")) == report
    assert sorted(p.name for p in path.parent.iterdir()) == ["matches.json"]


@pytest.mark.unit
def test_write_empty_report(tmp_path: Path) -> None:
    """Test a report with no matches is still written."""
    path = tmp_path / "matches.json"

    report = write_match_report([], path)

    assert report["total"] == 0
    assert report["matches"] == []


@pytest.mark.unit
def test_summary_and_report_rank_strongest_first(
    make_record: Callable[..., BibRecord], key_matches: list[Match]
) -> None:
    """Test exact matches are listed before fuzzy ones, higher scores first."""
    weak = Match(
        make_record("a"), make_record("b"), MatchKind.TITLE, 0.86, "Similar title (86% match)"
    )
    strong = Match(
        make_record("c"), make_record("d"), MatchKind.TITLE, 0.97, "Similar title (97% match)"
    )
    matches = [weak, strong, key_matches[0]]

    summary = format_match_summary(matches, limit=2)
    report = build_match_report(matches)

    bullets = [line for line in summary.splitlines() if line.startswith("•")]
    assert bullets == [
        "• k0 <-> k0 (Same citation key: k0)",
        "• c <-> d (Similar title (97% match))",
    ]
    assert summary.endswith("... and 1 more")
    assert [m["incoming_key"] for m in report["matches"]] == ["k0", "c", "a"]


@pytest.mark.unit
def test_write_report_failure_leaves_no_temp_file(
    tmp_path: Path, key_matches: list[Match], monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test a failed rename removes the temp file and keeps the old report."""
    path = tmp_path / "matches.json"
    path.write_text("{}\n", encoding="utf-8")

    def fail_replace(self: Path, target: Path) -> Path:
        raise OSError("disk full")

    monkeypatch.setattr(Path, "replace", fail_replace)

    with pytest.raises(OSError, match="disk full"):
        write_match_report(key_matches, path)

    assert sorted(p.name for p in tmp_path.iterdir()) == ["matches.json"]
    assert path.read_text(encoding="utf-8") == "{}\n"
