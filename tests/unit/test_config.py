"""Tests for merge configuration and run results."""

from pathlib import Path

import pytest

from bibmerge.engine import MergeConfig, MergeRunResult, ScanRunResult
from bibmerge.matching import MatchThresholds
from bibmerge.merge import MergeOutcome, MergeStatus


@pytest.mark.unit
def test_defaults() -> None:
    """Test default thresholds and removed fields."""
    config = MergeConfig()

    assert config.thresholds == MatchThresholds(title=0.85, author=0.80)
    assert config.remove_fields == ("annotation", "file")
    assert config.clean_incoming is True
    assert config.audit_log is None
    assert config.report_path is None


@pytest.mark.unit
@pytest.mark.parametrize(
    ("kwargs", "message"),
    [
        ({"title_threshold": 1.1}, "title_threshold"),
        ({"author_threshold": -0.5}, "author_threshold"),
        ({"remove_fields": "file"}, "remove_fields"),
    ],
)
def test_invalid_values_rejected(kwargs: dict, message: str) -> None:
    """Test out-of-range thresholds and a bare string field list fail."""
    with pytest.raises(ValueError, match=message):
        MergeConfig(**kwargs)


@pytest.mark.unit
def test_remove_fields_normalized() -> None:
    """Test field names are trimmed, lowercased, and blanks dropped."""
    config = MergeConfig(remove_fields=[" File ", "", "ABSTRACT"])

    assert config.remove_fields == ("file", "abstract")


@pytest.mark.unit
def test_paths_coerced_and_serialized(tmp_path: Path) -> None:
    """Test path options become Path objects and serialize as strings."""
    config = MergeConfig(audit_log=str(tmp_path / "a.jsonl"), report_path=tmp_path / "r.json")

    assert isinstance(config.audit_log, Path)
    data = config.to_dict()
    assert data["audit_log"] == str(tmp_path / "a.jsonl")
    assert data["report_path"] == str(tmp_path / "r.json")
    assert data["remove_fields"] == ["annotation", "file"]


@pytest.mark.unit
def test_run_result_message() -> None:
    """Test the run message comes from the outcome or the error."""
    outcome = MergeOutcome(status=MergeStatus.APPENDED, text="x", message="Appended 1 entry")

    assert MergeRunResult(success=True, target="t", outcome=outcome).message == "Appended 1 entry"
    assert MergeRunResult(success=False, target="t", error_message="boom").message == "boom"
    assert MergeRunResult(success=False, target="t").message == "Merge failed"


@pytest.mark.unit
def test_run_result_to_dict() -> None:
    """Test result serialization nests the outcome without its text."""
    outcome = MergeOutcome(status=MergeStatus.CANCELLED, text=None, message="Cancelled")
    result = MergeRunResult(success=True, target="refs.bib", outcome=outcome, decision="cancel")

    data = result.to_dict()

    assert data["outcome"]["status"] == "cancelled"
    assert data["outcome"]["changed"] is False
    assert data["decision"] == "cancel"
    assert data["matches"] == []


@pytest.mark.unit
def test_scan_result_to_dict() -> None:
    """Test scan result serialization."""
    data = ScanRunResult(success=True, target="refs.bib", record_count=4).to_dict()

    assert data == {
        "success": True,
        "target": "refs.bib",
        "record_count": 4,
        "matches": [],
        "error_message": None,
    }
