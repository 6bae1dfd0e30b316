"""Tests for schema validation of audit events and match reports."""

import json
from pathlib import Path

import jsonschema
import pytest

from bibmerge.engine import MergeConfig, run_merge
from bibmerge.matching import detect
from bibmerge.parse import parse_bibtex
from bibmerge.report import build_match_report

_SCHEMAS_DIR = Path(__file__).parent.parent.parent / "schemas"


@pytest.fixture(scope="module")
def event_schema() -> dict:
    """Load log event JSON schema."""
    with (_SCHEMAS_DIR / "log_event.schema.json").open() as f:
        return json.load(f)


@pytest.fixture(scope="module")
def report_schema() -> dict:
    """Load match report JSON schema."""
    with (_SCHEMAS_DIR / "match_report.schema.json").open() as f:
        return json.load(f)


@pytest.mark.unit
def test_generated_events_validate(
    tmp_path: Path,
    event_schema: dict,
    existing_bib: str,
) -> None:
    """Test events from a real merge run validate against schema."""
    target = tmp_path / "refs.bib"
    target.write_text(existing_bib, encoding="utf-8")
    log_path = tmp_path / "events.jsonl"
    incoming = "@article{smith2020, title = {Graph Methods for Citation Analysis}}"

    result = run_merge(incoming, target, "skip", MergeConfig(audit_log=log_path))

    assert result.success
    with log_path.open(encoding="utf-8") as f:
        lines = [line for line in f if line.strip()]
    assert lines
    for line in lines:
        jsonschema.validate(instance=json.loads(line), schema=event_schema)


@pytest.mark.unit
def test_generated_report_validates(report_schema: dict, existing_bib: str) -> None:
    """Test a report built from detected matches validates."""
    incoming = parse_bibtex(
        "@article{new, title = {Graph Methods for Citation Analysis.}}\n"
        "@misc{knuth1984, title = {Other}}\n"
        "@misc{d, doi = {10.1000/GRAPH.2020}}"
    )
    matches = detect(incoming, parse_bibtex(existing_bib))

    report = build_match_report(matches)

    assert report["total"] == 3
    jsonschema.validate(instance=report, schema=report_schema)


@pytest.mark.unit
def test_invalid_data_rejected_by_schema(event_schema: dict, report_schema: dict) -> None:
    """Test schemas reject unknown levels, kinds, and missing fields."""
    with pytest.raises(jsonschema.ValidationError):
        jsonschema.validate(instance={"ts": "x", "run_id": "x"}, schema=event_schema)

    with pytest.raises(jsonschema.ValidationError):
        jsonschema.validate(
            instance={
                "ts": "2026-01-01T00:00:00Z",
                "run_id": "r",
                "level": "LOUD",
                "event": "run_started",
                "data": {},
                "stage": None,
                "key": None,
            },
            schema=event_schema,
        )

    with pytest.raises(jsonschema.ValidationError):
        jsonschema.validate(
            instance={
                "generated_at": "2026-01-01T00:00:00Z",
                "total": 1,
                "matches": [
                    {
                        "incoming_key": "a",
                        "existing_key": "b",
                        "kind": "fuzzy",
                        "score": 0.5,
                        "reason": "",
                    }
                ],
            },
            schema=report_schema,
        )
