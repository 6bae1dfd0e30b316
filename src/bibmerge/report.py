"""Match reports for display and logging."""

import json
import os
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from bibmerge.matching import Match, rank_matches
from bibmerge.utils import get_iso_timestamp

SUMMARY_LIMIT = 3


def match_to_dict(match: Match) -> dict[str, Any]:
    """Serialize one match (both keys, kind, score, reason)."""
    return match.to_dict()


def format_match_summary(matches: Sequence[Match], limit: int | None = SUMMARY_LIMIT) -> str:
    """Format matches as the text shown before asking for a decision.

    Parameters
    ----------
    matches : Sequence[Match]
        Detected matches. They are listed strongest first: exact kinds
        before fuzzy ones, higher scores earlier.
    limit : int | None, optional
        Maximum number of matches listed individually (default: 3). None
        lists them all.

    Returns
    -------
    str
        ``Found N potential duplicate(s):`` followed by one bullet per
        listed match and ``... and K more`` when some were left out.

    Examples
    --------
        >>> print(format_match_summary(matches))  # doctest: +SKIP
        Found 1 potential duplicate(s):

        • smith2020 <-> smith2020 (Same citation key: smith2020)
    """
    ranked = rank_matches(matches)
    shown = ranked if limit is None else ranked[:limit]
    lines = [f"Found {len(matches)} potential duplicate(s):", ""]
    lines.extend(f"• {m.incoming.key} <-> {m.existing.key} ({m.reason})" for m in shown)

    hidden = len(matches) - len(shown)
    if hidden > 0:
        lines.append(f"... and {hidden} more")
    return "\n".join(lines)


def build_match_report(matches: Sequence[Match]) -> dict[str, Any]:
    """Build the JSON report document, matches ranked strongest first."""
    return {
        "generated_at": get_iso_timestamp(),
        "total": len(matches),
        "matches": [match_to_dict(m) for m in rank_matches(matches)],
    }


def write_match_report(matches: Sequence[Match], path: Path) -> dict[str, Any]:
    """Write the JSON match report atomically.

    Parameters
    ----------
    matches : Sequence[Match]
        Detected matches.
    path : Path
        Output file. Parent directories are created as needed.

    Returns
    -------
    dict[str, Any]
        The report that was written.
    """
    report = build_match_report(matches)

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_name(f".{path.name}.tmp")
    try:
        with temp_path.open("w", encoding="utf-8") as f:
            json.dump(report, f, indent=2, ensure_ascii=False)
            f.write("\n")
            f.flush()
            os.fsync(f.fileno())
        temp_path.replace(path)
    except OSError:
        temp_path.unlink(missing_ok=True)
        raise

    return report
