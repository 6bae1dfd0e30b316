"""Resolution policy applier.

Turns incoming text, existing text, detected matches and a resolution
decision into the new bibliography text. Both texts are re-parsed here so
filtering always works on records whose spans refer to the given text.
"""

from collections.abc import Sequence

from bibmerge.matching import Match, matched_incoming_keys
from bibmerge.merge.bib_writer import append_block, format_records, remove_records
from bibmerge.merge.models import MergeOutcome, MergeStatus, Resolution
from bibmerge.parse import parse_bibtex


def append_all(incoming_text: str, existing_text: str) -> MergeOutcome:
    """Append every incoming record when no duplicates were found.

    Parameters
    ----------
    incoming_text : str
        Raw incoming BibTeX.
    existing_text : str
        Current target text (empty when the file does not exist).

    Returns
    -------
    MergeOutcome
        ``APPENDED`` with the new text, or ``NOTHING_TO_ADD`` (no text)
        when the incoming text holds no records.
    """
    incoming = parse_bibtex(incoming_text)
    if not incoming:
        return MergeOutcome(
            status=MergeStatus.NOTHING_TO_ADD,
            text=None,
            message="No entries to add",
        )

    return MergeOutcome(
        status=MergeStatus.APPENDED,
        text=append_block(existing_text, format_records(incoming)),
        written_keys=[record.key for record in incoming],
        message=f"Appended {len(incoming)} entr{'y' if len(incoming) == 1 else 'ies'}",
    )


def apply_resolution(
    incoming_text: str,
    existing_text: str,
    matches: Sequence[Match],
    decision: Resolution | str,
) -> MergeOutcome:
    """Apply a resolution decision to all matches of a run.

    Parameters
    ----------
    incoming_text : str
        Raw incoming BibTeX.
    existing_text : str
        Current target text.
    matches : Sequence[Match]
        Matches detected between the two texts. When empty, the decision is
        ignored and every incoming record is appended.
    decision : Resolution | str
        One of ``skip``, ``replace``, ``keep-both`` or ``cancel``.

    Returns
    -------
    MergeOutcome
        New text and the keys written/removed. ``text`` is None for
        ``cancel`` and when ``skip`` leaves nothing to add.

    Raises
    ------
    ValueError
        If ``decision`` is not a known resolution.
    """
    decision = Resolution(decision)

    if not matches:
        return append_all(incoming_text, existing_text)

    if decision is Resolution.CANCEL:
        return MergeOutcome(
            status=MergeStatus.CANCELLED,
            text=None,
            message="Cancelled by user; bibliography left unchanged",
        )

    if decision is Resolution.SKIP:
        return _apply_skip(incoming_text, existing_text, matches)
    if decision is Resolution.REPLACE:
        return _apply_replace(incoming_text, existing_text, matches)
    return _apply_keep_both(incoming_text, existing_text)


def _apply_skip(incoming_text: str, existing_text: str, matches: Sequence[Match]) -> MergeOutcome:
    duplicate_keys = set(matched_incoming_keys(matches))
    remaining = [r for r in parse_bibtex(incoming_text) if r.key not in duplicate_keys]

    if not remaining:
        return MergeOutcome(
            status=MergeStatus.ALL_DUPLICATES,
            text=None,
            message="All selected entries already exist in the bibliography",
        )

    return MergeOutcome(
        status=MergeStatus.SKIPPED,
        text=append_block(existing_text, format_records(remaining)),
        written_keys=[record.key for record in remaining],
        message=f"Skipped {len(duplicate_keys)} duplicate(s), appended {len(remaining)}",
    )


def _apply_replace(
    incoming_text: str,
    existing_text: str,
    matches: Sequence[Match],
) -> MergeOutcome:
    # Dedup happens on the existing side only; incoming records sharing a
    # key are all appended.
    replaced_keys = {match.existing.key for match in matches}
    doomed = [r for r in parse_bibtex(existing_text) if r.key in replaced_keys]
    incoming = parse_bibtex(incoming_text)

    filtered_existing = remove_records(existing_text, doomed)
    return MergeOutcome(
        status=MergeStatus.REPLACED,
        text=append_block(filtered_existing, format_records(incoming)),
        written_keys=[record.key for record in incoming],
        removed_keys=[record.key for record in doomed],
        message=f"Replaced {len(doomed)} existing entr{'y' if len(doomed) == 1 else 'ies'}",
    )


def _apply_keep_both(incoming_text: str, existing_text: str) -> MergeOutcome:
    incoming = parse_bibtex(incoming_text)
    return MergeOutcome(
        status=MergeStatus.KEPT_BOTH,
        text=append_block(existing_text, incoming_text.strip()),
        written_keys=[record.key for record in incoming],
        message=f"Appended {len(incoming)} entries, duplicates kept",
    )
