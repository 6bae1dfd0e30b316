"""Command-line interface for bibmerge.

Provides CLI commands for parsing, duplicate detection, merging and
cleaning BibTeX bibliographies.
"""

import importlib.metadata
import json
import sys
from collections.abc import Sequence
from pathlib import Path

import click

from bibmerge.matching import Match
from bibmerge.merge import MergeStatus, Resolution

__all__ = ["cli"]

try:
    __version__ = importlib.metadata.version("bibmerge")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.1.0"  # Fallback for development

ASK = "ask"
RESOLUTION_CHOICES = [r.value for r in Resolution]
NO_CHANGE_STATUSES = {
    MergeStatus.CANCELLED,
    MergeStatus.NOTHING_TO_ADD,
    MergeStatus.ALL_DUPLICATES,
}
REMOVE_FIELD_HELP = "Field to strip from entries; repeatable (default: annotation, file)"


def _prompt_for_resolution(matches: Sequence[Match]) -> str:
    """Show the detected duplicates and ask how to proceed."""
    from bibmerge.report import format_match_summary

    click.echo(format_match_summary(matches), err=True)
    click.echo("", err=True)
    return click.prompt(
        "How would you like to proceed?",
        type=click.Choice(RESOLUTION_CHOICES),
        default=Resolution.CANCEL.value,
        err=True,
    )


@click.group()
@click.version_option(version=__version__, prog_name="bibmerge")
def cli() -> None:
    """Duplicate-aware merging of BibTeX bibliographies.

    Use 'bibmerge COMMAND --help' for command-specific help.
    """


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    required=True,
    help="Output JSONL file path",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
def parse(input_path: str, output: str, verbose: bool) -> None:
    """Parse a BibTeX file to JSONL (one record per line).

    Examples
    --------
        bibmerge parse references.bib -o records.jsonl
    """
    from bibmerge import parse_file, write_jsonl

    try:
        if verbose:
            click.echo(f"Parsing file: {input_path}", err=True)

        records = parse_file(input_path)

        if verbose:
            click.echo(f"Found {len(records)} records", err=True)
            click.echo(f"Writing to: {output}", err=True)

        write_jsonl(records, output)

        click.secho(f"✓ Successfully wrote {len(records)} records to {output}", fg="green")

    except Exception as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)


@cli.command()
@click.argument("incoming_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("target_path", type=click.Path(dir_okay=False))
@click.option("--title-threshold", type=float, default=0.85, help="Title threshold (default: 0.85)")
@click.option(
    "--author-threshold", type=float, default=0.80, help="Author threshold (default: 0.80)"
)
@click.option("--json", "as_json", is_flag=True, help="Print the match report as JSON")
def detect(
    incoming_path: str,
    target_path: str,
    title_threshold: float,
    author_threshold: float,
    as_json: bool,
) -> None:
    """Report duplicates between INCOMING_PATH and TARGET_PATH.

    Nothing is written. A missing TARGET_PATH is treated as empty.

    Examples
    --------
        bibmerge detect new.bib refs.bib
        bibmerge detect new.bib refs.bib --json
    """
    from bibmerge.api import detect_duplicates
    from bibmerge.report import build_match_report, format_match_summary
    from bibmerge.storage import read_bib_text

    try:
        matches = detect_duplicates(
            read_bib_text(incoming_path),
            read_bib_text(target_path),
            title_threshold=title_threshold,
            author_threshold=author_threshold,
        )
    except Exception as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(build_match_report(matches), indent=2, ensure_ascii=False))
    elif matches:
        click.echo(format_match_summary(matches, limit=None))
    else:
        click.secho("✓ No duplicates found", fg="green")


@cli.command()
@click.argument("incoming_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("target_path", type=click.Path(dir_okay=False))
@click.option(
    "--on-duplicate",
    type=click.Choice([ASK, *RESOLUTION_CHOICES]),
    default=ASK,
    show_default=True,
    help="Resolution applied when duplicates are found",
)
@click.option("--title-threshold", type=float, default=0.85, help="Title threshold (default: 0.85)")
@click.option(
    "--author-threshold", type=float, default=0.80, help="Author threshold (default: 0.80)"
)
@click.option(
    "--remove-field",
    "remove_fields",
    multiple=True,
    help=REMOVE_FIELD_HELP,
)
@click.option("--no-clean", is_flag=True, help="Keep every field of incoming entries")
@click.option("--audit-log", type=click.Path(dir_okay=False), help="JSONL audit log path")
@click.option("--report", type=click.Path(dir_okay=False), help="JSON match report path")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
def merge(
    incoming_path: str,
    target_path: str,
    on_duplicate: str,
    title_threshold: float,
    author_threshold: float,
    remove_fields: tuple[str, ...],
    no_clean: bool,
    audit_log: str | None,
    report: str | None,
    verbose: bool,
) -> None:
    """Merge INCOMING_PATH into the bibliography TARGET_PATH.

    Duplicates are checked by citation key, DOI, title similarity and
    author similarity within the same year. When any are found the
    resolution comes from --on-duplicate, or is asked for interactively.

    Examples
    --------
        bibmerge merge new.bib refs.bib
        bibmerge merge new.bib refs.bib --on-duplicate skip
        bibmerge merge new.bib refs.bib --on-duplicate replace --report matches.json
    """
    from bibmerge.clean import DEFAULT_REMOVE_FIELDS
    from bibmerge.engine import MergeConfig, run_merge
    from bibmerge.storage import read_bib_text

    try:
        config = MergeConfig(
            title_threshold=title_threshold,
            author_threshold=author_threshold,
            remove_fields=remove_fields or DEFAULT_REMOVE_FIELDS,
            clean_incoming=not no_clean,
            audit_log=Path(audit_log) if audit_log else None,
            report_path=Path(report) if report else None,
        )

        if verbose:
            click.echo(f"Merging {incoming_path} into {target_path}", err=True)
            click.echo(f"  On duplicate: {on_duplicate}", err=True)
            click.echo(f"  Title threshold: {config.title_threshold}", err=True)
            click.echo(f"  Author threshold: {config.author_threshold}", err=True)
            if config.clean_incoming:
                click.echo(f"  Removing fields: {', '.join(config.remove_fields)}", err=True)

        decide = _prompt_for_resolution if on_duplicate == ASK else Resolution(on_duplicate)
        result = run_merge(read_bib_text(incoming_path), target_path, decide, config)

    except Exception as e:
        click.secho(f"✗ Error: {e}", fg="red", err=True)
        if verbose:
            import traceback

            click.echo(traceback.format_exc(), err=True)
        sys.exit(1)

    if not result.success:
        click.secho(f"✗ Merge failed: {result.error_message}", fg="red", err=True)
        sys.exit(1)

    if verbose:
        click.echo(f"  Incoming records: {result.incoming_count}", err=True)
        click.echo(f"  Existing records: {result.existing_count}", err=True)
        click.echo(f"  Duplicates found: {len(result.matches)}", err=True)
        if result.decision:
            click.echo(f"  Decision: {result.decision}", err=True)

    outcome = result.outcome
    if outcome is None or outcome.status in NO_CHANGE_STATUSES:
        message = outcome.message if outcome is not None else "Nothing to do"
        click.secho(f"{message}; {target_path} unchanged", fg="yellow")
    else:
        click.secho(f"✓ {outcome.message} ({target_path})", fg="green")


@cli.command()
@click.argument("target_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--title-threshold", type=float, default=0.85, help="Title threshold (default: 0.85)")
@click.option(
    "--author-threshold", type=float, default=0.80, help="Author threshold (default: 0.80)"
)
@click.option("--report", type=click.Path(dir_okay=False), help="JSON match report path")
def scan(
    target_path: str,
    title_threshold: float,
    author_threshold: float,
    report: str | None,
) -> None:
    """List duplicate entries within TARGET_PATH.

    Exits with status 0 whether or not duplicates are found.

    Examples
    --------
        bibmerge scan refs.bib
    """
    from bibmerge.engine import MergeConfig, run_scan
    from bibmerge.report import format_match_summary

    try:
        config = MergeConfig(
            title_threshold=title_threshold,
            author_threshold=author_threshold,
            report_path=Path(report) if report else None,
        )
    except ValueError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

    result = run_scan(target_path, config)

    if not result.success:
        click.secho(f"✗ Scan failed: {result.error_message}", fg="red", err=True)
        sys.exit(1)

    if result.matches:
        click.echo(format_match_summary(result.matches, limit=None))
    else:
        click.secho(f"✓ No duplicates found in {result.record_count} records", fg="green")


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    help="Output file (default: standard output)",
)
@click.option(
    "--remove-field",
    "remove_fields",
    multiple=True,
    help=REMOVE_FIELD_HELP,
)
def clean(input_path: str, output: str | None, remove_fields: tuple[str, ...]) -> None:
    """Strip unwanted fields from every entry of INPUT_PATH.

    Examples
    --------
        bibmerge clean export.bib -o clean.bib
        bibmerge clean export.bib --remove-field abstract --remove-field file
    """
    from bibmerge.clean import DEFAULT_REMOVE_FIELDS, clean_bibtex
    from bibmerge.storage import read_bib_text, write_bib_text

    try:
        cleaned = clean_bibtex(read_bib_text(input_path), remove_fields or DEFAULT_REMOVE_FIELDS)

        if output is None:
            click.echo(cleaned)
        else:
            write_bib_text(output, cleaned + "\n" if cleaned else "")
            click.secho(f"✓ Wrote cleaned entries to {output}", fg="green")

    except Exception as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
