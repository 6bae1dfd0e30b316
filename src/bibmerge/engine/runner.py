"""Merge workflow runner.

Chains the merge stages against a target bibliography file:

    clean   : strip unwanted fields from the incoming text
    parse   : read the target and parse both texts
    detect  : find duplicates between incoming and existing records
    report  : write the JSON match report (optional)
    resolve : ask for a decision and apply it
    write   : atomically rewrite the target when the outcome has text

The target path is locked for the whole run, so two merges into the same
file never overlap within a process. Failures are logged and returned in
the result rather than raised.
"""

import time
import traceback
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path

from bibmerge.audit import AuditLogger, generate_run_id, get_environment_info
from bibmerge.clean import clean_bibtex
from bibmerge.engine.config import MergeConfig, MergeRunResult, ScanRunResult
from bibmerge.matching import Match, detect, scan
from bibmerge.merge import MergeOutcome, Resolution, append_all, apply_resolution
from bibmerge.parse import extract_keys, parse_bibtex
from bibmerge.report import write_match_report
from bibmerge.storage import MergeInProgressError, path_lock, read_bib_text, write_bib_text
from bibmerge.utils import calculate_string_sha256

Decider = Callable[[Sequence[Match]], Resolution | str]

APPEND_DECISION = "append"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


@contextmanager
def _stage(logger: AuditLogger | None, name: str) -> Iterator[dict[str, int]]:
    """Log stage start/finish around a block; the block fills the counters.

    An exception raised by the block is logged as an ``error`` event of
    this stage, then re-raised. ``stage_finished`` is logged either way and
    the logger's stage context is cleared.
    """
    counters: dict[str, int] = {}
    started = time.perf_counter()
    status = "success"
    if logger:
        logger.stage_started(name)
    try:
        yield counters
    except Exception as e:
        status = "failed"
        _log_failure(logger, e, stage=name)
        raise
    finally:
        if logger:
            logger.stage_finished(name, time.perf_counter() - started, counters, status=status)
            logger.set_stage(None)


@contextmanager
def _optional_logger(config: MergeConfig) -> Iterator[AuditLogger | None]:
    if config.audit_log is None:
        yield None
        return
    with AuditLogger(run_id=generate_run_id(), log_path=config.audit_log) as logger:
        yield logger


def _describe(error: Exception) -> str:
    return f"{type(error).__name__}: {error}"


def _log_failure(logger: AuditLogger | None, error: Exception, stage: str | None = None) -> str:
    if logger:
        logger.error(
            exception_class=type(error).__name__,
            message=str(error),
            stage=stage,
            traceback=traceback.format_exc(),
        )
    return _describe(error)


def _decide(decide: Decider | Resolution | str, matches: Sequence[Match]) -> Resolution:
    choice = decide(matches) if callable(decide) else decide
    return Resolution(choice)


# ---------------------------------------------------------------------------
# Merge stages
# ---------------------------------------------------------------------------


def _merge_locked(
    incoming_text: str,
    target: Path,
    decide: Decider | Resolution | str,
    config: MergeConfig,
    logger: AuditLogger | None,
    result: MergeRunResult,
) -> None:
    """Run every merge stage, filling ``result`` as stages complete."""
    with _stage(logger, "clean") as counters:
        if config.clean_incoming and config.remove_fields:
            incoming_text = clean_bibtex(incoming_text, config.remove_fields)
            counters["fields_removed"] = len(config.remove_fields)

    with _stage(logger, "parse") as counters:
        existing_text = read_bib_text(target)
        incoming = parse_bibtex(incoming_text)
        existing = parse_bibtex(existing_text)
        result.incoming_count = len(incoming)
        result.existing_count = len(existing)
        counters["incoming_records"] = len(incoming)
        counters["existing_records"] = len(existing)
        if logger:
            logger.records_parsed("incoming", len(incoming))
            logger.records_parsed("existing", len(existing))

    with _stage(logger, "detect") as counters:
        matches = detect(incoming, existing, config.thresholds)
        result.matches = matches
        counters["matches"] = len(matches)
        if logger:
            for match in matches:
                logger.duplicate_found(match.to_dict())

    if config.report_path is not None:
        with _stage(logger, "report") as counters:
            write_match_report(matches, config.report_path)
            counters["matches"] = len(matches)

    with _stage(logger, "resolve") as counters:
        outcome: MergeOutcome
        if matches:
            decision = _decide(decide, matches)
            outcome = apply_resolution(incoming_text, existing_text, matches, decision)
            result.decision = str(decision)
        else:
            outcome = append_all(incoming_text, existing_text)
            result.decision = APPEND_DECISION
        result.outcome = outcome
        counters["written_keys"] = len(outcome.written_keys)
        counters["removed_keys"] = len(outcome.removed_keys)
        if logger:
            logger.resolution_applied(
                decision=result.decision,
                status=str(outcome.status),
                written_keys=outcome.written_keys,
                removed_keys=outcome.removed_keys,
            )

    if outcome.text is None:
        return

    with _stage(logger, "write") as counters:
        write_bib_text(target, outcome.text)
        result.written = True
        record_count = len(extract_keys(outcome.text))
        counters["records"] = record_count
        if logger:
            logger.file_written(
                path=str(target),
                sha256=calculate_string_sha256(outcome.text),
                bytes_written=len(outcome.text.encode("utf-8")),
                record_count=record_count,
            )


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------


def run_merge(
    incoming_text: str,
    target: Path | str,
    decide: Decider | Resolution | str = Resolution.CANCEL,
    config: MergeConfig | None = None,
) -> MergeRunResult:
    """Merge incoming BibTeX into a target bibliography file.

    Parameters
    ----------
    incoming_text : str
        Raw BibTeX of the newly fetched records.
    target : Path | str
        Bibliography file to merge into. A missing file is treated as
        empty and created on write.
    decide : Decider | Resolution | str, optional
        Either a fixed resolution or a callable receiving the matches and
        returning one. Only consulted when duplicates are found. Defaults
        to ``cancel``, which leaves the target untouched.
    config : MergeConfig | None, optional
        Run configuration. If None, uses defaults.

    Returns
    -------
    MergeRunResult
        Counts, matches, outcome and whether the file was written. On
        failure ``success`` is False and ``error_message`` is set.

    Examples
    --------
        >>> from bibmerge.engine import run_merge
        >>> result = run_merge(new_text, "refs.bib", decide="skip")  # doctest: +SKIP
        >>> result.outcome.status
        <MergeStatus.SKIPPED: 'skipped'>
    """
    target = Path(target)
    config = config or MergeConfig()
    result = MergeRunResult(success=False, target=str(target))
    start_time = time.perf_counter()

    with _optional_logger(config) as logger:
        if logger:
            logger.run_started(
                command=["merge", str(target)],
                parameters=config.to_dict(),
                environment=get_environment_info(),
            )

        try:
            with path_lock(target):
                _merge_locked(incoming_text, target, decide, config, logger, result)
            result.success = True
        except MergeInProgressError as e:
            result.error_message = _log_failure(logger, e)
        except Exception as e:
            # already logged by the stage that raised
            result.error_message = _describe(e)

        if logger:
            logger.run_finished(
                status="success" if result.success else "failed",
                duration_seconds=time.perf_counter() - start_time,
                records_processed=result.incoming_count,
            )

    return result


def run_scan(target: Path | str, config: MergeConfig | None = None) -> ScanRunResult:
    """Find duplicate pairs within a single bibliography file.

    Parameters
    ----------
    target : Path | str
        Bibliography file to scan. A missing file scans as empty.
    config : MergeConfig | None, optional
        Thresholds, audit log and report path. If None, uses defaults.

    Returns
    -------
    ScanRunResult
        Record count and matches ordered by position in the file.
    """
    target = Path(target)
    config = config or MergeConfig()
    result = ScanRunResult(success=False, target=str(target))
    start_time = time.perf_counter()

    with _optional_logger(config) as logger:
        if logger:
            logger.run_started(
                command=["scan", str(target)],
                parameters=config.to_dict(),
                environment=get_environment_info(),
            )

        try:
            with _stage(logger, "parse") as counters:
                records = parse_bibtex(read_bib_text(target))
                result.record_count = len(records)
                counters["records"] = len(records)
                if logger:
                    logger.records_parsed("existing", len(records))

            with _stage(logger, "scan") as counters:
                result.matches = scan(records, config.thresholds)
                counters["matches"] = len(result.matches)
                if logger:
                    for match in result.matches:
                        logger.duplicate_found(match.to_dict())

            if config.report_path is not None:
                with _stage(logger, "report"):
                    write_match_report(result.matches, config.report_path)

            result.success = True
        except Exception as e:
            # already logged by the stage that raised
            result.error_message = _describe(e)

        if logger:
            logger.run_finished(
                status="success" if result.success else "failed",
                duration_seconds=time.perf_counter() - start_time,
                records_processed=result.record_count,
            )

    return result
