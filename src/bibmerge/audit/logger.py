"""Structured audit logger for JSONL event logging.

Provides append-only structured event logging to JSONL files with
a persistent file handle for efficient I/O.
"""

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

from bibmerge.audit.models import LogEvent
from bibmerge.utils import get_iso_timestamp

__all__ = ["AuditLogger"]


class AuditLogger:
    """JSONL audit logger with persistent file handle.

    Writes structured log events to a JSONL file (one JSON object per line).
    Events are append-only and flushed after each write for durability.

    Attributes
    ----------
    run_id : str
        Unique run identifier.
    log_path : Path
        Path to JSONL log file.
    current_stage : str | None
        Current stage name for context.
    """

    def __init__(self, run_id: str, log_path: Path) -> None:
        """Initialize audit logger and open file handle.

        Parameters
        ----------
        run_id : str
            Unique run identifier.
        log_path : Path
            Path to JSONL log file.
        """
        self.run_id = run_id
        self.log_path = Path(log_path)
        self.current_stage: str | None = None

        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = self.log_path.open("a", encoding="utf-8")

    def __enter__(self) -> "AuditLogger":
        """Enter context manager."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Exit context manager and close file."""
        self.close()

    def close(self) -> None:
        """Flush and close the log file handle."""
        if not self._file.closed:
            self._file.flush()
            self._file.close()

    def set_stage(self, stage: str | None) -> None:
        """Set current stage context."""
        self.current_stage = stage

    def event(
        self,
        event_type: str,
        data: dict[str, Any] | None = None,
        level: str = "INFO",
        stage: str | None = None,
        key: str | None = None,
    ) -> None:
        """Write structured event to log.

        Parameters
        ----------
        event_type : str
            Event type identifier (e.g., "stage_started").
        data : dict[str, Any] | None, optional
            Event-specific data payload.
        level : str, optional
            Log level ("DEBUG", "INFO", "WARN", "ERROR").
        stage : str | None, optional
            Stage identifier, uses current_stage if not provided.
        key : str | None, optional
            Citation key if event is record-specific.
        """
        if data is None:
            data = {}

        if stage is None:
            stage = self.current_stage

        log_event = LogEvent(
            ts=get_iso_timestamp(),
            run_id=self.run_id,
            level=level,
            event=event_type,
            data=data,
            stage=stage,
            key=key,
        )

        self._write_event(log_event)

    def _write_event(self, event: LogEvent) -> None:
        event_dict = asdict(event)
        json.dump(event_dict, self._file, ensure_ascii=False, separators=(",", ":"))
        self._file.write("\n")
        self._file.flush()

    def run_started(
        self,
        command: list[str],
        parameters: dict[str, Any],
        environment: dict[str, Any] | None = None,
    ) -> None:
        """Log run_started event.

        Parameters
        ----------
        command : list[str]
            Command name and its main arguments.
        parameters : dict[str, Any]
            Configuration parameters.
        environment : dict[str, Any] | None, optional
            Python, platform and dependency versions.
        """
        data: dict[str, Any] = {"command": command, "parameters": parameters}
        if environment is not None:
            data["environment"] = environment
        self.event("run_started", data=data)

    def run_finished(
        self,
        status: str,
        duration_seconds: float,
        records_processed: int | None = None,
    ) -> None:
        """Log run_finished event.

        Parameters
        ----------
        status : str
            Run status ("success" or "failed").
        duration_seconds : float
            Total execution time in seconds.
        records_processed : int | None, optional
            Incoming records considered.
        """
        data: dict[str, Any] = {
            "status": status,
            "duration_seconds": duration_seconds,
        }
        if records_processed is not None:
            data["records_processed"] = records_processed

        self.event("run_finished", data=data)

    def stage_started(self, stage: str) -> None:
        """Log stage_started event and make ``stage`` the current stage."""
        self.set_stage(stage)
        self.event("stage_started", stage=stage)

    def stage_finished(
        self,
        stage: str,
        duration_seconds: float,
        counters: dict[str, int] | None = None,
        status: str = "success",
    ) -> None:
        """Log stage_finished event.

        Parameters
        ----------
        stage : str
            Stage identifier.
        duration_seconds : float
            Stage execution time in seconds.
        counters : dict[str, int] | None, optional
            Stage-specific counters.
        status : str, optional
            "success", or "failed" when the stage raised.
        """
        data: dict[str, Any] = {"status": status, "duration_seconds": duration_seconds}
        if counters:
            data["counters"] = counters

        self.event("stage_finished", data=data, stage=stage)

    def records_parsed(self, source: str, count: int, stage: str | None = None) -> None:
        """Log records_parsed event.

        Parameters
        ----------
        source : str
            Which text was parsed ("incoming" or "existing").
        count : int
            Number of well-formed records extracted.
        stage : str | None, optional
            Stage identifier.
        """
        self.event("records_parsed", data={"source": source, "count": count}, stage=stage)

    def duplicate_found(self, match: dict[str, Any], stage: str | None = None) -> None:
        """Log duplicate_found event for one serialized match.

        The incoming key is also set as the event's record key.
        """
        self.event(
            "duplicate_found",
            data=match,
            stage=stage,
            key=match.get("incoming_key"),
        )

    def resolution_applied(
        self,
        decision: str,
        status: str,
        written_keys: list[str],
        removed_keys: list[str],
        stage: str | None = None,
    ) -> None:
        """Log resolution_applied event.

        Parameters
        ----------
        decision : str
            Resolution chosen ("skip", "replace", "keep-both", "cancel"),
            or "append" when no duplicates were found.
        status : str
            Resulting merge status.
        written_keys : list[str]
            Incoming keys added to the target.
        removed_keys : list[str]
            Existing keys dropped from the target.
        stage : str | None, optional
            Stage identifier.
        """
        self.event(
            "resolution_applied",
            data={
                "decision": decision,
                "status": status,
                "written_keys": written_keys,
                "removed_keys": removed_keys,
            },
            stage=stage,
        )

    def file_written(
        self,
        path: str,
        sha256: str,
        stage: str | None = None,
        bytes_written: int | None = None,
        record_count: int | None = None,
    ) -> None:
        """Log file_written event.

        Parameters
        ----------
        path : str
            Path of the written file.
        sha256 : str
            SHA256 hash of the new contents.
        stage : str | None, optional
            Stage that wrote the file.
        bytes_written : int | None, optional
            Size in bytes of the UTF-8 contents.
        record_count : int | None, optional
            Number of records in the file.
        """
        data: dict[str, Any] = {"path": path, "sha256": sha256}
        if bytes_written is not None:
            data["bytes"] = bytes_written
        if record_count is not None:
            data["record_count"] = record_count

        self.event("file_written", data=data, stage=stage)

    def error(
        self,
        exception_class: str,
        message: str,
        stage: str | None = None,
        key: str | None = None,
        traceback: str | None = None,
    ) -> None:
        """Log error event.

        Parameters
        ----------
        exception_class : str
            Exception class name.
        message : str
            Error message.
        stage : str | None, optional
            Stage where error occurred.
        key : str | None, optional
            Citation key if error is record-specific.
        traceback : str | None, optional
            Formatted stack trace.
        """
        data: dict[str, Any] = {
            "exception_class": exception_class,
            "message": message,
        }
        if traceback is not None:
            data["traceback"] = traceback

        self.event("error", data=data, stage=stage, level="ERROR", key=key)
