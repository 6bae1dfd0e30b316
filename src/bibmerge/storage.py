"""Bibliography file storage.

Reads and writes target ``.bib`` files. A missing file reads as an empty
bibliography; writes are atomic (temp file, fsync, rename) so a crash never
leaves a half-written bibliography behind. ``path_lock`` serializes merge
runs against the same file within a process.
"""

import os
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

__all__ = [
    "BibFileError",
    "MergeInProgressError",
    "path_lock",
    "read_bib_text",
    "write_bib_text",
]


class BibFileError(Exception):
    """Raised when a bibliography file cannot be read or written."""


class MergeInProgressError(Exception):
    """Raised when another merge already holds the target file."""


_active_paths: set[Path] = set()
_active_paths_guard = threading.Lock()


def read_bib_text(path: Path | str) -> str:
    """Read a bibliography file.

    Parameters
    ----------
    path : Path | str
        Target file.

    Returns
    -------
    str
        File contents decoded as UTF-8 with line endings untouched (a
        leading BOM is dropped), or an empty string when the file does not
        exist.

    Raises
    ------
    BibFileError
        If the file exists but cannot be read or decoded.
    """
    path = Path(path)
    try:
        # newline="" keeps CRLF so surviving records are rewritten unchanged
        with path.open(encoding="utf-8-sig", newline="") as f:
            return f.read()
    except FileNotFoundError:
        return ""
    except (OSError, UnicodeDecodeError) as e:
        raise BibFileError(f"Cannot read {path}: {e}") from e


def write_bib_text(path: Path | str, text: str) -> None:
    """Write a bibliography file atomically.

    Parameters
    ----------
    path : Path | str
        Target file. Parent directories are created as needed.
    text : str
        Complete new contents.

    Raises
    ------
    BibFileError
        If the file cannot be written.
    """
    path = Path(path)
    temp_path = path.with_name(f".{path.name}.tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with temp_path.open("w", encoding="utf-8", newline="") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        temp_path.replace(path)
    except OSError as e:
        temp_path.unlink(missing_ok=True)
        raise BibFileError(f"Cannot write {path}: {e}") from e


@contextmanager
def path_lock(path: Path | str) -> Iterator[Path]:
    """Hold an in-process lock on a bibliography path.

    Parameters
    ----------
    path : Path | str
        Target file; the lock is keyed on its resolved path.

    Yields
    ------
    Path
        The resolved path.

    Raises
    ------
    MergeInProgressError
        If the path is already locked.
    """
    resolved = Path(path).resolve()
    with _active_paths_guard:
        if resolved in _active_paths:
            raise MergeInProgressError(f"A merge into {resolved} is already in progress")
        _active_paths.add(resolved)
    try:
        yield resolved
    finally:
        with _active_paths_guard:
            _active_paths.discard(resolved)
