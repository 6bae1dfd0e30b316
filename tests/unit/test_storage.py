"""Tests for bibliography file storage."""

from pathlib import Path

import pytest

from bibmerge.storage import (
    BibFileError,
    MergeInProgressError,
    path_lock,
    read_bib_text,
    write_bib_text,
)


@pytest.mark.unit
def test_read_missing_file_is_empty(tmp_path: Path) -> None:
    """Test a missing target reads as an empty bibliography."""
    assert read_bib_text(tmp_path / "absent.bib") == ""


@pytest.mark.unit
def test_read_strips_byte_order_mark(tmp_path: Path) -> None:
    """Test a UTF-8 BOM is not part of the text."""
    path = tmp_path / "bom.bib"
    path.write_bytes("\ufeff@misc{k}\n".encode())

    assert read_bib_text(path) == "@misc{k}\n"


@pytest.mark.unit
def test_read_keeps_crlf_line_endings(tmp_path: Path) -> None:
    """Test Windows line endings are not translated on read."""
    path = tmp_path / "crlf.bib"
    path.write_bytes(b"@misc{k,\r\n  year = {2020}\r\n}\r\n")

    assert read_bib_text(path) == "@misc{k,\r\n  year = {2020}\r\n}\r\n"


@pytest.mark.unit
def test_read_invalid_utf8_raises(tmp_path: Path) -> None:
    """Test undecodable bytes surface as BibFileError."""
    path = tmp_path / "latin1.bib"
    path.write_bytes(b"@misc{k, author = {G\xf6del}}")

    with pytest.raises(BibFileError, match="Cannot read"):
        read_bib_text(path)


@pytest.mark.unit
def test_write_creates_parents_and_leaves_no_temp_file(tmp_path: Path) -> None:
    """Test atomic write produces only the target file."""
    path = tmp_path / "nested" / "refs.bib"

    write_bib_text(path, "@misc{k}\n")

    assert path.read_text(encoding="utf-8") == "@misc{k}\n"
    assert [p.name for p in path.parent.iterdir()] == ["refs.bib"]


@pytest.mark.unit
def test_write_preserves_line_endings(tmp_path: Path) -> None:
    """Test text is written without newline translation."""
    path = tmp_path / "crlf.bib"

    write_bib_text(path, "@misc{a}\r\n\r\n@misc{b}\r\n")

    assert path.read_bytes() == b"@misc{a}\r\n\r\n@misc{b}\r\n"


@pytest.mark.unit
def test_write_overwrites_existing(tmp_path: Path) -> None:
    """Test the new contents fully replace the old ones."""
    path = tmp_path / "refs.bib"
    path.write_text("old contents that are longer\n", encoding="utf-8")

    write_bib_text(path, "new\n")

    assert read_bib_text(path) == "new\n"


@pytest.mark.unit
def test_write_into_directory_path_raises(tmp_path: Path) -> None:
    """Test a target that is a directory cannot be written."""
    with pytest.raises(BibFileError, match="Cannot write"):
        write_bib_text(tmp_path, "@misc{k}\n")


@pytest.mark.unit
def test_path_lock_rejects_second_holder(tmp_path: Path) -> None:
    """Test a second lock on the same path fails while the first is held."""
    target = tmp_path / "refs.bib"

    with path_lock(target) as resolved:
        assert resolved == target.resolve()
        with pytest.raises(MergeInProgressError):
            with path_lock(tmp_path / "." / "refs.bib"):
                pass

    with path_lock(target):
        pass


@pytest.mark.unit
def test_path_lock_released_after_error(tmp_path: Path) -> None:
    """Test the lock is released when the body raises."""
    target = tmp_path / "refs.bib"

    with pytest.raises(RuntimeError):
        with path_lock(target):
            raise RuntimeError("boom")

    with path_lock(target):
        pass


@pytest.mark.unit
def test_path_lock_independent_paths(tmp_path: Path) -> None:
    """Test different files can be locked at the same time."""
    with path_lock(tmp_path / "a.bib"), path_lock(tmp_path / "b.bib"):
        pass

