"""Integration tests for ChecksumFileAdapter."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from partialsum.domain.errors import ChecksumFileError
from partialsum.infrastructure.adapters.checksum_file import ChecksumFileAdapter


def test_write_then_read(tmp_path: Path):
    """Test that written text reads back unchanged."""
    target = tmp_path / "sums.txt"
    text = "/data/a.txt\t50\tabcd\n"

    ChecksumFileAdapter().write_text(str(target), text)

    assert ChecksumFileAdapter().read_text(str(target)) == text


def test_write_creates_parent_directories(tmp_path: Path):
    """Test that missing parent directories are created."""
    target = tmp_path / "nested" / "dir" / "sums.txt"

    ChecksumFileAdapter().write_text(str(target), "x\n")

    assert target.read_text() == "x\n"


def test_write_replaces_existing_file_without_leftovers(tmp_path: Path):
    """Test that an atomic write replaces the file and removes its temp file."""
    target = tmp_path / "sums.txt"
    target.write_text("old\n")

    ChecksumFileAdapter().write_text(str(target), "new\n")

    assert target.read_text() == "new\n"
    assert [p.name for p in tmp_path.iterdir()] == ["sums.txt"]


def test_read_missing_file(tmp_path: Path):
    """Test that a missing checksum file raises ChecksumFileError."""
    with pytest.raises(ChecksumFileError, match="does not exist"):
        ChecksumFileAdapter().read_text(str(tmp_path / "absent.txt"))


def test_read_directory(tmp_path: Path):
    """Test that a directory is not accepted as a checksum file."""
    with pytest.raises(ChecksumFileError, match="not a regular file"):
        ChecksumFileAdapter().read_text(str(tmp_path))


def test_read_invalid_utf8(tmp_path: Path):
    """Test that undecodable bytes raise ChecksumFileError."""
    target = tmp_path / "sums.txt"
    target.write_bytes(b"/data/\xff\t1\tab\n")

    with pytest.raises(ChecksumFileError, match="UTF-8"):
        ChecksumFileAdapter().read_text(str(target))


def test_stdio(monkeypatch):
    """Test that '-' reads stdin and writes stdout."""
    monkeypatch.setattr("sys.stdin", io.StringIO("from stdin\n"))
    out = io.StringIO()
    monkeypatch.setattr("sys.stdout", out)

    adapter = ChecksumFileAdapter()
    assert adapter.read_text("-") == "from stdin\n"
    adapter.write_text("-", "to stdout\n")

    assert out.getvalue() == "to stdout\n"
