"""Unit tests for validate_checksums use case."""

from __future__ import annotations

from unittest.mock import Mock

import pytest

from partialsum.application.dto.generate import GenerateRequest
from partialsum.application.dto.validate import ValidateRequest
from partialsum.application.ports.live_tree import FileStat
from partialsum.application.use_cases.generate_checksums import generate_checksums
from partialsum.application.use_cases.validate_checksums import validate_checksums
from partialsum.domain.errors import ChecksumFileError, IoError, MalformedRecord
from partialsum.domain.models.outcome import OutcomeKind
from partialsum.domain.models.sample_window import SampleWindow
from partialsum.domain.services.record_codec import RecordCodec


class MockLiveTree:
    """Mock live tree backed by a dict of path to bytes."""

    def __init__(self, files: dict[str, bytes]) -> None:
        self.files = files
        self.broken: dict[str, IoError] = {}

    def list_files(self, roots):
        roots = [r.rstrip("/") for r in roots]
        for path in sorted(self.files):
            if any(path.startswith(r + "/") for r in roots):
                yield self.stat(path)

    def stat(self, path):
        if path not in self.files:
            return None
        return FileStat(path=path, size=len(self.files[path]), mtime=1_600_000_000)

    def read_window(self, path: str, window: SampleWindow) -> bytes:
        if path in self.broken:
            raise self.broken[path]
        return self.files[path][window.offset : window.end]


def _checksum_file(text: str) -> Mock:
    checksum_file = Mock()
    checksum_file.read_text.return_value = text
    return checksum_file


@pytest.fixture
def tree() -> MockLiveTree:
    return MockLiveTree({"/data/a.txt": b"A" * 50, "/data/b.txt": bytes(range(250)) * 2})


@pytest.fixture
def checksum_text(tree) -> str:
    result = generate_checksums(GenerateRequest(paths=["/data"]), tree)
    return RecordCodec(include_mtime=False).encode_all(result.fingerprints)


def test_validate_all_ok(tree, checksum_text):
    """Test validation of an unchanged tree."""
    checksum_file = _checksum_file(checksum_text)

    result = validate_checksums(ValidateRequest(checksum_file="sums.txt"), tree, checksum_file)

    checksum_file.read_text.assert_called_once_with("sums.txt")
    assert result.succeeded
    assert result.records_checked == 2
    assert result.counts()[OutcomeKind.MATCH] == 2


def test_validate_truncated_file_fails(tree, checksum_text):
    """Test that truncating one file fails only that file."""
    tree.files["/data/b.txt"] = tree.files["/data/b.txt"][:-10]

    result = validate_checksums(ValidateRequest(checksum_file="sums.txt"), tree, _checksum_file(checksum_text))

    assert not result.succeeded
    assert [o.kind for o in result.outcomes] == [OutcomeKind.MATCH, OutcomeKind.CONTENT_MISMATCH]


def test_validate_counts_include_every_kind(tree, checksum_text):
    """Test that counts() reports zero for kinds that did not occur."""
    result = validate_checksums(ValidateRequest(checksum_file="sums.txt"), tree, _checksum_file(checksum_text))

    counts = result.counts()
    assert set(counts) == set(OutcomeKind)
    assert counts[OutcomeKind.MISSING] == 0


def test_validate_with_remap(tree, checksum_text):
    """Test remapping an old base directory to the current one."""
    moved = checksum_text.replace("/data/", "/mnt/old/")
    request = ValidateRequest(checksum_file="sums.txt", remap_old="/mnt/old", remap_new="/data")

    result = validate_checksums(request, tree, _checksum_file(moved))

    assert result.succeeded
    assert [o.path for o in result.outcomes] == ["/mnt/old/a.txt", "/mnt/old/b.txt"]


def test_validate_without_remap_reports_missing(tree, checksum_text):
    """Test that moved records are MISSING when no remap is given."""
    moved = checksum_text.replace("/data/", "/mnt/old/")

    result = validate_checksums(ValidateRequest(checksum_file="sums.txt"), tree, _checksum_file(moved))

    assert result.counts()[OutcomeKind.MISSING] == 2


def test_validate_aborted_run_returns_partial_result(tree, checksum_text):
    """Test that a fatal read error yields an aborted result instead of raising."""
    tree.broken["/data/b.txt"] = IoError("/data/b.txt", "Permission denied")

    result = validate_checksums(
        ValidateRequest(checksum_file="sums.txt", workers=1),
        tree,
        _checksum_file(checksum_text),
    )

    assert result.aborted
    assert not result.succeeded
    assert "Permission denied" in result.error
    assert result.outcomes[-1].kind is OutcomeKind.READ_ERROR


def test_validate_skip_errors_completes(tree, checksum_text):
    """Test that skip_errors finishes the run with a READ_ERROR outcome."""
    tree.broken["/data/a.txt"] = IoError("/data/a.txt", "Permission denied")

    result = validate_checksums(
        ValidateRequest(checksum_file="sums.txt", skip_errors=True),
        tree,
        _checksum_file(checksum_text),
    )

    assert not result.aborted
    assert not result.succeeded
    assert result.counts()[OutcomeKind.READ_ERROR] == 1
    assert result.counts()[OutcomeKind.MATCH] == 1


def test_validate_strict_rejects_malformed_line(tree, checksum_text):
    """Test that strict parsing raises on the first bad line."""
    with pytest.raises(MalformedRecord):
        validate_checksums(
            ValidateRequest(checksum_file="sums.txt"),
            tree,
            _checksum_file(checksum_text + "garbage\n"),
        )


def test_validate_lenient_skips_malformed_line(tree, checksum_text):
    """Test that lenient parsing carries a warning and checks the rest."""
    result = validate_checksums(
        ValidateRequest(checksum_file="sums.txt", strict=False),
        tree,
        _checksum_file("garbage\n" + checksum_text),
    )

    assert result.succeeded
    assert len(result.warnings) == 1
    assert "line 1" in result.warnings[0]


def test_validate_modtime_mode_mismatch_is_rejected(tree, checksum_text):
    """Test that a no-mtime file checked with modtime enabled is a format error."""
    with pytest.raises(MalformedRecord):
        validate_checksums(
            ValidateRequest(checksum_file="sums.txt", include_mtime=True),
            tree,
            _checksum_file(checksum_text),
        )


def test_validate_checksum_file_error_propagates(tree):
    """Test that an unreadable checksum file propagates ChecksumFileError."""
    checksum_file = Mock()
    checksum_file.read_text.side_effect = ChecksumFileError("sums.txt", "No such file or directory")

    with pytest.raises(ChecksumFileError):
        validate_checksums(ValidateRequest(checksum_file="sums.txt"), tree, checksum_file)


def test_validate_extra_roots(tree, checksum_text):
    """Test that unrecorded files are appended as EXTRA without failing the run."""
    tree.files["/data/new.txt"] = b"new"

    result = validate_checksums(
        ValidateRequest(checksum_file="sums.txt", extra_roots=["/data"]),
        tree,
        _checksum_file(checksum_text),
    )

    assert result.succeeded
    assert result.outcomes[-1].path == "/data/new.txt"
    assert result.outcomes[-1].kind is OutcomeKind.EXTRA
    assert result.counts()[OutcomeKind.EXTRA] == 1
