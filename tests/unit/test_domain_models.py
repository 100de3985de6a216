"""Unit tests for domain models: ChecksumConfig, ChecksumRecordSet, RemapRule, ComparisonOutcome, ErrorPolicy."""

import hashlib

import pytest

from partialsum.domain.errors import InvalidWindow, MixedRecordFormat
from partialsum.domain.models import (
    ChecksumConfig,
    ChecksumRecordSet,
    ComparisonOutcome,
    FileFingerprint,
    OutcomeKind,
    RemapRule,
)
from partialsum.domain.policy.error_policy import ErrorPolicy

DIGEST = hashlib.sha256(b"x").digest()


def test_checksum_config_defaults():
    """Test ChecksumConfig defaults match the command-line defaults."""
    config = ChecksumConfig()

    assert config.window_len == 100
    assert config.include_mtime is False
    assert config.algorithm == "sha256"
    assert config.digest_size == 32


def test_checksum_config_rejects_zero_window():
    """Test that a zero window length raises InvalidWindow."""
    with pytest.raises(InvalidWindow) as exc_info:
        ChecksumConfig(window_len=0)

    assert exc_info.value.window_len == 0
    assert "--partial-bytes" in str(exc_info.value)


def test_checksum_config_rejects_unknown_algorithm():
    """Test that an algorithm hashlib does not know is rejected."""
    with pytest.raises(ValueError, match="Unknown hash algorithm"):
        ChecksumConfig(algorithm="not-a-hash")


def test_checksum_config_rejects_variable_length_algorithm():
    """Test that shake algorithms are rejected (no fixed digest size)."""
    with pytest.raises(ValueError, match="fixed digest length"):
        ChecksumConfig(algorithm="shake_128")


def test_checksum_config_digest_size_follows_algorithm():
    """Test digest_size for several algorithms."""
    assert ChecksumConfig(algorithm="md5").digest_size == 16
    assert ChecksumConfig(algorithm="sha1").digest_size == 20
    assert ChecksumConfig(algorithm="sha512").digest_size == 64


def test_fingerprint_validation():
    """Test FileFingerprint rejects impossible values."""
    with pytest.raises(ValueError):
        FileFingerprint(path="", size=1, digest=DIGEST)
    with pytest.raises(ValueError):
        FileFingerprint(path="/a", size=-1, digest=DIGEST)
    with pytest.raises(ValueError):
        FileFingerprint(path="/a", size=1, digest=b"")
    with pytest.raises(ValueError):
        FileFingerprint(path="/a", size=1, digest=DIGEST, mtime=-1)


def test_fingerprint_matches_compares_digests_only():
    """Test that matches() ignores path and mtime."""
    recorded = FileFingerprint(path="/old/a", size=1, digest=DIGEST)
    live = FileFingerprint(path="/new/a", size=1, digest=DIGEST)
    changed = FileFingerprint(path="/old/a", size=1, digest=hashlib.sha256(b"y").digest())

    assert live.matches(recorded)
    assert not changed.matches(recorded)


def test_fingerprint_zero_mtime_is_present():
    """Test that mtime=0 counts as carrying an mtime."""
    assert FileFingerprint(path="/a", size=1, digest=DIGEST, mtime=0).has_mtime
    assert not FileFingerprint(path="/a", size=1, digest=DIGEST).has_mtime


def test_record_set_preserves_insertion_order():
    """Test that iteration follows construction order, not path order."""
    records = ChecksumRecordSet(
        FileFingerprint(path=p, size=1, digest=DIGEST) for p in ["/z", "/a", "/m"]
    )

    assert records.paths() == ["/z", "/a", "/m"]
    assert [fp.path for fp in records] == ["/z", "/a", "/m"]
    assert len(records) == 3
    assert "/a" in records
    assert "/b" not in records


def test_record_set_duplicate_keeps_position_takes_last_value():
    """Test the duplicate-path rule: first position, last value, reported."""
    first = FileFingerprint(path="/a", size=1, digest=DIGEST)
    other = FileFingerprint(path="/b", size=1, digest=DIGEST)
    second = FileFingerprint(path="/a", size=2, digest=DIGEST)

    records = ChecksumRecordSet([first, other, second])

    assert records.paths() == ["/a", "/b"]
    assert records.get("/a") == second
    assert records.duplicates == ("/a",)
    assert len(records.warnings) == 1


def test_record_set_rejects_mixed_mtime_modes():
    """Test that mixing records with and without mtime is a format error."""
    with pytest.raises(MixedRecordFormat):
        ChecksumRecordSet(
            [
                FileFingerprint(path="/a", size=1, digest=DIGEST, mtime=10),
                FileFingerprint(path="/b", size=1, digest=DIGEST),
            ]
        )


def test_record_set_include_mtime():
    """Test include_mtime reflects the records, None when empty."""
    assert ChecksumRecordSet().include_mtime is None
    with_mtime = ChecksumRecordSet([FileFingerprint(path="/a", size=1, digest=DIGEST, mtime=0)])
    assert with_mtime.include_mtime is True


def test_record_set_get_unknown_path():
    """Test get returns None for an unrecorded path."""
    assert ChecksumRecordSet().get("/nowhere") is None


@pytest.mark.parametrize(
    "path, expected",
    [
        ("/a/x.txt", "/b/x.txt"),
        ("/a/sub/dir/x.txt", "/b/sub/dir/x.txt"),
        ("/a", "/b"),
        ("/ab/x.txt", "/ab/x.txt"),
        ("/c/x.txt", "/c/x.txt"),
        ("relative/x.txt", "relative/x.txt"),
    ],
)
def test_remap_rule_applies_on_component_boundaries(path, expected):
    """Test that remapping replaces whole leading components only."""
    assert RemapRule(old_prefix="/a", new_prefix="/b").apply(path) == expected


def test_remap_rule_trailing_slash_on_prefix():
    """Test that a trailing slash on either prefix makes no difference."""
    assert RemapRule(old_prefix="/a/", new_prefix="/b/").apply("/a/x.txt") == "/b/x.txt"


def test_remap_rule_requires_both_prefixes():
    """Test RemapRule validation."""
    with pytest.raises(ValueError):
        RemapRule(old_prefix="", new_prefix="/b")
    with pytest.raises(ValueError):
        RemapRule(old_prefix="/a", new_prefix="")


@pytest.mark.parametrize(
    "kind, is_failure",
    [
        (OutcomeKind.MATCH, False),
        (OutcomeKind.EXTRA, False),
        (OutcomeKind.CONTENT_MISMATCH, True),
        (OutcomeKind.METADATA_ONLY_MISMATCH, True),
        (OutcomeKind.MISSING, True),
        (OutcomeKind.READ_ERROR, True),
    ],
)
def test_outcome_is_failure(kind, is_failure):
    """Test which outcome kinds fail a validation run."""
    assert ComparisonOutcome(path="/a", kind=kind).is_failure is is_failure


def test_outcome_labels():
    """Test the per-file report labels."""
    assert ComparisonOutcome(path="/a", kind=OutcomeKind.MATCH).label == "OK"
    assert ComparisonOutcome(path="/a", kind=OutcomeKind.CONTENT_MISMATCH).label == "FAILED"
    assert ComparisonOutcome(path="/a", kind=OutcomeKind.MISSING).label == "MISSING"


def test_error_policy_defaults():
    """Test ErrorPolicy defaults: abort on errors, strict parsing, two retries."""
    policy = ErrorPolicy()

    assert policy.skip_errors is False
    assert policy.strict is True
    assert policy.read_retries == 2


def test_error_policy_rejects_negative_retries():
    """Test ErrorPolicy validation."""
    with pytest.raises(ValueError, match="read_retries"):
        ErrorPolicy(read_retries=-1)
