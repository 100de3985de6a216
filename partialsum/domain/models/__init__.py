"""Domain models for partial checksums."""

from .checksum_config import ChecksumConfig
from .fingerprint import FileFingerprint
from .outcome import ComparisonOutcome, OutcomeKind
from .record_set import ChecksumRecordSet
from .remap import RemapRule
from .sample_window import SampleWindow

__all__ = [
    "ChecksumConfig",
    "ChecksumRecordSet",
    "ComparisonOutcome",
    "FileFingerprint",
    "OutcomeKind",
    "RemapRule",
    "SampleWindow",
]
