"""Per-file results of a validation run."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class OutcomeKind(str, Enum):
    """Classification of one compared file."""

    MATCH = "match"
    CONTENT_MISMATCH = "content_mismatch"
    METADATA_ONLY_MISMATCH = "metadata_only_mismatch"
    MISSING = "missing"
    EXTRA = "extra"
    READ_ERROR = "read_error"


# Labels used in the per-file report, modelled on `sha256sum -c` output
OUTCOME_LABELS = {
    OutcomeKind.MATCH: "OK",
    OutcomeKind.CONTENT_MISMATCH: "FAILED",
    OutcomeKind.METADATA_ONLY_MISMATCH: "FAILED (size/mtime changed, unreadable)",
    OutcomeKind.MISSING: "MISSING",
    OutcomeKind.EXTRA: "EXTRA",
    OutcomeKind.READ_ERROR: "FAILED open or read",
}


@dataclass(frozen=True)
class ComparisonOutcome:
    """
    Result of comparing one recorded fingerprint with the live tree.

    Attributes:
        path: Path as recorded (or as found on disk, for EXTRA)
        kind: Outcome classification
        live_path: Path actually examined after remapping
        reason: Error text for READ_ERROR and METADATA_ONLY_MISMATCH
        expected_digest: Recorded digest, if any
        actual_digest: Recomputed digest, if one could be computed
    """

    path: str
    kind: OutcomeKind
    live_path: str | None = None
    reason: str | None = None
    expected_digest: bytes | None = None
    actual_digest: bytes | None = None

    @property
    def is_failure(self) -> bool:
        """True for every outcome that should fail the run."""
        return self.kind not in (OutcomeKind.MATCH, OutcomeKind.EXTRA)

    @property
    def label(self) -> str:
        return OUTCOME_LABELS[self.kind]
