"""Domain model for a single file's partial checksum."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FileFingerprint:
    """
    Recorded state of one file.

    A fingerprint either carries an mtime (modtime inclusion enabled) or it
    does not; ``mtime=0`` is a real timestamp, never a stand-in for "absent".

    Attributes:
        path: Normalized path string
        size: File size in bytes
        digest: Raw digest bytes
        mtime: Modification time in whole seconds since the epoch, or None
    """

    path: str
    size: int
    digest: bytes
    mtime: int | None = None

    def __post_init__(self) -> None:
        """Validate fingerprint."""
        if not self.path:
            raise ValueError("path must be non-empty")
        if self.size < 0:
            raise ValueError(f"size must be >= 0, got {self.size}")
        if not self.digest:
            raise ValueError("digest must be non-empty")
        if self.mtime is not None and self.mtime < 0:
            raise ValueError(f"mtime must be >= 0, got {self.mtime}")

    @property
    def has_mtime(self) -> bool:
        return self.mtime is not None

    @property
    def hexdigest(self) -> str:
        return self.digest.hex()

    def matches(self, other: FileFingerprint) -> bool:
        """True if both digests are byte-for-byte equal."""
        return self.digest == other.digest
