"""Value object for a sampled byte range."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SampleWindow:
    """
    Contiguous byte range of a file that feeds the digest.

    Attributes:
        offset: Start offset in bytes
        length: Number of bytes to read
    """

    offset: int
    length: int

    def __post_init__(self) -> None:
        """Validate window bounds."""
        if self.offset < 0:
            raise ValueError(f"offset must be >= 0, got {self.offset}")
        if self.length < 0:
            raise ValueError(f"length must be >= 0, got {self.length}")

    @property
    def end(self) -> int:
        """Exclusive end offset."""
        return self.offset + self.length

    def overlaps(self, other: SampleWindow) -> bool:
        """True if both windows share at least one byte."""
        return self.offset < other.end and other.offset < self.end
