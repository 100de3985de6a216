"""Configuration shared by generation and validation of partial checksums."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass

from ..errors import InvalidWindow

DEFAULT_WINDOW_LEN = 100
DEFAULT_ALGORITHM = "sha256"


@dataclass(frozen=True)
class ChecksumConfig:
    """
    Parameters that determine a fingerprint.

    Validation must use the same values generation used; a different
    window length or algorithm produces mismatches, not an error.

    Attributes:
        window_len: Bytes read from the start, middle and end of each file
        include_mtime: Hash the modification time and record it as a column
        algorithm: hashlib algorithm name (fixed-length digests only)
    """

    window_len: int = DEFAULT_WINDOW_LEN
    include_mtime: bool = False
    algorithm: str = DEFAULT_ALGORITHM

    def __post_init__(self) -> None:
        """Validate checksum configuration."""
        if self.window_len <= 0:
            raise InvalidWindow(self.window_len)
        if self.algorithm not in hashlib.algorithms_available:
            raise ValueError(
                f"Unknown hash algorithm '{self.algorithm}'. "
                f"Available: {', '.join(sorted(hashlib.algorithms_available))}"
            )
        if self.algorithm.startswith("shake_"):
            raise ValueError(f"Hash algorithm '{self.algorithm}' has no fixed digest length")

    @property
    def digest_size(self) -> int:
        """Digest length in bytes for the configured algorithm."""
        return hashlib.new(self.algorithm).digest_size
