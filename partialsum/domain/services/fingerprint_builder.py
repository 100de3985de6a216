"""Domain service turning sampled bytes into a fingerprint."""

from __future__ import annotations

import hashlib
from typing import Iterable

from ..models.fingerprint import FileFingerprint

_U64 = 8


class FingerprintBuilder:
    """
    Hash sampled windows into a FileFingerprint.

    The digest input is ``size (u64 BE) || window_0 || ... || window_n``
    followed by ``mtime (u64 BE)`` when modtime inclusion is on. The
    algorithm is fixed per builder instance.
    """

    def __init__(self, algorithm: str = "sha256") -> None:
        self.algorithm = algorithm

    def build(
        self,
        path: str,
        window_bytes: Iterable[bytes],
        size: int,
        mtime: int | None = None,
        include_mtime: bool = False,
    ) -> FileFingerprint:
        """
        Compute the fingerprint of one file.

        Args:
            path: Normalized path to record
            window_bytes: Buffers in start/middle/end order
            size: File size in bytes
            mtime: Modification time in whole seconds
            include_mtime: Hash and record the mtime

        Returns:
            FileFingerprint; ``mtime`` is set only when include_mtime is True

        Raises:
            ValueError: If include_mtime is set without an mtime
        """
        if include_mtime and mtime is None:
            raise ValueError(f"include_mtime requires an mtime for '{path}'")

        hasher = hashlib.new(self.algorithm)
        hasher.update(size.to_bytes(_U64, "big"))
        for chunk in window_bytes:
            hasher.update(chunk)
        if include_mtime:
            hasher.update(mtime.to_bytes(_U64, "big"))

        return FileFingerprint(
            path=path,
            size=size,
            digest=hasher.digest(),
            mtime=mtime if include_mtime else None,
        )
