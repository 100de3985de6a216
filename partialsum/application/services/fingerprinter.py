"""Application service computing the fingerprint of one live file."""

from __future__ import annotations

import logging

from ..ports.live_tree import FileStat, LiveTreePort
from ...domain.errors import IoError
from ...domain.models.checksum_config import ChecksumConfig
from ...domain.models.fingerprint import FileFingerprint
from ...domain.services.fingerprint_builder import FingerprintBuilder
from ...domain.services.window_sampler import ByteWindowSampler

logger = logging.getLogger(__name__)


class FileFingerprinter:
    """
    Stat, sample, read and hash one file through a LiveTreePort.

    Transient read errors (e.g. EIO on a failing disk) are retried up to
    ``read_retries`` times; each retry starts again from a fresh stat.
    Safe to share between worker threads.
    """

    def __init__(
        self,
        tree: LiveTreePort,
        config: ChecksumConfig,
        read_retries: int = 2,
    ) -> None:
        self.tree = tree
        self.config = config
        self.read_retries = read_retries
        self.builder = FingerprintBuilder(config.algorithm)

    def fingerprint(self, path: str, stat: FileStat | None = None) -> FileFingerprint:
        """
        Compute the fingerprint of ``path``.

        Args:
            path: Live path to read
            stat: Metadata already obtained for ``path`` (saves one stat call)

        Returns:
            FileFingerprint recorded under ``path``

        Raises:
            IoError: If the file cannot be stat'ed or read after all retries
        """
        attempts = 0
        while True:
            attempts += 1
            try:
                return self._fingerprint_once(path, stat)
            except IoError as e:
                if not e.transient or attempts > self.read_retries:
                    raise
                logger.warning(
                    f"Retrying file '{path}' (attempt {attempts + 1}): {e.reason}",
                    extra={"path": path, "attempt": attempts + 1},
                )
                stat = None

    def _fingerprint_once(self, path: str, stat: FileStat | None) -> FileFingerprint:
        if stat is None:
            stat = self.tree.stat(path)
            if stat is None:
                raise IoError(path, "file disappeared")

        windows = ByteWindowSampler.sample(stat.size, self.config.window_len)
        buffers = [self.tree.read_window(path, window) for window in windows]
        return self.builder.build(
            path=path,
            window_bytes=buffers,
            size=stat.size,
            mtime=stat.mtime,
            include_mtime=self.config.include_mtime,
        )
