"""Local filesystem adapter: directory walking, stat and window reads."""

from __future__ import annotations

import errno
import logging
import os
import stat as stat_module
from pathlib import Path
from typing import Iterable, Iterator

from ...application.ports.live_tree import FileStat
from ...domain.errors import IoError
from ...domain.models.sample_window import SampleWindow

logger = logging.getLogger(__name__)

# Errors where retrying cannot help
_PERMANENT_ERRNOS = {
    errno.ENOENT,
    errno.EACCES,
    errno.EPERM,
    errno.EISDIR,
    errno.ENOTDIR,
    errno.ELOOP,
    errno.ENAMETOOLONG,
}


def _io_error(path: str, exc: OSError) -> IoError:
    reason = exc.strerror or str(exc)
    return IoError(path, reason, transient=exc.errno not in _PERMANENT_ERRNOS)


def _mtime_seconds(st: os.stat_result) -> int:
    # Pre-epoch timestamps are recorded as 0
    return max(0, int(st.st_mtime))


class LocalTreeAdapter:
    """
    LiveTreePort backed by the local filesystem.

    Symlinks are not followed while walking; a symlink given as a root, or
    reached through stat during validation, is resolved by the OS.
    """

    def __init__(self, follow_symlinks: bool = False) -> None:
        self.follow_symlinks = follow_symlinks

    def list_files(self, roots: Iterable[str]) -> Iterator[FileStat]:
        """
        Yield regular files beneath each root, in sorted order per directory.

        Roots are resolved to absolute paths. Unreadable subdirectories are
        logged and skipped.

        Raises:
            IoError: If a root does not exist
        """
        for root in roots:
            root_path = Path(root)
            try:
                root_path = root_path.resolve(strict=True)
            except OSError as e:
                raise _io_error(str(root), e) from e

            if root_path.is_file():
                file_stat = self.stat(str(root_path))
                if file_stat is not None:
                    yield file_stat
                continue

            yield from self._walk(str(root_path))

    def _walk(self, directory: str) -> Iterator[FileStat]:
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda entry: entry.name)
        except OSError as e:
            logger.warning(f"Skipping unreadable directory '{directory}': {e}", extra={"path": directory})
            return

        for entry in entries:
            try:
                if entry.is_dir(follow_symlinks=self.follow_symlinks):
                    yield from self._walk(entry.path)
                    continue
                if not entry.is_file(follow_symlinks=self.follow_symlinks):
                    continue
                st = entry.stat(follow_symlinks=self.follow_symlinks)
            except OSError as e:
                logger.warning(f"Skipping '{entry.path}': {e}", extra={"path": entry.path})
                continue
            if not stat_module.S_ISREG(st.st_mode):
                continue
            yield FileStat(path=entry.path, size=st.st_size, mtime=_mtime_seconds(st))

    def stat(self, path: str) -> FileStat | None:
        """Stat one path; None if nothing exists there."""
        try:
            st = os.stat(path)
        except (FileNotFoundError, NotADirectoryError):
            return None
        except OSError as e:
            raise _io_error(path, e) from e
        if not stat_module.S_ISREG(st.st_mode):
            raise IoError(path, "not a regular file")
        return FileStat(path=path, size=st.st_size, mtime=_mtime_seconds(st))

    def read_window(self, path: str, window: SampleWindow) -> bytes:
        """Read exactly ``window.length`` bytes at ``window.offset``."""
        try:
            with open(path, "rb") as f:
                f.seek(window.offset)
                data = f.read(window.length)
        except OSError as e:
            raise _io_error(path, e) from e
        if len(data) != window.length:
            # File shrank between stat and read; a fresh attempt re-stats it
            raise IoError(
                path,
                f"short read at offset {window.offset}: expected {window.length} bytes, got {len(data)}",
                transient=True,
            )
        return data
