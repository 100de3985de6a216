"""Port interface for the live filesystem tree being fingerprinted."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Protocol, runtime_checkable

from ...domain.models.sample_window import SampleWindow


@dataclass(frozen=True)
class FileStat:
    """
    Metadata of one regular file.

    Attributes:
        path: Normalized path string
        size: Size in bytes
        mtime: Modification time in whole seconds since the epoch
    """

    path: str
    size: int
    mtime: int


@runtime_checkable
class LiveTreePort(Protocol):
    def list_files(self, roots: Iterable[str]) -> Iterator[FileStat]:
        """
        Walk the given roots and yield every regular file beneath them.

        Args:
            roots: Directories (or single files) to walk

        Returns:
            Lazy iterator of FileStat; each call starts a fresh walk
        """
        ...

    def stat(self, path: str) -> FileStat | None:
        """
        Stat one path.

        Returns:
            FileStat, or None if nothing exists at ``path``

        Raises:
            IoError: If the path exists but cannot be stat'ed or is not a regular file
        """
        ...

    def read_window(self, path: str, window: SampleWindow) -> bytes:
        """
        Read exactly ``window.length`` bytes at ``window.offset``.

        Raises:
            IoError: If the file cannot be opened or the read comes up short
        """
        ...
