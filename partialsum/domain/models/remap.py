"""Path prefix remapping applied at comparison time."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePath


@dataclass(frozen=True)
class RemapRule:
    """
    Replace a leading path prefix with another.

    Matching is by whole path components: ``/a`` remaps ``/a/b`` but not
    ``/ab``. Paths outside ``old_prefix`` pass through unchanged.

    Attributes:
        old_prefix: Base directory recorded in the checksum file
        new_prefix: Base directory the tree lives under now
    """

    old_prefix: str
    new_prefix: str

    def __post_init__(self) -> None:
        """Validate remap rule."""
        if not self.old_prefix:
            raise ValueError("old_prefix must be non-empty")
        if not self.new_prefix:
            raise ValueError("new_prefix must be non-empty")

    def apply(self, path: str) -> str:
        """Return the remapped path, or ``path`` itself if it is not under ``old_prefix``."""
        original = PurePath(path)
        old = PurePath(self.old_prefix)
        if not original.is_relative_to(old):
            return path
        return str(PurePath(self.new_prefix) / original.relative_to(old))
