"""Ordered, path-keyed collection of fingerprints."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator

from ..errors import MixedRecordFormat
from .fingerprint import FileFingerprint

logger = logging.getLogger(__name__)


class ChecksumRecordSet:
    """
    Immutable set of fingerprints keyed by path, in construction order.

    A path seen twice keeps its first position and its last value; every
    repeat is listed in ``duplicates``. All records must agree on whether
    they carry an mtime.

    Attributes:
        duplicates: Paths that appeared more than once
        warnings: Non-fatal problems found while building the set
    """

    def __init__(
        self,
        fingerprints: Iterable[FileFingerprint] = (),
        warnings: Iterable[str] = (),
    ) -> None:
        records: dict[str, FileFingerprint] = {}
        duplicates: list[str] = []
        self.warnings: list[str] = list(warnings)
        include_mtime: bool | None = None

        for fp in fingerprints:
            if include_mtime is None:
                include_mtime = fp.has_mtime
            elif fp.has_mtime != include_mtime:
                raise MixedRecordFormat(
                    f"record for '{fp.path}' "
                    f"{'has' if fp.has_mtime else 'lacks'} an mtime column, "
                    f"earlier records {'have' if include_mtime else 'do not'}"
                )
            if fp.path in records:
                duplicates.append(fp.path)
                msg = f"Duplicate record for '{fp.path}', last occurrence wins"
                self.warnings.append(msg)
                logger.warning(msg, extra={"path": fp.path})
            records[fp.path] = fp

        self._records = records
        self._include_mtime = include_mtime
        self.duplicates: tuple[str, ...] = tuple(duplicates)

    @property
    def include_mtime(self) -> bool | None:
        """Whether records carry an mtime; None for an empty set."""
        return self._include_mtime

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[FileFingerprint]:
        return iter(self._records.values())

    def __contains__(self, path: object) -> bool:
        return path in self._records

    def get(self, path: str) -> FileFingerprint | None:
        return self._records.get(path)

    def paths(self) -> list[str]:
        return list(self._records)
