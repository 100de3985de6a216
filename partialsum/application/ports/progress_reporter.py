"""Port interface for reporting progress during a checksum run."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ...domain.models.outcome import OutcomeKind


class ProgressContext(Protocol):
    """Context for one batch of files."""

    def advance(self, path: str, outcome: OutcomeKind | None = None) -> None:
        """
        Record that one file finished.

        Args:
            path: File that finished
            outcome: Validation outcome, or None in generate mode
        """
        ...

    def finish(self) -> None:
        """Mark batch as complete."""
        ...


class ProgressReporterPort(ABC):
    """Port for reporting progress while files are fingerprinted."""

    @abstractmethod
    def start_batch(
        self,
        total_files: int,
        description: str = "Processing files",
    ) -> ProgressContext:
        """
        Start progress reporting for a batch of files.

        Args:
            total_files: Number of files to process
            description: Description for progress bar

        Returns:
            ProgressContext for updating progress
        """
        pass
