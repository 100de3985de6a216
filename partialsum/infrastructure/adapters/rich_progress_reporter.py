"""Rich-based progress reporter adapter for checksum runs."""

from __future__ import annotations

import logging
import sys
import time
from typing import Mapping

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)

from ...application.ports.progress_reporter import ProgressContext, ProgressReporterPort
from ...domain.models.outcome import OUTCOME_LABELS, OutcomeKind

logger = logging.getLogger(__name__)

_FAILURE_KINDS = (
    OutcomeKind.CONTENT_MISMATCH,
    OutcomeKind.METADATA_ONLY_MISMATCH,
    OutcomeKind.MISSING,
    OutcomeKind.READ_ERROR,
)


class RichProgressContext:
    """Batch progress shown as a Rich progress bar."""

    def __init__(
        self,
        progress: Progress,
        task_id: TaskID,
        total_files: int,
    ) -> None:
        """
        Initialize batch progress context.

        Args:
            progress: Rich Progress instance (already started)
            task_id: Task ID for batch progress
            total_files: Total number of files
        """
        self.progress = progress
        self.task_id = task_id
        self.total_files = total_files
        self.completed = 0
        self.failures = 0

    def advance(self, path: str, outcome: OutcomeKind | None = None) -> None:
        """
        Advance the bar by one file.

        Args:
            path: File that finished
            outcome: Validation outcome, or None in generate mode
        """
        self.completed += 1
        if outcome in _FAILURE_KINDS:
            self.failures += 1
            self.progress.update(
                self.task_id,
                advance=1,
                description=f"[red]{self.failures} failed[/red]",
            )
        else:
            self.progress.update(self.task_id, advance=1)

    def finish(self) -> None:
        """Mark batch as complete and remove the bar."""
        self.progress.update(self.task_id, completed=self.total_files)
        self.progress.stop()


class LoggingProgressContext:
    """Fallback progress context for non-interactive mode using logging."""

    # Log at most once per interval to keep non-TTY output readable
    LOG_INTERVAL_SECONDS = 5.0

    def __init__(
        self,
        total_files: int,
        description: str,
    ) -> None:
        """
        Initialize logging-based progress context.

        Args:
            total_files: Total number of files
            description: Description for progress
        """
        self.total_files = total_files
        self.description = description
        self.completed = 0
        self.start_time = time.time()
        self._last_log_time = self.start_time
        logger.info(f"Starting: {description} ({total_files} files)")

    def advance(self, path: str, outcome: OutcomeKind | None = None) -> None:
        """
        Count one finished file and periodically log progress.

        Args:
            path: File that finished
            outcome: Validation outcome, or None in generate mode
        """
        self.completed += 1
        if outcome in _FAILURE_KINDS:
            logger.debug(f"{path}: {OUTCOME_LABELS[outcome]}")

        now = time.time()
        if now - self._last_log_time < self.LOG_INTERVAL_SECONDS and self.completed < self.total_files:
            return
        self._last_log_time = now

        elapsed = now - self.start_time
        percentage = (self.completed / self.total_files * 100) if self.total_files > 0 else 100.0
        avg_time_per_file = elapsed / self.completed
        estimated_remaining = avg_time_per_file * (self.total_files - self.completed)
        logger.info(
            f"Progress: {self.completed}/{self.total_files} files "
            f"({percentage:.1f}%) - Elapsed: {elapsed:.1f}s, "
            f"Estimated remaining: {estimated_remaining:.1f}s"
        )

    def finish(self) -> None:
        """Mark batch as complete."""
        elapsed = time.time() - self.start_time
        logger.info(
            f"Completed: {self.description} - "
            f"{self.completed}/{self.total_files} files in {elapsed:.1f}s"
        )


class RichProgressReporterAdapter(ProgressReporterPort):
    """Rich-based progress reporter adapter; draws on stderr."""

    def __init__(self, enabled: bool = True) -> None:
        """
        Initialize Rich progress reporter.

        Args:
            enabled: Draw progress bars when stderr is a terminal
        """
        self.is_interactive = enabled and sys.stderr.isatty()
        self.console = Console(file=sys.stderr)

        if not self.is_interactive:
            logger.debug("Non-interactive mode detected - using logging for progress")

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
        if not self.is_interactive:
            return LoggingProgressContext(
                total_files=total_files,
                description=description,
            )

        progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            TimeRemainingColumn(),
            console=self.console,
            transient=True,
        )
        progress.start()
        task_id = progress.add_task(description, total=total_files)
        return RichProgressContext(
            progress=progress,
            task_id=task_id,
            total_files=total_files,
        )

    def display_summary(
        self,
        title: str,
        counts: Mapping[str, int],
        duration_seconds: float,
        warnings: list[str],
        errors: list[str],
    ) -> None:
        """
        Display final summary after a run.

        Args:
            title: Table title
            counts: Metric label → count, in display order
            duration_seconds: Total duration in seconds
            warnings: Warning messages
            errors: Error messages
        """
        from rich.markup import escape
        from rich.panel import Panel
        from rich.table import Table

        summary_table = Table(title=title, show_header=True, header_style="bold")
        summary_table.add_column("Metric", style="cyan")
        summary_table.add_column("Value", style="green")

        for label, value in counts.items():
            summary_table.add_row(label, str(value))
        summary_table.add_row("Duration", f"{duration_seconds:.2f}s")

        self.console.print(summary_table)

        if warnings:
            warning_text = "\n".join(f"⚠️  {escape(w)}" for w in warnings[:10])
            if len(warnings) > 10:
                warning_text += f"\n... and {len(warnings) - 10} more warnings"
            self.console.print(Panel(warning_text, title="Warnings", border_style="yellow"))

        if errors:
            error_text = "\n".join(f"❌ {escape(e)}" for e in errors[:10])
            if len(errors) > 10:
                error_text += f"\n... and {len(errors) - 10} more errors"
            self.console.print(Panel(error_text, title="Errors", border_style="red"))
