"""Verify files against a checksum file."""

from __future__ import annotations

import logging
from typing import List, Tuple

import typer

from partialsum.application.dto.validate import ValidateRequest, ValidateResult
from partialsum.application.use_cases.validate_checksums import validate_checksums
from partialsum.domain.errors import PartialsumError
from partialsum.domain.models.outcome import OutcomeKind
from partialsum.infrastructure.adapters.checksum_file import ChecksumFileAdapter
from partialsum.infrastructure.adapters.local_tree import LocalTreeAdapter
from partialsum.infrastructure.adapters.rich_progress_reporter import RichProgressReporterAdapter
from partialsum.infrastructure.cli.common import (
    EXIT_ABORTED,
    EXIT_FAILURES,
    EXIT_OK,
    load_settings,
    pick,
    start_run,
)

logger = logging.getLogger(__name__)


def check(
    checksum_file: str = typer.Argument(..., help="Checksum file to verify ('-' for stdin)"),
    remap: Tuple[str, str] = typer.Option(
        (None, None),
        "--remap",
        help="Remap old base path to new base path during verification: --remap OLD_BASE NEW_BASE",
    ),
    partial_bytes: int | None = typer.Option(
        None, "--partial-bytes", help="Number of bytes read from start, middle, and end at generation"
    ),
    include_modtime: bool | None = typer.Option(
        None,
        "--include-modtime/--no-include-modtime",
        help="Checksums were generated with --include-modtime",
    ),
    algorithm: str | None = typer.Option(None, "--algorithm", help="hashlib algorithm used at generation"),
    skip_errors: bool | None = typer.Option(
        None, "--skip-errors/--no-skip-errors", help="Keep going past unreadable files"
    ),
    lenient: bool = typer.Option(False, "--lenient", help="Skip malformed lines with a warning"),
    workers: int | None = typer.Option(None, "--workers", min=1, help="Maximum files read concurrently"),
    extra_root: List[str] = typer.Option(
        [], "--extra-root", help="Also report files under this directory that have no record"
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Do not print OK lines"),
    config_path: str | None = typer.Option(None, "--config", help="Path to partialsum.toml"),
    no_progress: bool = typer.Option(False, "--no-progress", help="Never draw a progress bar"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """
    Recompute partial checksums and compare them with a checksum file.

    Exit status: 0 if every file matched, 1 if any file failed, 2 if the run
    could not complete.

    Examples:
        partialsum check partialsums.txt
        partialsum check partialsums.txt --remap /old/path /new/path
        partialsum check partialsums.txt --include-modtime
    """
    start_run(verbose)
    settings = load_settings(config_path)

    remap_old, remap_new = remap
    try:
        request = ValidateRequest(
            checksum_file=checksum_file,
            window_len=pick(partial_bytes, settings.checksum.window_len),
            include_mtime=pick(include_modtime, settings.checksum.include_mtime),
            algorithm=pick(algorithm, settings.checksum.algorithm),
            skip_errors=pick(skip_errors, settings.run.skip_errors),
            strict=settings.run.strict and not lenient,
            read_retries=settings.run.read_retries,
            workers=pick(workers, settings.run.workers),
            remap_old=remap_old,
            remap_new=remap_new,
            extra_roots=extra_root,
        )
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(EXIT_ABORTED)

    reporter = RichProgressReporterAdapter(enabled=not no_progress)
    try:
        result = validate_checksums(
            request,
            LocalTreeAdapter(),
            ChecksumFileAdapter(),
            progress_reporter=reporter,
        )
    except (PartialsumError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(EXIT_ABORTED)

    _print_outcomes(result, quiet)

    counts = result.counts()
    reporter.display_summary(
        title="Verification Summary",
        counts={
            "Checks": result.records_checked,
            "OK": counts[OutcomeKind.MATCH],
            "Content Mismatch": counts[OutcomeKind.CONTENT_MISMATCH],
            "Metadata Mismatch": counts[OutcomeKind.METADATA_ONLY_MISMATCH],
            "Missing": counts[OutcomeKind.MISSING],
            "Read Errors": counts[OutcomeKind.READ_ERROR],
            "Extra": counts[OutcomeKind.EXTRA],
        },
        duration_seconds=result.duration_seconds,
        warnings=result.warnings,
        errors=[result.error] if result.error else [],
    )

    if result.aborted:
        typer.echo(f"Error: {result.error}", err=True)
        raise typer.Exit(EXIT_ABORTED)
    if not result.succeeded:
        raise typer.Exit(EXIT_FAILURES)
    raise typer.Exit(EXIT_OK)


def _print_outcomes(result: ValidateResult, quiet: bool) -> None:
    for outcome in result.outcomes:
        if quiet and outcome.kind is OutcomeKind.MATCH:
            continue
        line = f"{outcome.path}: {outcome.label}"
        if outcome.reason:
            line += f" ({outcome.reason})"
        typer.echo(line)
