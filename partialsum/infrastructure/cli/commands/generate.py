"""Generate partial checksums for files and directories."""

from __future__ import annotations

import logging
from typing import List

import typer

from partialsum.application.dto.generate import GenerateRequest
from partialsum.application.use_cases.generate_checksums import generate_checksums
from partialsum.domain.errors import PartialsumError
from partialsum.domain.services.record_codec import RecordCodec
from partialsum.infrastructure.adapters.checksum_file import ChecksumFileAdapter
from partialsum.infrastructure.adapters.local_tree import LocalTreeAdapter
from partialsum.infrastructure.adapters.rich_progress_reporter import RichProgressReporterAdapter
from partialsum.infrastructure.cli.common import (
    EXIT_ABORTED,
    EXIT_OK,
    load_settings,
    pick,
    start_run,
)

logger = logging.getLogger(__name__)


def generate(
    paths: List[str] = typer.Argument(..., help="Files or directories to checksum"),
    output: str = typer.Option("-", "--output", "-o", help="Checksum file to write ('-' for stdout)"),
    partial_bytes: int | None = typer.Option(
        None, "--partial-bytes", help="Number of bytes to read from start, middle, and end"
    ),
    include_modtime: bool | None = typer.Option(
        None,
        "--include-modtime/--no-include-modtime",
        help="Hash and record modification times (use when copies preserve mtime, e.g. cp -p)",
    ),
    algorithm: str | None = typer.Option(None, "--algorithm", help="hashlib algorithm (default sha256)"),
    skip_errors: bool | None = typer.Option(
        None, "--skip-errors/--no-skip-errors", help="Skip files that cannot be read instead of aborting"
    ),
    workers: int | None = typer.Option(None, "--workers", min=1, help="Maximum files read concurrently"),
    config_path: str | None = typer.Option(None, "--config", help="Path to partialsum.toml"),
    no_progress: bool = typer.Option(False, "--no-progress", help="Never draw a progress bar"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """
    Compute partial checksums and write one record per file.

    Examples:
        partialsum generate some_directory > partialsums.txt
        partialsum generate --include-modtime some_directory -o partialsums.txt
    """
    start_run(verbose)
    settings = load_settings(config_path)

    try:
        request = GenerateRequest(
            paths=paths,
            window_len=pick(partial_bytes, settings.checksum.window_len),
            include_mtime=pick(include_modtime, settings.checksum.include_mtime),
            algorithm=pick(algorithm, settings.checksum.algorithm),
            skip_errors=pick(skip_errors, settings.run.skip_errors),
            read_retries=settings.run.read_retries,
            workers=pick(workers, settings.run.workers),
        )
        codec = RecordCodec(request.algorithm, include_mtime=request.include_mtime)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(EXIT_ABORTED)

    reporter = RichProgressReporterAdapter(enabled=not no_progress)
    try:
        result = generate_checksums(request, LocalTreeAdapter(), progress_reporter=reporter)
    except (PartialsumError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(EXIT_ABORTED)

    try:
        ChecksumFileAdapter().write_text(output, codec.encode_all(result.fingerprints))
    except PartialsumError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(EXIT_ABORTED)

    reporter.display_summary(
        title="Partial Checksum Summary",
        counts={
            "Files Found": result.files_found,
            "Succeeded": len(result.fingerprints),
            "Skipped": len(result.errors),
        },
        duration_seconds=result.duration_seconds,
        warnings=result.errors,
        errors=[],
    )
    raise typer.Exit(EXIT_OK)
