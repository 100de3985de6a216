"""Helpers shared by CLI commands."""

from __future__ import annotations

import logging
import uuid
from typing import TypeVar

import typer

from ..config.settings import Settings
from ..logging import configure_logging, set_correlation_id

T = TypeVar("T")

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_ABORTED = 2


def start_run(verbose: bool) -> None:
    """Give the run a fresh correlation ID and set up logging."""
    set_correlation_id(str(uuid.uuid4()))
    configure_logging(logging.INFO, verbose=verbose)


def load_settings(config_path: str | None) -> Settings:
    """Load settings or exit with EXIT_ABORTED."""
    try:
        return Settings.from_toml(config_path)
    except Exception as e:
        typer.echo(f"Error loading configuration: {e}", err=True)
        raise typer.Exit(EXIT_ABORTED)


def pick(cli_value: T | None, settings_value: T) -> T:
    """CLI flags win over settings when given."""
    return settings_value if cli_value is None else cli_value
