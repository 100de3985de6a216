"""Structured logging setup with correlation ID support."""

import logging
import sys
import uuid
from contextvars import ContextVar

# Context variable for correlation ID
correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def get_correlation_id() -> str:
    """
    Get current correlation ID or generate a new one.

    Returns:
        Correlation ID string (UUID)
    """
    corr_id = correlation_id_var.get()
    if corr_id is None:
        corr_id = str(uuid.uuid4())
        correlation_id_var.set(corr_id)
    return corr_id


def set_correlation_id(corr_id: str) -> None:
    """
    Set correlation ID for current context.

    Args:
        corr_id: Correlation ID string
    """
    correlation_id_var.set(corr_id)


class CorrelationIDFilter(logging.Filter):
    """Logging filter that adds correlation ID to log records."""

    def __init__(self, corr_id: str | None = None) -> None:
        super().__init__()
        # Worker threads do not inherit the CLI thread's context, so pin the run id
        self.corr_id = corr_id

    def filter(self, record: logging.LogRecord) -> bool:
        """Add correlation_id to log record."""
        record.correlation_id = self.corr_id or get_correlation_id()  # type: ignore[attr-defined]
        return True


def configure_logging(level: int = logging.INFO, verbose: bool = False) -> None:
    """
    Configure structured logging with correlation ID support.

    Logs go to stderr; stdout is reserved for checksum lines and reports.

    Args:
        level: Logging level (default: INFO)
        verbose: If True, log at DEBUG regardless of ``level``
    """
    handler = logging.StreamHandler(sys.stderr)
    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s correlation_id=%(correlation_id)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
    handler.setFormatter(formatter)
    handler.addFilter(CorrelationIDFilter(get_correlation_id()))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else level)
