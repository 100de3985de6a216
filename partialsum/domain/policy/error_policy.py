from dataclasses import dataclass


@dataclass(frozen=True)
class ErrorPolicy:
    """Policy for tolerating per-file and per-line failures during a run."""

    skip_errors: bool = False
    strict: bool = True
    read_retries: int = 2

    def __post_init__(self) -> None:
        """Validate error policy."""
        if self.read_retries < 0:
            raise ValueError(f"read_retries must be >= 0, got {self.read_retries}")
