"""Domain errors for partial checksum generation and validation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .models.fingerprint import FileFingerprint
    from .models.outcome import ComparisonOutcome


class PartialsumError(Exception):
    """Base class for all partialsum errors."""


class InvalidWindow(PartialsumError):
    """
    Raised when the configured window length cannot be sampled.

    Attributes:
        window_len: Offending window length
    """

    def __init__(self, window_len: int) -> None:
        self.window_len = window_len
        super().__init__(
            f"Window length must be a positive number of bytes, got {window_len}. "
            f"Use --partial-bytes N with N >= 1."
        )


class IoError(PartialsumError):
    """
    Raised when a single file cannot be stat'ed, opened or read.

    Attributes:
        path: Path of the file that failed
        reason: Human-readable reason (usually the OS error text)
        transient: True if a retry may succeed (e.g. EIO from a flaky disk)
    """

    def __init__(self, path: str, reason: str, transient: bool = False) -> None:
        self.path = path
        self.reason = reason
        self.transient = transient
        super().__init__(f"Cannot read '{path}': {reason}")


class MalformedRecord(PartialsumError):
    """
    Raised when one checksum line cannot be encoded or decoded.

    Attributes:
        reason: Why the record is malformed
        line: Offending line (or path, when encoding)
        line_number: 1-based line number within the checksum file, if known
    """

    def __init__(self, reason: str, line: str | None = None, line_number: int | None = None) -> None:
        self.reason = reason
        self.line = line
        self.line_number = line_number
        msg = f"Malformed record: {reason}"
        if line_number is not None:
            msg = f"Malformed record at line {line_number}: {reason}"
        super().__init__(msg)


class MixedRecordFormat(MalformedRecord):
    """Raised when records with and without an mtime column are mixed in one set."""


class ChecksumFileError(PartialsumError):
    """
    Raised when the checksum file as a whole is missing or unreadable.

    Attributes:
        path: Checksum file path
        reason: Why it could not be read
    """

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot load checksum file '{path}': {reason}")


class ValidationAborted(PartialsumError):
    """
    Raised when validation stops at the first unrecoverable file error.

    Attributes:
        cause: The IoError that stopped the run
        partial: Outcomes computed before the stop, in record order
    """

    def __init__(self, cause: IoError, partial: Sequence[ComparisonOutcome]) -> None:
        self.cause = cause
        self.partial = list(partial)
        super().__init__(
            f"Validation aborted after {len(self.partial)} file(s): {cause}. "
            f"Use --skip-errors to continue past unreadable files."
        )


class GenerationAborted(PartialsumError):
    """
    Raised when checksum generation stops at the first unrecoverable file error.

    Attributes:
        cause: The error that stopped the run
        partial: Fingerprints computed before the stop, in path order
    """

    def __init__(self, cause: PartialsumError, partial: Sequence[FileFingerprint]) -> None:
        self.cause = cause
        self.partial = list(partial)
        super().__init__(
            f"Generation aborted: {cause}. "
            f"Use --skip-errors to skip unreadable files."
        )
