from collections import Counter

from pydantic import BaseModel, ConfigDict, Field

from ...domain.models.outcome import ComparisonOutcome, OutcomeKind


class ValidateRequest(BaseModel):
    """Request DTO for checksum validation use case."""

    checksum_file: str
    window_len: int = 100
    include_mtime: bool = False
    algorithm: str = "sha256"
    skip_errors: bool = False
    strict: bool = True
    read_retries: int = 2
    workers: int | None = None
    remap_old: str | None = None
    remap_new: str | None = None
    extra_roots: list[str] = Field(default_factory=list)


class ValidateResult(BaseModel):
    """Result DTO for checksum validation use case."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    outcomes: list[ComparisonOutcome]
    records_checked: int
    duration_seconds: float
    aborted: bool = False
    error: str | None = None
    warnings: list[str] = Field(default_factory=list)

    def counts(self) -> dict[OutcomeKind, int]:
        """Number of outcomes per kind."""
        counter = Counter(outcome.kind for outcome in self.outcomes)
        return {kind: counter.get(kind, 0) for kind in OutcomeKind}

    @property
    def succeeded(self) -> bool:
        """True when the run finished and every recorded file matched."""
        return not self.aborted and not any(outcome.is_failure for outcome in self.outcomes)
