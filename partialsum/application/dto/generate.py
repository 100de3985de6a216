from pydantic import BaseModel, ConfigDict, Field

from ...domain.models.fingerprint import FileFingerprint


class GenerateRequest(BaseModel):
    """Request DTO for checksum generation use case."""

    paths: list[str]
    window_len: int = 100
    include_mtime: bool = False
    algorithm: str = "sha256"
    skip_errors: bool = False
    read_retries: int = 2
    workers: int | None = None


class GenerateResult(BaseModel):
    """Result DTO for checksum generation use case."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    fingerprints: list[FileFingerprint]
    files_found: int
    duration_seconds: float
    errors: list[str] = Field(default_factory=list)
