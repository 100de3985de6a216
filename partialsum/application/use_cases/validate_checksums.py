from __future__ import annotations

import logging
import time

from ...infrastructure.logging import get_correlation_id
from ...domain.errors import ValidationAborted
from ...domain.models.checksum_config import ChecksumConfig
from ...domain.models.outcome import OutcomeKind
from ...domain.models.remap import RemapRule
from ...domain.policy.error_policy import ErrorPolicy
from ...domain.services.record_codec import RecordCodec
from ..dto.validate import ValidateRequest, ValidateResult
from ..ports.checksum_file import ChecksumFilePort
from ..ports.live_tree import LiveTreePort
from ..ports.progress_reporter import ProgressReporterPort
from ..services.validation_engine import ValidationEngine

logger = logging.getLogger(__name__)


def validate_checksums(
    request: ValidateRequest,
    tree: LiveTreePort,
    checksum_file: ChecksumFilePort,
    progress_reporter: ProgressReporterPort | None = None,
) -> ValidateResult:
    """
    Orchestrate validation: load → decode → remap → recompute → classify.

    A run stopped by an unreadable file (skip_errors off) is returned with
    ``aborted=True`` and the outcomes computed before the stop.

    Args:
        request: ValidateRequest with checksum file, configuration, remap and policy
        tree: LiveTreePort for the tree being checked
        checksum_file: ChecksumFilePort that loads the checksum file
        progress_reporter: Optional progress reporter

    Returns:
        ValidateResult with outcomes in checksum file order (EXTRA outcomes last)

    Raises:
        InvalidWindow: If the window length is not positive
        ChecksumFileError: If the checksum file is missing or unreadable
        MalformedRecord: On a bad line in strict mode
    """
    start_time = time.time()
    correlation_id = get_correlation_id()

    config = ChecksumConfig(
        window_len=request.window_len,
        include_mtime=request.include_mtime,
        algorithm=request.algorithm,
    )
    policy = ErrorPolicy(
        skip_errors=request.skip_errors,
        strict=request.strict,
        read_retries=request.read_retries,
    )
    remap: RemapRule | None = None
    if request.remap_old is not None and request.remap_new is not None:
        remap = RemapRule(request.remap_old, request.remap_new)

    codec = RecordCodec(config.algorithm, include_mtime=config.include_mtime, strict=policy.strict)
    expected = codec.decode_all(checksum_file.read_text(request.checksum_file))
    logger.info(
        f"Loaded {len(expected)} records from '{request.checksum_file}'",
        extra={"correlation_id": correlation_id, "remap": bool(remap)},
    )

    engine = ValidationEngine(tree, config, policy, workers=request.workers)
    try:
        outcomes = engine.validate(expected, remap, progress_reporter)
    except ValidationAborted as e:
        return ValidateResult(
            outcomes=e.partial,
            records_checked=len(expected),
            duration_seconds=time.time() - start_time,
            aborted=True,
            error=str(e),
            warnings=list(expected.warnings),
        )

    if request.extra_roots:
        outcomes.extend(engine.find_extra(expected, request.extra_roots, remap))

    result = ValidateResult(
        outcomes=outcomes,
        records_checked=len(expected),
        duration_seconds=time.time() - start_time,
        warnings=list(expected.warnings),
    )
    counts = result.counts()
    failed = sum(n for kind, n in counts.items() if kind not in (OutcomeKind.MATCH, OutcomeKind.EXTRA))
    logger.info(
        f"Summary: total checks = {len(expected)}, OK = {counts[OutcomeKind.MATCH]}, FAILED = {failed}",
        extra={"correlation_id": correlation_id, "duration_seconds": result.duration_seconds},
    )
    return result
