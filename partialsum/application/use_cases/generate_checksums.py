from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, as_completed

from ...infrastructure.logging import get_correlation_id
from ...domain.errors import GenerationAborted, IoError, MalformedRecord, PartialsumError
from ...domain.models.checksum_config import ChecksumConfig
from ...domain.models.fingerprint import FileFingerprint
from ...domain.policy.error_policy import ErrorPolicy
from ...domain.services.record_codec import RecordCodec
from ..dto.generate import GenerateRequest, GenerateResult
from ..ports.live_tree import FileStat, LiveTreePort
from ..ports.progress_reporter import ProgressContext, ProgressReporterPort
from ..services.fingerprinter import FileFingerprinter

logger = logging.getLogger(__name__)


def generate_checksums(
    request: GenerateRequest,
    tree: LiveTreePort,
    progress_reporter: ProgressReporterPort | None = None,
) -> GenerateResult:
    """
    Orchestrate checksum generation: walk → sample → read → hash, in parallel.

    Args:
        request: GenerateRequest with roots, checksum configuration and error policy
        tree: LiveTreePort used to walk, stat and read files
        progress_reporter: Optional progress reporter

    Returns:
        GenerateResult with fingerprints sorted by path

    Raises:
        InvalidWindow: If the window length is not positive
        GenerationAborted: On the first per-file error when skip_errors is off
    """
    start_time = time.time()
    correlation_id = get_correlation_id()

    config = ChecksumConfig(
        window_len=request.window_len,
        include_mtime=request.include_mtime,
        algorithm=request.algorithm,
    )
    policy = ErrorPolicy(skip_errors=request.skip_errors, read_retries=request.read_retries)
    codec = RecordCodec(config.algorithm, include_mtime=config.include_mtime)
    fingerprinter = FileFingerprinter(tree, config, policy.read_retries)

    # Overlapping roots yield the same file more than once; record it once
    unique = {stat.path: stat for stat in tree.list_files(request.paths)}
    files: list[FileStat] = sorted(unique.values(), key=lambda s: s.path)
    logger.info(
        f"Found {len(files)} files. Computing partial checksums...",
        extra={"correlation_id": correlation_id, "files": len(files), "window_len": config.window_len},
    )

    results: dict[str, FileFingerprint] = {}
    errors: list[str] = []
    first_error: tuple[int, PartialsumError] | None = None
    stop = threading.Event()

    progress: ProgressContext | None = None
    if progress_reporter:
        progress = progress_reporter.start_batch(len(files), "Computing partial checksums")

    def task(stat: FileStat) -> FileFingerprint | None:
        if stop.is_set():
            return None
        fingerprint = fingerprinter.fingerprint(stat.path, stat=stat)
        # Reject paths the checksum file cannot represent before they are counted
        codec.encode(fingerprint)
        return fingerprint

    executor = ThreadPoolExecutor(max_workers=request.workers, thread_name_prefix="partialsum-hash")
    futures: dict[Future[FileFingerprint | None], int] = {}
    try:
        for index, stat in enumerate(files):
            futures[executor.submit(task, stat)] = index

        for future in as_completed(futures):
            if future.cancelled():
                continue
            index = futures[future]
            path = files[index].path
            try:
                fingerprint = future.result()
            except (IoError, MalformedRecord) as e:
                if progress:
                    progress.advance(path)
                if policy.skip_errors:
                    logger.warning(f"Skipping file '{path}': {e}", extra={"path": path})
                    errors.append(f"{path}: {e}")
                elif first_error is None or index < first_error[0]:
                    first_error = (index, e)
                    stop.set()
                    for pending in futures:
                        pending.cancel()
                continue
            if fingerprint is None:
                continue
            results[path] = fingerprint
            if progress:
                progress.advance(path)
    except KeyboardInterrupt:
        stop.set()
        for pending in futures:
            pending.cancel()
        raise
    finally:
        executor.shutdown(wait=True, cancel_futures=True)
        if progress:
            progress.finish()

    if first_error is not None:
        index, error = first_error
        partial = [results[f.path] for f in files[:index] if f.path in results]
        logger.error(
            f"Could not process file '{files[index].path}': {error}",
            extra={"correlation_id": correlation_id, "path": files[index].path},
        )
        raise GenerationAborted(error, partial)

    fingerprints = [results[f.path] for f in files if f.path in results]
    duration = time.time() - start_time
    logger.info(
        f"Summary: total files = {len(files)}, succeeded = {len(fingerprints)}, errors = {len(errors)}",
        extra={"correlation_id": correlation_id, "duration_seconds": duration},
    )
    return GenerateResult(
        fingerprints=fingerprints,
        files_found=len(files),
        duration_seconds=duration,
        errors=errors,
    )
