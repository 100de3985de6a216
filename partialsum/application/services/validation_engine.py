"""Application service comparing recorded fingerprints with a live tree."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from pathlib import PurePath
from typing import Iterable

from ..ports.live_tree import FileStat, LiveTreePort
from ..ports.progress_reporter import ProgressContext, ProgressReporterPort
from .fingerprinter import FileFingerprinter
from ...domain.errors import IoError, ValidationAborted
from ...domain.models.checksum_config import ChecksumConfig
from ...domain.models.fingerprint import FileFingerprint
from ...domain.models.outcome import ComparisonOutcome, OutcomeKind
from ...domain.models.record_set import ChecksumRecordSet
from ...domain.models.remap import RemapRule
from ...domain.policy.error_policy import ErrorPolicy

logger = logging.getLogger(__name__)


class ValidationEngine:
    """
    Recompute fingerprints for a record set and classify every file.

    Not a port interface - application service that orchestrates the
    fingerprinter over a bounded worker pool. The record set is only read;
    each worker writes the outcome slot of its own path.

    The engine trusts ``config`` to match the configuration the records
    were generated with. A different window length or algorithm shows up
    as CONTENT_MISMATCH, not as an error.
    """

    def __init__(
        self,
        tree: LiveTreePort,
        config: ChecksumConfig,
        policy: ErrorPolicy | None = None,
        workers: int | None = None,
    ) -> None:
        """
        Initialize engine.

        Args:
            tree: Live filesystem access
            config: Window length, modtime inclusion and algorithm
            policy: Error tolerance (defaults to abort on first read error)
            workers: Maximum concurrent file reads (None = executor default)
        """
        if workers is not None and workers < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")
        self.tree = tree
        self.config = config
        self.policy = policy or ErrorPolicy()
        self.workers = workers
        self.fingerprinter = FileFingerprinter(tree, config, self.policy.read_retries)

    def compare(self, record: FileFingerprint, remap: RemapRule | None = None) -> ComparisonOutcome:
        """
        Classify one recorded file against the live tree.

        Never raises for per-file problems; they become READ_ERROR,
        METADATA_ONLY_MISMATCH or MISSING outcomes.
        """
        live_path = remap.apply(record.path) if remap else record.path

        try:
            stat = self.tree.stat(live_path)
        except IoError as e:
            return self._read_error(record, live_path, e)
        if stat is None:
            return ComparisonOutcome(
                path=record.path,
                kind=OutcomeKind.MISSING,
                live_path=live_path,
                expected_digest=record.digest,
            )

        try:
            actual = self.fingerprinter.fingerprint(live_path, stat=stat)
        except IoError as e:
            if self._metadata_differs(record, stat):
                return ComparisonOutcome(
                    path=record.path,
                    kind=OutcomeKind.METADATA_ONLY_MISMATCH,
                    live_path=live_path,
                    reason=e.reason,
                    expected_digest=record.digest,
                )
            return self._read_error(record, live_path, e)

        kind = OutcomeKind.MATCH if actual.matches(record) else OutcomeKind.CONTENT_MISMATCH
        return ComparisonOutcome(
            path=record.path,
            kind=kind,
            live_path=live_path,
            expected_digest=record.digest,
            actual_digest=actual.digest,
        )

    def validate(
        self,
        expected: ChecksumRecordSet,
        remap: RemapRule | None = None,
        progress_reporter: ProgressReporterPort | None = None,
    ) -> list[ComparisonOutcome]:
        """
        Validate every record, concurrently, returning outcomes in record order.

        Args:
            expected: Records loaded from a checksum file
            remap: Optional prefix rewrite applied to each recorded path
            progress_reporter: Optional progress reporter

        Returns:
            One outcome per record, in the record set's order

        Raises:
            ValidationAborted: On the first READ_ERROR when skip_errors is off;
                carries the outcomes computed for earlier records
        """
        records = list(expected)
        slots: dict[str, ComparisonOutcome] = {}
        stop = threading.Event()
        first_error: int | None = None

        progress: ProgressContext | None = None
        if progress_reporter:
            progress = progress_reporter.start_batch(len(records), "Verifying partial checksums")

        def task(record: FileFingerprint) -> ComparisonOutcome | None:
            if stop.is_set():
                return None
            return self.compare(record, remap)

        logger.info(
            f"Found {len(records)} checks to perform. Verifying...",
            extra={"records": len(records), "workers": self.workers},
        )

        executor = ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="partialsum-verify")
        futures: dict[Future[ComparisonOutcome | None], int] = {}
        try:
            for index, record in enumerate(records):
                futures[executor.submit(task, record)] = index

            for future in as_completed(futures):
                if future.cancelled():
                    continue
                outcome = future.result()
                if outcome is None:
                    continue
                index = futures[future]
                slots[records[index].path] = outcome
                if progress:
                    progress.advance(outcome.path, outcome.kind)

                if outcome.kind is OutcomeKind.READ_ERROR:
                    if self.policy.skip_errors:
                        logger.warning(
                            f"Skipping file '{outcome.path}': {outcome.reason}",
                            extra={"path": outcome.path},
                        )
                    elif first_error is None or index < first_error:
                        first_error = index
                        stop.set()
                        _cancel_pending(futures)
        except KeyboardInterrupt:
            stop.set()
            _cancel_pending(futures)
            raise
        finally:
            # In-flight reads finish and close their handles; queued work is dropped
            executor.shutdown(wait=True, cancel_futures=True)
            if progress:
                progress.finish()

        if first_error is not None:
            failed = slots[records[first_error].path]
            partial = [slots[r.path] for r in records[: first_error + 1] if r.path in slots]
            cause = IoError(failed.live_path or failed.path, failed.reason or "read error")
            logger.error(
                f"Validation aborted at '{failed.path}': {failed.reason}",
                extra={"path": failed.path, "completed": len(partial)},
            )
            raise ValidationAborted(cause, partial)

        return [slots[r.path] for r in records]

    def find_extra(
        self,
        expected: ChecksumRecordSet,
        roots: Iterable[str],
        remap: RemapRule | None = None,
    ) -> list[ComparisonOutcome]:
        """
        List live files under ``roots`` that no record (after remapping) covers.

        Returns:
            EXTRA outcomes sorted by path
        """
        recorded = {
            _normalize(remap.apply(path) if remap else path)
            for path in expected.paths()
        }
        extras = sorted(
            stat.path
            for stat in self.tree.list_files(roots)
            if _normalize(stat.path) not in recorded
        )
        return [
            ComparisonOutcome(path=path, kind=OutcomeKind.EXTRA, live_path=path)
            for path in extras
        ]

    def _metadata_differs(self, record: FileFingerprint, stat: FileStat) -> bool:
        if stat.size != record.size:
            return True
        return bool(self.config.include_mtime and record.has_mtime and stat.mtime != record.mtime)

    @staticmethod
    def _read_error(record: FileFingerprint, live_path: str, error: IoError) -> ComparisonOutcome:
        return ComparisonOutcome(
            path=record.path,
            kind=OutcomeKind.READ_ERROR,
            live_path=live_path,
            reason=error.reason,
            expected_digest=record.digest,
        )


def _cancel_pending(futures: Iterable[Future]) -> None:
    for future in futures:
        future.cancel()


def _normalize(path: str) -> str:
    return str(PurePath(path))
