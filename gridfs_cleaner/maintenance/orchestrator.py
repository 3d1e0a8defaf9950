"""
Cleanup Orchestration

Runs the two-phase orphaned chunk cleanup: scan and classify batch by
batch, close the scan cursor, then reconcile the final orphan set.
Used by the command line entrypoint.
"""

from contextlib import closing
from dataclasses import dataclass, field
from typing import Any, Optional

from gridfs_cleaner.cancellation import CancellationToken
from gridfs_cleaner.configs import EXIT_OK, EXIT_RUN_FAILED, get_logger
from gridfs_cleaner.configs.constants import DEFAULT_PROGRESS_INTERVAL
from gridfs_cleaner.exceptions import StorageError
from gridfs_cleaner.maintenance.progress import ProgressReporter
from gridfs_cleaner.storage.base import ChunkStore, FileStore
from gridfs_cleaner.storage.gc import (
    OrphanClassifier,
    ScanStats,
    reconcile,
    scan_file_ids,
)

logger = get_logger("maintenance.orchestrator")

STATUS_COMPLETED = "completed"
STATUS_CANCELLED = "cancelled"
STATUS_ABORTED = "aborted"


@dataclass
class CleanupResult:
    """Result of cleanup orchestration."""

    status: str
    """One of completed, cancelled or aborted."""

    dry_run: bool
    """Whether chunks were only counted."""

    stats: ScanStats
    """Counters accumulated during the run."""

    valid_files: frozenset = frozenset()
    """Files confirmed to have a metadata record (empty if aborted)."""

    orphaned_files: frozenset = frozenset()
    """Files confirmed to have no metadata record (empty if aborted)."""

    processed_files: list[Any] = field(default_factory=list)
    """Orphaned files whose chunks were deleted (or counted)."""

    failed_files: list[Any] = field(default_factory=list)
    """Orphaned files whose reconciliation failed; rerun to retry."""

    error: Optional[str] = None
    """Store error that aborted the scan."""

    @property
    def exit_code(self) -> int:
        if self.status == STATUS_ABORTED or self.failed_files:
            return EXIT_RUN_FAILED
        return EXIT_OK


def run_cleanup(
    chunk_store: ChunkStore,
    file_store: FileStore,
    dry_run: bool = True,
    cancel_token: Optional[CancellationToken] = None,
    classify_workers: int = 1,
    progress_interval: float = DEFAULT_PROGRESS_INTERVAL,
) -> CleanupResult:
    """
    Find orphaned chunks and delete (or count) them.

    A scan that does not finish because of a store error discards every
    classification, so no partial orphan set is ever reconciled. A cancelled
    scan skips reconciliation and still reports what was accumulated.

    Args:
        chunk_store: Chunk collection
        file_store: File metadata collection
        dry_run: If True, only report what would be deleted
        cancel_token: Token tripped by the operator to stop the run
        classify_workers: Thread pool size for existence lookups
        progress_interval: Seconds between progress log lines

    Returns:
        CleanupResult with final status and counters
    """
    token = cancel_token or CancellationToken()
    stats = ScanStats()
    stats.start()

    with OrphanClassifier(file_store, stats, workers=classify_workers) as classifier:
        reporter = ProgressReporter(
            lambda: f"Valid files count: {classifier.valid_count}",
            interval=progress_interval,
        )
        with reporter:
            logger.info("Creating cursor and starting search of orphaned chunks..")
            try:
                with closing(scan_file_ids(chunk_store, stats, token)) as batches:
                    for file_ids in batches:
                        classifier.classify_batch(file_ids)
            except StorageError as e:
                logger.exception(f"Scan aborted, discarding classification results: {e}")
                classifier.reset()
                stats.stop()
                result = CleanupResult(
                    status=STATUS_ABORTED,
                    dry_run=dry_run,
                    stats=stats,
                    error=str(e),
                )
                log_summary(result)
                return result

            valid_files = classifier.valid_files
            orphaned_files = classifier.orphaned_files
            logger.info(
                f"Scan finished: {stats.chunks_observed} chunks, "
                f"{len(valid_files)} valid files, {len(orphaned_files)} orphaned files"
            )

            # The scan cursor is closed at this point; deleting while it is
            # open risks cursor invalidation on the server.
            reconcile_result = reconcile(
                orphaned_files,
                chunk_store,
                stats,
                dry_run=dry_run,
                cancel_token=token,
            )

    stats.stop()
    result = CleanupResult(
        status=STATUS_CANCELLED if token.cancelled else STATUS_COMPLETED,
        dry_run=dry_run,
        stats=stats,
        valid_files=valid_files,
        orphaned_files=orphaned_files,
        processed_files=reconcile_result.processed,
        failed_files=reconcile_result.failed,
    )
    log_summary(result)
    return result


def log_summary(result: CleanupResult) -> None:
    """Log the end-of-run summary (also after cancellation or abort)."""
    stats = result.stats
    verb = "Would delete" if result.dry_run else "Deleted"

    logger.info(f"Run {result.status}. Elapsed time: {stats.elapsed_seconds / 60:.2f} minutes.")
    logger.info(
        f"Chunks observed: {stats.chunks_observed}, distinct files: {stats.distinct_files_observed}, "
        f"valid: {len(result.valid_files)}, orphaned: {len(result.orphaned_files)}"
    )
    logger.info(f"{verb} {stats.chunks_removed} chunks from {stats.files_processed} orphaned files")
    logger.info(
        f"{verb} '{len(result.processed_files)}' files: "
        + ",".join(str(file_id) for file_id in result.processed_files)
    )

    if result.failed_files:
        logger.error(
            f"Failed to reconcile {len(result.failed_files)} files (rerun to retry): "
            + ",".join(str(file_id) for file_id in result.failed_files)
        )
    if result.error:
        logger.error(f"Run aborted by store error: {result.error}")
