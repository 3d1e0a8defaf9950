"""
Orphaned Chunk Reconciliation

Delete (or, in dry-run mode, count) the chunks of every orphaned file.
Runs only after the scan cursor is closed. Each file is handled
independently: a failure is recorded and the remaining files continue.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from bson import ObjectId

from gridfs_cleaner.configs import get_logger
from gridfs_cleaner.exceptions import ReconciliationError, StorageError
from gridfs_cleaner.cancellation import CancellationToken
from gridfs_cleaner.storage.base import ChunkStore
from gridfs_cleaner.storage.gc.stats import ScanStats

logger = get_logger("storage.gc.reconciler")


@dataclass
class ReconcileResult:
    """Outcome of a reconciliation pass."""

    processed: list[Any] = field(default_factory=list)
    """Orphaned files whose chunks were deleted (or counted)."""

    errors: list[ReconciliationError] = field(default_factory=list)
    """Per-file failures, in processing order."""

    cancelled: bool = False
    """Whether cancellation stopped the pass before all files were handled."""

    @property
    def failed(self) -> list[Any]:
        return [error.file_id for error in self.errors]


def describe_file_id(file_id: Any) -> str:
    """Human readable identifier, with creation time for ObjectIds."""
    if isinstance(file_id, ObjectId):
        return f"{file_id} (created {file_id.generation_time.isoformat()})"
    return str(file_id)


def _sort_key(file_id: Any) -> tuple[str, Any]:
    # Identifiers of different BSON types are not mutually comparable
    return (type(file_id).__name__, file_id)


def reconcile(
    orphans: Iterable[Any],
    chunk_store: ChunkStore,
    stats: ScanStats,
    dry_run: bool = True,
    cancel_token: Optional[CancellationToken] = None,
) -> ReconcileResult:
    """
    Remove the chunks of each orphaned file.

    Args:
        orphans: Final orphan set from a completed scan
        chunk_store: Chunk collection
        stats: Counters; per-file counts and totals are recorded here
        dry_run: If True, only count what would be deleted
        cancel_token: Checked before each file

    Returns:
        ReconcileResult with processed identifiers and per-file errors
    """
    result = ReconcileResult()

    for file_id in sorted(orphans, key=_sort_key):
        if cancel_token is not None and cancel_token.cancelled:
            logger.info("Reconciliation cancelled, remaining orphaned files left untouched")
            result.cancelled = True
            break

        try:
            if dry_run:
                count = chunk_store.count_chunks(file_id)
                logger.info(
                    f"Dry-run: could delete {count} chunks from orphaned file {describe_file_id(file_id)}"
                )
            else:
                count = chunk_store.delete_chunks(file_id)
                logger.info(f"Deleted {count} chunks from orphaned file {describe_file_id(file_id)}")
        except StorageError as e:
            error = ReconciliationError(file_id, e)
            logger.error(f"Failed to reconcile orphaned file {describe_file_id(file_id)}: {e}")
            stats.failed_files.append(file_id)
            result.errors.append(error)
            continue

        stats.record_orphan(file_id, count)
        result.processed.append(file_id)

    return result
