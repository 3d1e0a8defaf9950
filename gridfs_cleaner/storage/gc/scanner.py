"""
Chunk Scanner

Stream the parent file identifier of every chunk and hand each batch's
distinct identifiers to the classifier. Global dedup is the classifier's job.
"""

from typing import Any, Iterator, Optional

from gridfs_cleaner.configs import get_logger
from gridfs_cleaner.cancellation import CancellationToken
from gridfs_cleaner.storage.base import ChunkStore
from gridfs_cleaner.storage.gc.stats import ScanStats

logger = get_logger("storage.gc.scanner")


def scan_file_ids(
    chunk_store: ChunkStore,
    stats: ScanStats,
    cancel_token: Optional[CancellationToken] = None,
) -> Iterator[set[Any]]:
    """
    Yield the distinct parent identifiers of each store batch.

    The next batch is only requested once the caller has consumed the
    current one, so memory stays bounded to one batch. Closing this
    generator closes the store cursor.

    Args:
        chunk_store: Chunk collection to scan
        stats: Counters; chunks_observed grows by each batch's record count
        cancel_token: Checked before every batch is requested

    Yields:
        Set of distinct file identifiers in one batch

    Raises:
        StoreConnectivityError: On any cursor failure (nothing is salvaged)
    """
    batches = iter(chunk_store.iter_parent_batches())
    try:
        while True:
            if cancel_token is not None and cancel_token.cancelled:
                logger.info("Scan cancelled, no further batches requested")
                return

            batch = next(batches, None)
            if batch is None:
                return

            stats.chunks_observed += len(batch)
            file_ids = {file_id for file_id in batch if file_id is not None}
            file_ids_missing = sum(1 for file_id in batch if file_id is None)
            if file_ids_missing:
                logger.debug(f"Skipped {file_ids_missing} chunks without a parent file id")
            logger.debug(f"Scanned batch of {len(batch)} chunks ({len(file_ids)} distinct files)")
            if file_ids:
                yield file_ids
    finally:
        close = getattr(batches, "close", None)
        if close is not None:
            close()
