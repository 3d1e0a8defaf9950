"""
Orphan Classifier

Classify every distinct parent identifier exactly once as valid (metadata
record exists) or orphaned (no metadata record), caching the outcome so
repeat sightings never hit the store again.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Iterable, Optional

from gridfs_cleaner.configs import get_logger
from gridfs_cleaner.storage.base import FileStore
from gridfs_cleaner.storage.gc.stats import ScanStats

logger = get_logger("storage.gc.classifier")


class OrphanClassifier:
    """
    Owns the valid and orphaned identifier sets for one run.

    The sets are only mutated on the thread calling classify()/classify_batch().
    With workers > 1 the existence lookups of a batch run on a thread pool and
    their results are funneled back to that thread before any set is touched.
    Callers only ever see frozen snapshots.
    """

    def __init__(
        self,
        file_store: FileStore,
        stats: Optional[ScanStats] = None,
        workers: int = 1,
    ):
        self.file_store = file_store
        self.stats = stats if stats is not None else ScanStats()
        self.workers = workers
        self._valid: set[Any] = set()
        self._orphaned: set[Any] = set()
        self._executor: Optional[ThreadPoolExecutor] = None
        if workers > 1:
            self._executor = ThreadPoolExecutor(
                max_workers=workers,
                thread_name_prefix="classify",
            )

    # --- Read-only views ---

    @property
    def valid_files(self) -> frozenset:
        return frozenset(self._valid)

    @property
    def orphaned_files(self) -> frozenset:
        return frozenset(self._orphaned)

    @property
    def valid_count(self) -> int:
        return len(self._valid)

    @property
    def orphaned_count(self) -> int:
        return len(self._orphaned)

    def is_known(self, file_id: Any) -> bool:
        return file_id in self._valid or file_id in self._orphaned

    # --- Classification ---

    def classify(self, file_id: Any) -> None:
        """
        Classify a single identifier.

        Known identifiers return immediately without store access; otherwise
        one existence lookup decides which set the identifier joins.

        Raises:
            StoreConnectivityError: If the lookup fails
        """
        if self.is_known(file_id):
            return
        self._record(file_id, self.file_store.file_exists(file_id))

    def classify_batch(self, file_ids: Iterable[Any]) -> None:
        """
        Classify every identifier of one scanned batch.

        Raises:
            StoreConnectivityError: If any lookup fails
        """
        unknown = [file_id for file_id in set(file_ids) if not self.is_known(file_id)]
        if not unknown:
            return

        if self._executor is None or len(unknown) == 1:
            for file_id in unknown:
                self._record(file_id, self.file_store.file_exists(file_id))
            return

        # map() re-raises the first lookup failure here, on the owning thread
        results = self._executor.map(self.file_store.file_exists, unknown)
        for file_id, exists in zip(unknown, results):
            self._record(file_id, exists)

    def _record(self, file_id: Any, exists: bool) -> None:
        if exists:
            self._valid.add(file_id)
        else:
            self._orphaned.add(file_id)
            logger.debug(f"Orphaned file found: {file_id}")
        self.stats.distinct_files_observed += 1

    def reset(self) -> None:
        """Discard all classifications (used when a scan is aborted)."""
        self._valid.clear()
        self._orphaned.clear()
        self.stats.distinct_files_observed = 0

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> "OrphanClassifier":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
