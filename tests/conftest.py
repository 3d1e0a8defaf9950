"""
Pytest fixtures for GridFS Cleaner tests.
"""

import logging
import sys
import threading
from pathlib import Path
from typing import Any, Iterator

import pytest
from bson import ObjectId

# Add project root to path for gridfs_cleaner imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from gridfs_cleaner.exceptions import StoreConnectivityError  # noqa: E402
from gridfs_cleaner.storage.base import ChunkStore, FileStore  # noqa: E402


class InMemoryChunkStore(ChunkStore):
    """
    Chunk collection held in a list, delivered in fixed-size batches.

    Records whether a delete happened while a scan cursor was open.
    """

    def __init__(self, batch_size: int = 3, fail_after_batches: int | None = None):
        self.chunks: list[dict[str, Any]] = []
        self.batch_size = batch_size
        self.fail_after_batches = fail_after_batches
        self.fail_for: set[Any] = set()
        self.cursor_open = False
        self.cursors_closed = 0
        self.batches_served = 0
        self.deletes_while_cursor_open = 0
        self.count_calls: list[Any] = []
        self.delete_calls: list[Any] = []
        self._lock = threading.Lock()

    def add_file_chunks(self, file_id: Any, count: int) -> None:
        for n in range(count):
            self.chunks.append({"files_id": file_id, "n": n, "data": b"x" * 16})

    def iter_parent_batches(self) -> Iterator[list[Any]]:
        self.cursor_open = True
        try:
            snapshot = list(self.chunks)
            for start in range(0, len(snapshot), self.batch_size):
                if self.fail_after_batches is not None and self.batches_served >= self.fail_after_batches:
                    raise StoreConnectivityError("cursor killed")
                self.batches_served += 1
                yield [chunk["files_id"] for chunk in snapshot[start:start + self.batch_size]]
        finally:
            self.cursor_open = False
            self.cursors_closed += 1

    def count_chunks(self, file_id: Any) -> int:
        self.count_calls.append(file_id)
        if file_id in self.fail_for:
            raise StoreConnectivityError("count failed", {"file_id": str(file_id)})
        return sum(1 for chunk in self.chunks if chunk["files_id"] == file_id)

    def delete_chunks(self, file_id: Any) -> int:
        self.delete_calls.append(file_id)
        if self.cursor_open:
            self.deletes_while_cursor_open += 1
        if file_id in self.fail_for:
            raise StoreConnectivityError("delete failed", {"file_id": str(file_id)})
        with self._lock:
            before = len(self.chunks)
            self.chunks = [chunk for chunk in self.chunks if chunk["files_id"] != file_id]
            return before - len(self.chunks)


class InMemoryFileStore(FileStore):
    """File metadata collection holding only identifiers."""

    def __init__(self, file_ids: set[Any] | None = None):
        self.file_ids = set(file_ids or ())
        self.fail_for: set[Any] = set()
        self.lookups: list[Any] = []
        self._lock = threading.Lock()

    def file_exists(self, file_id: Any) -> bool:
        with self._lock:
            self.lookups.append(file_id)
        if file_id in self.fail_for:
            raise StoreConnectivityError("lookup failed", {"file_id": str(file_id)})
        return file_id in self.file_ids


@pytest.fixture
def chunk_store() -> InMemoryChunkStore:
    """Empty in-memory chunk collection with small batches."""
    return InMemoryChunkStore(batch_size=3)


@pytest.fixture
def file_store() -> InMemoryFileStore:
    """Empty in-memory file metadata collection."""
    return InMemoryFileStore()


@pytest.fixture
def scenario_a(chunk_store, file_store):
    """F1 has 3 chunks and metadata; F2 has 2 chunks and no metadata."""
    f1, f2 = ObjectId(), ObjectId()
    chunk_store.add_file_chunks(f1, 3)
    chunk_store.add_file_chunks(f2, 2)
    file_store.file_ids.add(f1)
    return f1, f2


@pytest.fixture(autouse=True)
def reset_cleaner_logger():
    """Leave the gridfs_cleaner logger without handlers after each test."""
    yield
    logger = logging.getLogger("gridfs_cleaner")
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
