"""
Base Store Interfaces

Abstract collaborators consumed by the garbage collector. The MongoDB
implementations live in gridfs_cleaner.storage.mongo.
"""

from abc import ABC, abstractmethod
from typing import Any, Iterator


class ChunkStore(ABC):
    """Chunk collection: projected streaming reads plus count/delete by parent."""

    @abstractmethod
    def iter_parent_batches(self) -> Iterator[list[Any]]:
        """
        Stream the parent file identifier of every chunk.

        Yields one list per store-delivered batch, one entry per chunk
        record (duplicates included, None for a record without a parent
        identifier). Closing the iterator closes the
        underlying cursor.
        """
        pass

    @abstractmethod
    def count_chunks(self, file_id: Any) -> int:
        """Count chunk records belonging to file_id (read-only)."""
        pass

    @abstractmethod
    def delete_chunks(self, file_id: Any) -> int:
        """Delete all chunk records of file_id in one command. Returns deleted count."""
        pass


class FileStore(ABC):
    """File metadata collection."""

    @abstractmethod
    def file_exists(self, file_id: Any) -> bool:
        """Return True if a metadata record exists for file_id."""
        pass
