"""
GridFS Cleaner Storage Layer

MongoDB client management, store adapters and garbage collection.
"""

from gridfs_cleaner.storage.base import ChunkStore, FileStore
from gridfs_cleaner.storage.mongo import (
    MongoChunkStore,
    MongoFileStore,
    connect,
    get_gridfs_stores,
    get_mongo_client,
)

__all__ = [
    # Interfaces
    "ChunkStore",
    "FileStore",
    # Client management
    "connect",
    "get_mongo_client",
    "get_gridfs_stores",
    "MongoChunkStore",
    "MongoFileStore",
]
