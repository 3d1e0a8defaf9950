"""
MongoDB Store Management

Client creation and the GridFS collection adapters used by the garbage
collector. Driver and BSON decoding failures surface as
StoreConnectivityError.
"""

from typing import Any, Iterator, Optional

from bson import decode_all
from bson.errors import BSONError
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import ConfigurationError as PyMongoConfigurationError
from pymongo.errors import PyMongoError

from gridfs_cleaner.configs import CleanerSettings, FILES_ID_FIELD, get_logger
from gridfs_cleaner.configs.constants import DEFAULT_INDEX_HINT
from gridfs_cleaner.exceptions import ConfigurationError, StoreConnectivityError
from gridfs_cleaner.storage.base import ChunkStore, FileStore

logger = get_logger("storage.mongo")

APP_NAME = "gridfs-cleaner"


def get_mongo_client(settings: CleanerSettings) -> MongoClient:
    """
    Create a MongoDB client without contacting the server.

    Args:
        settings: Validated cleaner settings

    Returns:
        MongoClient instance

    Raises:
        ConfigurationError: If the driver rejects the connection string
    """
    try:
        return MongoClient(settings.connection_string, appname=APP_NAME)
    except PyMongoConfigurationError as e:
        raise ConfigurationError(
            f"Invalid connection string: {e}",
            {"target": settings.redacted_connection_string},
        ) from e


def connect(settings: CleanerSettings) -> MongoClient:
    """
    Create a client and verify connectivity with a ping.

    Raises:
        ConfigurationError: If the connection string is malformed
        StoreConnectivityError: If the server cannot be reached or auth fails
    """
    client = get_mongo_client(settings)
    try:
        client.admin.command("ping")
    except PyMongoError as e:
        client.close()
        raise StoreConnectivityError(
            f"Could not connect to MongoDB: {e}",
            {"target": settings.redacted_connection_string},
        ) from e
    logger.debug(f"Connected to {settings.redacted_connection_string}")
    return client


class MongoChunkStore(ChunkStore):
    """<bucket>.chunks collection adapter."""

    def __init__(self, collection: Collection, index_hint: Optional[str] = DEFAULT_INDEX_HINT):
        self.collection = collection
        self.index_hint = index_hint

    def iter_parent_batches(self) -> Iterator[list[Any]]:
        # Projection + hint make this a covered query on files_id_1_n_1,
        # so chunk payloads are never read from disk.
        # https://www.mongodb.com/docs/manual/core/query-optimization/#covered-query
        find_kwargs: dict[str, Any] = {}
        if self.index_hint:
            find_kwargs["hint"] = self.index_hint

        try:
            with self.collection.find_raw_batches(
                {}, {FILES_ID_FIELD: 1, "_id": 0}, **find_kwargs
            ) as cursor:
                for raw_batch in cursor:
                    docs = decode_all(raw_batch, self.collection.codec_options)
                    # One entry per record; None marks a chunk without files_id
                    yield [doc.get(FILES_ID_FIELD) for doc in docs]
        except (PyMongoError, BSONError) as e:
            raise StoreConnectivityError(
                f"Chunk scan failed: {e}",
                {"collection": self.collection.full_name},
            ) from e

    def count_chunks(self, file_id: Any) -> int:
        try:
            return self.collection.count_documents({FILES_ID_FIELD: file_id})
        except (PyMongoError, BSONError) as e:
            raise StoreConnectivityError(
                f"Counting chunks failed: {e}",
                {"collection": self.collection.full_name, "file_id": str(file_id)},
            ) from e

    def delete_chunks(self, file_id: Any) -> int:
        try:
            result = self.collection.delete_many({FILES_ID_FIELD: file_id})
        except (PyMongoError, BSONError) as e:
            raise StoreConnectivityError(
                f"Deleting chunks failed: {e}",
                {"collection": self.collection.full_name, "file_id": str(file_id)},
            ) from e
        return result.deleted_count


class MongoFileStore(FileStore):
    """<bucket>.files collection adapter."""

    def __init__(self, collection: Collection):
        self.collection = collection

    def file_exists(self, file_id: Any) -> bool:
        try:
            return self.collection.count_documents({"_id": file_id}, limit=1) > 0
        except (PyMongoError, BSONError) as e:
            raise StoreConnectivityError(
                f"File lookup failed: {e}",
                {"collection": self.collection.full_name, "file_id": str(file_id)},
            ) from e


def get_gridfs_stores(
    client: MongoClient,
    settings: CleanerSettings,
) -> tuple[MongoChunkStore, MongoFileStore]:
    """
    Build the chunk and file store adapters for the configured bucket.

    Returns:
        (chunk_store, file_store)
    """
    database = client[settings.database]
    chunk_store = MongoChunkStore(database[settings.chunks_collection], settings.index_hint)
    file_store = MongoFileStore(database[settings.files_collection])
    return chunk_store, file_store
