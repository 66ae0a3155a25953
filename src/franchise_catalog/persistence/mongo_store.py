"""
MongoDB document store backed by the pymongo asynchronous client.
"""

import logging
import re
from contextlib import contextmanager
from typing import Any, AsyncIterator, Dict, Iterator, Mapping, Optional, Sequence

from pymongo import ASCENDING, AsyncMongoClient, ReturnDocument
from pymongo.errors import ConnectionFailure
from pymongo.errors import DuplicateKeyError as MongoDuplicateKeyError

from ..core.config import StoreConfig
from ..core.exceptions import StoreError
from .store import (
    ID_FIELD,
    VERSION_FIELD,
    Document,
    DocumentStore,
    DuplicateKeyError,
    Filters,
)

logger = logging.getLogger(__name__)

_INDEX_NAME_RE = re.compile(r"index: (\S+)")


def duplicate_index_name(error: MongoDuplicateKeyError) -> Optional[str]:
    """Extract the violated index name from a server duplicate-key error."""
    details = error.details or {}
    match = _INDEX_NAME_RE.search(details.get("errmsg") or str(error))
    return match.group(1) if match else None


class MongoDocumentStore(DocumentStore):
    """Document store on top of a MongoDB database."""

    def __init__(self, client: AsyncMongoClient, database: str) -> None:
        self._client = client
        self._db = client[database]
        self.database = database

    @classmethod
    def from_config(cls, config: StoreConfig) -> "MongoDocumentStore":
        """Create a store with its own client from store configuration."""
        client: AsyncMongoClient = AsyncMongoClient(
            config.uri,
            tz_aware=True,
            serverSelectionTimeoutMS=config.server_selection_timeout_ms,
        )
        logger.info(f"MongoDB client created for database {config.database}")
        return cls(client, config.database)

    @property
    def client(self) -> AsyncMongoClient:
        return self._client

    def _collection(self, name: str) -> Any:
        return self._db[name]

    @contextmanager
    def _translate_errors(self, collection: str) -> Iterator[None]:
        try:
            yield
        except MongoDuplicateKeyError as e:
            raise DuplicateKeyError(
                collection, duplicate_index_name(e), (e.details or {}).get("keyValue")
            ) from e
        except ConnectionFailure as e:
            raise StoreError(
                f"MongoDB unavailable: {e}",
                error_code="STORE_UNAVAILABLE",
                details={"collection": collection},
                component="MongoDocumentStore",
            ) from e

    @staticmethod
    def _update_spec(changes: Mapping[str, Any]) -> Dict[str, Any]:
        return {"$set": dict(changes), "$inc": {VERSION_FIELD: 1}}

    async def insert(self, collection: str, document: Document) -> Document:
        stored = {**document, VERSION_FIELD: 0}
        with self._translate_errors(collection):
            await self._collection(collection).insert_one(stored)
        return stored

    async def find_by_id(self, collection: str, document_id: Any) -> Optional[Document]:
        with self._translate_errors(collection):
            return await self._collection(collection).find_one({ID_FIELD: document_id})

    async def find_all(self, collection: str) -> AsyncIterator[Document]:
        with self._translate_errors(collection):
            async for document in self._collection(collection).find({}):
                yield document

    async def find_where(self, collection: str, filters: Filters) -> AsyncIterator[Document]:
        with self._translate_errors(collection):
            async for document in self._collection(collection).find(dict(filters)):
                yield document

    async def find_one_where(self, collection: str, filters: Filters) -> Optional[Document]:
        with self._translate_errors(collection):
            return await self._collection(collection).find_one(dict(filters))

    async def count_where(self, collection: str, filters: Filters) -> int:
        with self._translate_errors(collection):
            return await self._collection(collection).count_documents(dict(filters))

    async def exists_where(self, collection: str, filters: Filters) -> bool:
        with self._translate_errors(collection):
            found = await self._collection(collection).find_one(
                dict(filters), projection={ID_FIELD: 1}
            )
        return found is not None

    async def delete_by_id(self, collection: str, document_id: Any) -> bool:
        with self._translate_errors(collection):
            result = await self._collection(collection).delete_one({ID_FIELD: document_id})
        return result.deleted_count > 0

    async def update_fields(
        self, collection: str, filters: Filters, changes: Mapping[str, Any]
    ) -> int:
        with self._translate_errors(collection):
            result = await self._collection(collection).update_one(
                dict(filters), self._update_spec(changes)
            )
        return result.matched_count

    async def find_and_update(
        self, collection: str, filters: Filters, changes: Mapping[str, Any]
    ) -> Optional[Document]:
        with self._translate_errors(collection):
            return await self._collection(collection).find_one_and_update(
                dict(filters),
                self._update_spec(changes),
                return_document=ReturnDocument.AFTER,
            )

    async def replace(
        self, collection: str, document: Document, expected_version: int
    ) -> Optional[Document]:
        replacement = {**document, VERSION_FIELD: expected_version + 1}
        with self._translate_errors(collection):
            result = await self._collection(collection).replace_one(
                {ID_FIELD: document[ID_FIELD], VERSION_FIELD: expected_version},
                replacement,
            )
        if result.matched_count == 0:
            return None
        return replacement

    async def ensure_unique_index(
        self, collection: str, name: str, fields: Sequence[str]
    ) -> None:
        with self._translate_errors(collection):
            await self._collection(collection).create_index(
                [(f, ASCENDING) for f in fields], name=name, unique=True
            )
        logger.info(f"Ensured unique index {name} on {collection}")

    async def ping(self) -> bool:
        try:
            await self._client.admin.command("ping")
            return True
        except ConnectionFailure as e:
            logger.warning(f"MongoDB ping failed: {e}")
            return False

    async def close(self) -> None:
        await self._client.close()
        logger.info("MongoDB client closed")
