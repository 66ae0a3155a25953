"""
Tests for the MongoDB document store against a mocked async client.
"""

import re
from typing import Any, Dict, List
from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import ConnectionFailure
from pymongo.errors import DuplicateKeyError as MongoDuplicateKeyError

from franchise_catalog.core.exceptions import StoreError
from franchise_catalog.persistence.mongo_store import (
    MongoDocumentStore,
    duplicate_index_name,
)
from franchise_catalog.persistence.store import DuplicateKeyError


class _Cursor:
    def __init__(self, documents: List[Dict[str, Any]]):
        self._documents = documents

    def __aiter__(self) -> "_Cursor":
        self._iter = iter(self._documents)
        return self

    async def __anext__(self) -> Dict[str, Any]:
        try:
            return next(self._iter)
        except StopIteration:
            raise StopAsyncIteration


def _duplicate_error(index: str) -> MongoDuplicateKeyError:
    message = f"E11000 duplicate key error collection: db.branches index: {index} dup key"
    return MongoDuplicateKeyError(
        message,
        code=11000,
        details={"errmsg": message, "keyValue": {"franchise_id": "f", "name": "North"}},
    )


@pytest.fixture
def collection() -> MagicMock:
    coll = MagicMock()
    coll.insert_one = AsyncMock()
    coll.find_one = AsyncMock(return_value=None)
    coll.count_documents = AsyncMock(return_value=0)
    coll.delete_one = AsyncMock()
    coll.update_one = AsyncMock()
    coll.find_one_and_update = AsyncMock(return_value=None)
    coll.replace_one = AsyncMock()
    coll.create_index = AsyncMock()
    return coll


@pytest.fixture
def client(collection: MagicMock) -> MagicMock:
    database = MagicMock()
    database.__getitem__.return_value = collection
    mongo_client = MagicMock()
    mongo_client.__getitem__.return_value = database
    mongo_client.admin.command = AsyncMock(return_value={"ok": 1})
    mongo_client.close = AsyncMock()
    return mongo_client


@pytest.fixture
def store(client: MagicMock) -> MongoDocumentStore:
    return MongoDocumentStore(client, "franchises-db")


class TestMongoDocumentStore:
    """Test the pymongo-backed store."""

    @pytest.mark.asyncio
    async def test_insert_starts_at_version_zero(
        self, store: MongoDocumentStore, collection: MagicMock
    ) -> None:
        stored = await store.insert("franchises", {"_id": "a", "name": "Acme"})

        assert stored == {"_id": "a", "name": "Acme", "version": 0}
        collection.insert_one.assert_awaited_once_with(stored)

    @pytest.mark.asyncio
    async def test_insert_translates_duplicate_key(
        self, store: MongoDocumentStore, collection: MagicMock
    ) -> None:
        collection.insert_one.side_effect = _duplicate_error("ux_branch_franchise_name")

        with pytest.raises(DuplicateKeyError) as exc_info:
            await store.insert("branches", {"_id": "b", "franchise_id": "f", "name": "North"})

        assert exc_info.value.index_name == "ux_branch_franchise_name"
        assert exc_info.value.key == {"franchise_id": "f", "name": "North"}

    def test_duplicate_index_name(self) -> None:
        assert duplicate_index_name(_duplicate_error("ux_franchise_name")) == "ux_franchise_name"

    @pytest.mark.asyncio
    async def test_connection_failure_becomes_store_error(
        self, store: MongoDocumentStore, collection: MagicMock
    ) -> None:
        collection.find_one.side_effect = ConnectionFailure("down")

        with pytest.raises(StoreError):
            await store.find_by_id("franchises", "a")

    @pytest.mark.asyncio
    async def test_find_where_passes_regex_through(
        self, store: MongoDocumentStore, collection: MagicMock
    ) -> None:
        collection.find = MagicMock(return_value=_Cursor([{"_id": "1", "name": "Widget"}]))
        pattern = re.compile("wid", re.IGNORECASE)

        found = [d async for d in store.find_where("products", {"name": pattern})]

        assert found == [{"_id": "1", "name": "Widget"}]
        collection.find.assert_called_once_with({"name": pattern})

    @pytest.mark.asyncio
    async def test_update_fields_increments_version(
        self, store: MongoDocumentStore, collection: MagicMock
    ) -> None:
        collection.update_one.return_value = MagicMock(matched_count=1)

        matched = await store.update_fields("products", {"_id": "p"}, {"stock": 3})

        assert matched == 1
        collection.update_one.assert_awaited_once_with(
            {"_id": "p"}, {"$set": {"stock": 3}, "$inc": {"version": 1}}
        )

    @pytest.mark.asyncio
    async def test_find_and_update_returns_after(
        self, store: MongoDocumentStore, collection: MagicMock
    ) -> None:
        collection.find_one_and_update.return_value = {"_id": "p", "stock": 3, "version": 2}

        updated = await store.find_and_update("products", {"_id": "p"}, {"stock": 3})

        assert updated["version"] == 2
        _, kwargs = collection.find_one_and_update.call_args
        assert kwargs["return_document"] == ReturnDocument.AFTER

    @pytest.mark.asyncio
    async def test_replace_filters_on_version(
        self, store: MongoDocumentStore, collection: MagicMock
    ) -> None:
        collection.replace_one.return_value = MagicMock(matched_count=1)

        replaced = await store.replace("franchises", {"_id": "a", "name": "B"}, 3)

        assert replaced == {"_id": "a", "name": "B", "version": 4}
        collection.replace_one.assert_awaited_once_with(
            {"_id": "a", "version": 3}, {"_id": "a", "name": "B", "version": 4}
        )

    @pytest.mark.asyncio
    async def test_replace_version_mismatch(
        self, store: MongoDocumentStore, collection: MagicMock
    ) -> None:
        collection.replace_one.return_value = MagicMock(matched_count=0)
        assert await store.replace("franchises", {"_id": "a"}, 3) is None

    @pytest.mark.asyncio
    async def test_delete_by_id(
        self, store: MongoDocumentStore, collection: MagicMock
    ) -> None:
        collection.delete_one.return_value = MagicMock(deleted_count=0)
        assert await store.delete_by_id("franchises", "a") is False

    @pytest.mark.asyncio
    async def test_ensure_unique_index(
        self, store: MongoDocumentStore, collection: MagicMock
    ) -> None:
        await store.ensure_unique_index(
            "products", "ux_product_branch_name", ["branch_id", "name"]
        )

        collection.create_index.assert_awaited_once_with(
            [("branch_id", ASCENDING), ("name", ASCENDING)],
            name="ux_product_branch_name",
            unique=True,
        )

    @pytest.mark.asyncio
    async def test_ping_and_close(
        self, store: MongoDocumentStore, client: MagicMock
    ) -> None:
        assert await store.ping() is True

        client.admin.command.side_effect = ConnectionFailure("down")
        assert await store.ping() is False

        await store.close()
        client.close.assert_awaited_once()
