"""
Process-local document store.

Keeps collections in dictionaries, enforces declared unique indexes and
document versions the way the MongoDB store does. Every operation yields
to the event loop first so concurrent callers interleave as they would
against a real server.
"""

import asyncio
import copy
import logging
import re
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional, Sequence, Tuple

from .store import (
    ID_FIELD,
    VERSION_FIELD,
    Document,
    DocumentStore,
    DuplicateKeyError,
    Filters,
)

logger = logging.getLogger(__name__)


def _matches(document: Document, filters: Filters) -> bool:
    for field_name, expected in filters.items():
        actual = document.get(field_name)
        if isinstance(expected, re.Pattern):
            if not isinstance(actual, str) or expected.search(actual) is None:
                return False
        elif actual != expected:
            return False
    return True


class InMemoryDocumentStore(DocumentStore):
    """Dictionary-backed store used by tests and the ``memory`` backend."""

    def __init__(self) -> None:
        self._collections: Dict[str, Dict[Any, Document]] = {}
        self._indexes: Dict[str, List[Tuple[str, Tuple[str, ...]]]] = {}

    def _collection(self, name: str) -> Dict[Any, Document]:
        return self._collections.setdefault(name, {})

    async def _yield(self) -> None:
        await asyncio.sleep(0)

    def _check_unique(
        self, collection: str, candidate: Document, exclude_id: Any = None
    ) -> None:
        for index_name, fields in self._indexes.get(collection, []):
            key = tuple(candidate.get(f) for f in fields)
            for other_id, other in self._collection(collection).items():
                if other_id == exclude_id:
                    continue
                if tuple(other.get(f) for f in fields) == key:
                    raise DuplicateKeyError(collection, index_name, dict(zip(fields, key)))

    def _first_match(self, collection: str, filters: Filters) -> Optional[Document]:
        for document in self._collection(collection).values():
            if _matches(document, filters):
                return document
        return None

    def _apply(self, collection: str, current: Document, changes: Mapping[str, Any]) -> Document:
        updated = copy.deepcopy(current)
        updated.update(copy.deepcopy(dict(changes)))
        updated[VERSION_FIELD] = (current.get(VERSION_FIELD) or 0) + 1
        self._check_unique(collection, updated, exclude_id=current[ID_FIELD])
        self._collection(collection)[current[ID_FIELD]] = updated
        return updated

    async def insert(self, collection: str, document: Document) -> Document:
        await self._yield()
        docs = self._collection(collection)
        stored = copy.deepcopy(document)
        if stored.get(ID_FIELD) in docs:
            raise DuplicateKeyError(collection, "_id_", {ID_FIELD: stored[ID_FIELD]})
        self._check_unique(collection, stored)
        stored[VERSION_FIELD] = 0
        docs[stored[ID_FIELD]] = stored
        return copy.deepcopy(stored)

    async def find_by_id(self, collection: str, document_id: Any) -> Optional[Document]:
        await self._yield()
        document = self._collection(collection).get(document_id)
        return copy.deepcopy(document) if document is not None else None

    async def find_all(self, collection: str) -> AsyncIterator[Document]:
        await self._yield()
        for document in list(self._collection(collection).values()):
            yield copy.deepcopy(document)

    async def find_where(self, collection: str, filters: Filters) -> AsyncIterator[Document]:
        await self._yield()
        for document in list(self._collection(collection).values()):
            if _matches(document, filters):
                yield copy.deepcopy(document)

    async def find_one_where(self, collection: str, filters: Filters) -> Optional[Document]:
        await self._yield()
        document = self._first_match(collection, filters)
        return copy.deepcopy(document) if document is not None else None

    async def count_where(self, collection: str, filters: Filters) -> int:
        await self._yield()
        return sum(1 for d in self._collection(collection).values() if _matches(d, filters))

    async def delete_by_id(self, collection: str, document_id: Any) -> bool:
        await self._yield()
        return self._collection(collection).pop(document_id, None) is not None

    async def update_fields(
        self, collection: str, filters: Filters, changes: Mapping[str, Any]
    ) -> int:
        await self._yield()
        current = self._first_match(collection, filters)
        if current is None:
            return 0
        self._apply(collection, current, changes)
        return 1

    async def find_and_update(
        self, collection: str, filters: Filters, changes: Mapping[str, Any]
    ) -> Optional[Document]:
        await self._yield()
        current = self._first_match(collection, filters)
        if current is None:
            return None
        return copy.deepcopy(self._apply(collection, current, changes))

    async def replace(
        self, collection: str, document: Document, expected_version: int
    ) -> Optional[Document]:
        await self._yield()
        current = self._collection(collection).get(document.get(ID_FIELD))
        if current is None or current.get(VERSION_FIELD) != expected_version:
            return None
        replacement = copy.deepcopy(document)
        replacement[VERSION_FIELD] = expected_version + 1
        self._check_unique(collection, replacement, exclude_id=current[ID_FIELD])
        self._collection(collection)[current[ID_FIELD]] = replacement
        return copy.deepcopy(replacement)

    async def ensure_unique_index(
        self, collection: str, name: str, fields: Sequence[str]
    ) -> None:
        indexes = self._indexes.setdefault(collection, [])
        if any(existing == name for existing, _ in indexes):
            return
        indexes.append((name, tuple(fields)))
        logger.debug(f"Declared unique index {name} on {collection}{tuple(fields)}")

    async def ping(self) -> bool:
        return True

    def clear(self) -> None:
        """Drop every document, keeping the declared indexes."""
        self._collections.clear()
