"""
Document store contract.

A store holds named collections of flat documents keyed by ``_id``. It
offers per-document CRUD, filtered find, atomic single-document updates
and unique indexes, but no multi-collection transactions.

Every write managed by the store keeps an integer ``version`` field on the
document: ``insert`` sets it to 0 and each replace or update increments it.
"""

from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Dict, Mapping, Optional, Sequence

Document = Dict[str, Any]
Filters = Mapping[str, Any]

ID_FIELD = "_id"
VERSION_FIELD = "version"


class DuplicateKeyError(Exception):
    """Raised by a store when a write violates a unique index."""

    def __init__(
        self,
        collection: str,
        index_name: Optional[str],
        key: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            f"Duplicate key in {collection} on index {index_name or 'unknown'}: {key}"
        )
        self.collection = collection
        self.index_name = index_name
        self.key = key or {}


class DocumentStore(ABC):
    """Abstract asynchronous document store.

    Filter values are matched by equality, except compiled ``re.Pattern``
    values which are matched as regular expressions.
    """

    @abstractmethod
    async def insert(self, collection: str, document: Document) -> Document:
        """Insert a new document and return it as stored."""
        pass

    @abstractmethod
    async def find_by_id(self, collection: str, document_id: Any) -> Optional[Document]:
        """Return the document with the given id, if any."""
        pass

    @abstractmethod
    def find_all(self, collection: str) -> AsyncIterator[Document]:
        """Iterate over every document of a collection in store order."""
        pass

    @abstractmethod
    def find_where(self, collection: str, filters: Filters) -> AsyncIterator[Document]:
        """Iterate over the documents matching ``filters``."""
        pass

    @abstractmethod
    async def find_one_where(
        self, collection: str, filters: Filters
    ) -> Optional[Document]:
        """Return the first document matching ``filters``."""
        pass

    @abstractmethod
    async def count_where(self, collection: str, filters: Filters) -> int:
        """Count the documents matching ``filters``."""
        pass

    async def exists_where(self, collection: str, filters: Filters) -> bool:
        """Whether at least one document matches ``filters``."""
        return await self.find_one_where(collection, filters) is not None

    @abstractmethod
    async def delete_by_id(self, collection: str, document_id: Any) -> bool:
        """Delete a document; returns whether one was removed."""
        pass

    @abstractmethod
    async def update_fields(
        self, collection: str, filters: Filters, changes: Mapping[str, Any]
    ) -> int:
        """Set ``changes`` on the first matching document.

        Returns the number of matched documents (0 or 1).
        """
        pass

    @abstractmethod
    async def find_and_update(
        self, collection: str, filters: Filters, changes: Mapping[str, Any]
    ) -> Optional[Document]:
        """Atomically set ``changes`` on the first match and return it updated."""
        pass

    @abstractmethod
    async def replace(
        self, collection: str, document: Document, expected_version: int
    ) -> Optional[Document]:
        """Replace a whole document if its stored version is ``expected_version``.

        Returns the stored document, or None when no document with that id
        and version exists.
        """
        pass

    @abstractmethod
    async def ensure_unique_index(
        self, collection: str, name: str, fields: Sequence[str]
    ) -> None:
        """Declare a unique index over ``fields``."""
        pass

    @abstractmethod
    async def ping(self) -> bool:
        """Whether the store is reachable."""
        pass

    async def close(self) -> None:
        """Release any resources held by the store."""
        pass
