"""
Generic persistence adapter.

``GenericAdapter`` wraps one collection of a ``DocumentStore`` and speaks in
domain entities: it maps entities to documents on the way in and back on
the way out, and implements the partial "merge non-null and save" update.
"""

import logging
from typing import Any, AsyncIterator, Dict, Generic, List, Mapping, Optional, Type, TypeVar

import pydantic

from ..core.exceptions import OptimisticLockError, ResourceNotFoundError, ValidationError
from .documents import CatalogDocument
from .mapper import EntityMapper, field_names
from .merge import EXCLUDED_FIELDS, merge_present_fields, missing_rules
from .store import ID_FIELD, Document, DocumentStore

logger = logging.getLogger(__name__)

E = TypeVar("E")
D = TypeVar("D", bound=CatalogDocument)
I = TypeVar("I")  # noqa: E741


class GenericAdapter(Generic[E, D, I]):
    """Typed CRUD and partial updates over a single collection."""

    not_found_error: Type[ResourceNotFoundError] = ResourceNotFoundError

    def __init__(
        self, store: DocumentStore, entity_type: Type[E], document_type: Type[D]
    ) -> None:
        missing = missing_rules(field_names(document_type), document_type.merge_rules)
        if missing:
            raise TypeError(
                f"{document_type.__name__} has no merge rule for: {', '.join(missing)}"
            )
        self.store = store
        self.document_type = document_type
        self.collection = document_type.collection
        self.mapper: EntityMapper[E, D] = EntityMapper(entity_type, document_type)

    # Conversions

    def _to_document(self, entity: E) -> D:
        try:
            return self.mapper.to_document(entity)
        except pydantic.ValidationError as e:
            error = e.errors()[0]
            field = ".".join(str(part) for part in error["loc"])
            raise ValidationError(
                field, error.get("input"), error["msg"], component=type(self).__name__
            ) from e

    @staticmethod
    def _to_record(document: CatalogDocument) -> Document:
        record = document.model_dump()
        record[ID_FIELD] = record.pop("id")
        return record

    def _from_record(self, record: Document) -> D:
        values = dict(record)
        values["id"] = values.pop(ID_FIELD, None)
        return self.document_type.model_validate(values)

    def _record_to_entity(self, record: Optional[Document]) -> Optional[E]:
        if record is None:
            return None
        return self.mapper.to_entity(self._from_record(record))

    @staticmethod
    def _store_filters(filters: Mapping[str, Any]) -> Dict[str, Any]:
        return {ID_FIELD if key == "id" else key: value for key, value in filters.items()}

    # CRUD

    async def save(self, entity: E) -> E:
        """Insert the entity, or replace the stored document with the same id."""
        document = self._to_document(entity)
        existing = (
            await self.store.find_by_id(self.collection, document.id)
            if document.id is not None
            else None
        )
        if existing is None:
            stored = await self.store.insert(self.collection, self._to_record(document))
            return self._record_to_entity(stored)
        return await self._replace(document, existing["version"])

    async def _replace(self, document: D, expected_version: int) -> E:
        stored = await self.store.replace(
            self.collection, self._to_record(document), expected_version
        )
        if stored is None:
            raise OptimisticLockError(
                self.collection,
                document.id,
                expected_version,
                component=type(self).__name__,
            )
        return self._record_to_entity(stored)

    async def find_by_id(self, entity_id: I) -> Optional[E]:
        return self._record_to_entity(
            await self.store.find_by_id(self.collection, entity_id)
        )

    async def find_all(self) -> AsyncIterator[E]:
        async for record in self.store.find_all(self.collection):
            yield self._record_to_entity(record)

    async def delete_by_id(self, entity_id: I) -> bool:
        """Delete by id; deleting a missing id is not an error."""
        return await self.store.delete_by_id(self.collection, entity_id)

    async def merge_non_null_and_save(self, entity_id: I, partial: E) -> E:
        """Apply the present fields of ``partial`` onto the stored document.

        Raises the adapter's not-found error when nothing is stored under
        ``entity_id``. Store duplicate-key errors propagate unchanged.
        """
        record = await self.store.find_by_id(self.collection, entity_id)
        if record is None:
            raise self.not_found_error(str(entity_id), component=type(self).__name__)

        current = self._from_record(record)
        patch = self._to_document(partial)
        applied = merge_present_fields(
            patch, current, self.document_type.merge_rules, EXCLUDED_FIELDS
        )
        logger.debug(
            f"Merging {sorted(applied)} into {self.collection}/{entity_id} "
            f"at version {current.version}"
        )
        return await self._replace(current, current.version)

    # Query passthroughs

    async def find_by_query(self, filters: Mapping[str, Any]) -> List[E]:
        return [
            self._record_to_entity(record)
            async for record in self.store.find_where(
                self.collection, self._store_filters(filters)
            )
        ]

    async def find_one_by_query(self, filters: Mapping[str, Any]) -> Optional[E]:
        return self._record_to_entity(
            await self.store.find_one_where(self.collection, self._store_filters(filters))
        )

    async def count_by_query(self, filters: Mapping[str, Any]) -> int:
        return await self.store.count_where(self.collection, self._store_filters(filters))

    async def exists_by_query(self, filters: Mapping[str, Any]) -> bool:
        return await self.store.exists_where(self.collection, self._store_filters(filters))

    async def update_first_matched(
        self, filters: Mapping[str, Any], changes: Mapping[str, Any]
    ) -> bool:
        """Set ``changes`` on the first matching document; False if none matched."""
        matched = await self.store.update_fields(
            self.collection, self._store_filters(filters), changes
        )
        return matched > 0

    async def find_and_modify_returning_entity(
        self, filters: Mapping[str, Any], changes: Mapping[str, Any]
    ) -> Optional[E]:
        return self._record_to_entity(
            await self.store.find_and_update(
                self.collection, self._store_filters(filters), changes
            )
        )
