"""
Franchise collection adapter.
"""

import dataclasses
from typing import AsyncIterator, Optional

from ..core.exceptions import DuplicateFranchiseError, FranchiseNotFoundError
from ..core.logging import get_logger
from ..domain.models import Franchise
from .adapter import GenericAdapter
from .documents import FranchiseDocument, generate_id, utc_now
from .store import DocumentStore, DuplicateKeyError

logger = get_logger(__name__)


class FranchiseAdapter(GenericAdapter[Franchise, FranchiseDocument, str]):
    """Franchises, unique by name."""

    not_found_error = FranchiseNotFoundError

    def __init__(self, store: DocumentStore) -> None:
        super().__init__(store, Franchise, FranchiseDocument)

    async def ensure_indexes(self) -> None:
        index = FranchiseDocument.unique_index
        await self.store.ensure_unique_index(self.collection, index.name, index.fields)

    async def create(self, name: str) -> Franchise:
        """Create a franchise; raises DuplicateFranchiseError if the name is taken."""
        if await self.exists_by_query({"name": name}):
            raise DuplicateFranchiseError(name, component="FranchiseAdapter")

        now = utc_now()
        franchise = Franchise(id=generate_id(), name=name, created_at=now, updated_at=now)
        try:
            created = await self.save(franchise)
        except DuplicateKeyError as e:
            raise DuplicateFranchiseError(name, component="FranchiseAdapter") from e

        logger.info("Franchise created", franchise_id=created.id, name=name)
        return created

    async def get_by_id(self, franchise_id: str) -> Optional[Franchise]:
        return await self.find_by_id(franchise_id)

    async def get_by_name(self, name: str) -> Optional[Franchise]:
        return await self.find_one_by_query({"name": name})

    async def exists(self, franchise_id: str) -> bool:
        return await self.exists_by_query({"id": franchise_id})

    def list_all(self) -> AsyncIterator[Franchise]:
        return self.find_all()

    async def update(self, franchise_id: str, changes: Franchise) -> Franchise:
        """Merge the present fields of ``changes`` into the stored franchise."""
        new_name = (changes.name or "").strip()
        if new_name:
            holder = await self.get_by_name(new_name)
            if holder is not None and holder.id != franchise_id:
                raise DuplicateFranchiseError(new_name, component="FranchiseAdapter")

        changes = dataclasses.replace(changes, updated_at=utc_now())
        try:
            updated = await self.merge_non_null_and_save(franchise_id, changes)
        except DuplicateKeyError as e:
            raise DuplicateFranchiseError(new_name, component="FranchiseAdapter") from e

        logger.info("Franchise updated", franchise_id=franchise_id)
        return updated

    async def delete(self, franchise_id: str) -> None:
        """Delete a franchise; its branches and products are not cascaded."""
        if not await self.delete_by_id(franchise_id):
            raise FranchiseNotFoundError(franchise_id, component="FranchiseAdapter")
        logger.info("Franchise deleted", franchise_id=franchise_id)
