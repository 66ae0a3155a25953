"""
Branch collection adapter.
"""

import dataclasses
from typing import List, Optional

from ..core.exceptions import BranchNotFoundError, DuplicateBranchError, FranchiseNotFoundError
from ..core.logging import get_logger
from ..domain.models import Branch
from .adapter import GenericAdapter
from .documents import BranchDocument, generate_id, utc_now
from .franchise_adapter import FranchiseAdapter
from .store import DocumentStore, DuplicateKeyError

logger = get_logger(__name__)


class BranchAdapter(GenericAdapter[Branch, BranchDocument, str]):
    """Branches, unique by name within their franchise."""

    not_found_error = BranchNotFoundError

    def __init__(self, store: DocumentStore, franchises: FranchiseAdapter) -> None:
        super().__init__(store, Branch, BranchDocument)
        self.franchises = franchises

    async def ensure_indexes(self) -> None:
        index = BranchDocument.unique_index
        await self.store.ensure_unique_index(self.collection, index.name, index.fields)

    async def _require_franchise(self, franchise_id: str) -> None:
        if not await self.franchises.exists(franchise_id):
            raise FranchiseNotFoundError(franchise_id, component="BranchAdapter")

    async def create(self, franchise_id: str, name: str) -> Branch:
        """Create a branch under an existing franchise."""
        await self._require_franchise(franchise_id)
        if await self.exists_by_query({"franchise_id": franchise_id, "name": name}):
            raise DuplicateBranchError(franchise_id, name, component="BranchAdapter")

        now = utc_now()
        branch = Branch(
            id=generate_id(),
            franchise_id=franchise_id,
            name=name,
            created_at=now,
            updated_at=now,
        )
        try:
            created = await self.save(branch)
        except DuplicateKeyError as e:
            raise DuplicateBranchError(franchise_id, name, component="BranchAdapter") from e

        logger.info(
            "Branch created", branch_id=created.id, franchise_id=franchise_id, name=name
        )
        return created

    async def get_by_id(self, branch_id: str) -> Optional[Branch]:
        return await self.find_by_id(branch_id)

    async def exists(self, branch_id: str) -> bool:
        return await self.exists_by_query({"id": branch_id})

    async def list_by_franchise(self, franchise_id: str) -> List[Branch]:
        return await self.find_by_query({"franchise_id": franchise_id})

    async def update(self, branch_id: str, changes: Branch) -> Branch:
        """Merge the present fields of ``changes`` into the stored branch.

        Moving a branch to another franchise requires that franchise to exist.
        """
        new_franchise_id = (changes.franchise_id or "").strip()
        if new_franchise_id:
            await self._require_franchise(new_franchise_id)

        changes = dataclasses.replace(changes, updated_at=utc_now())
        try:
            updated = await self.merge_non_null_and_save(branch_id, changes)
        except DuplicateKeyError as e:
            scope = e.key.get("franchise_id") or new_franchise_id
            if not scope:
                stored = await self.get_by_id(branch_id)
                scope = stored.franchise_id if stored else None
            raise DuplicateBranchError(
                scope,
                e.key.get("name") or (changes.name or "").strip(),
                component="BranchAdapter",
            ) from e

        logger.info("Branch updated", branch_id=branch_id)
        return updated

    async def delete(self, branch_id: str) -> None:
        """Delete a branch; its products are not cascaded."""
        if not await self.delete_by_id(branch_id):
            raise BranchNotFoundError(branch_id, component="BranchAdapter")
        logger.info("Branch deleted", branch_id=branch_id)
