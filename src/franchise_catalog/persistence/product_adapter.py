"""
Product collection adapter.
"""

import dataclasses
import re
from typing import List, Optional

from ..core.exceptions import (
    BranchNotFoundError,
    DuplicateProductError,
    ProductNotFoundError,
    ValidationError,
)
from ..core.logging import get_logger
from ..domain.models import Product
from .adapter import GenericAdapter
from .branch_adapter import BranchAdapter
from .documents import ProductDocument, generate_id, utc_now
from .store import DocumentStore, DuplicateKeyError

logger = get_logger(__name__)


def name_contains(term: str) -> "re.Pattern[str]":
    """Case-insensitive "contains" pattern matching ``term`` literally."""
    return re.compile(re.escape(term), re.IGNORECASE)


class ProductAdapter(GenericAdapter[Product, ProductDocument, str]):
    """Products, unique by name within their branch."""

    not_found_error = ProductNotFoundError

    def __init__(self, store: DocumentStore, branches: BranchAdapter) -> None:
        super().__init__(store, Product, ProductDocument)
        self.branches = branches

    async def ensure_indexes(self) -> None:
        index = ProductDocument.unique_index
        await self.store.ensure_unique_index(self.collection, index.name, index.fields)

    async def _require_branch(self, branch_id: str) -> None:
        if not await self.branches.exists(branch_id):
            raise BranchNotFoundError(branch_id, component="ProductAdapter")

    async def create(self, branch_id: str, name: str, stock: int) -> Product:
        """Create a product in an existing branch."""
        await self._require_branch(branch_id)
        if await self.exists_by_query({"branch_id": branch_id, "name": name}):
            raise DuplicateProductError(branch_id, name, component="ProductAdapter")

        now = utc_now()
        product = Product(
            id=generate_id(),
            branch_id=branch_id,
            name=name,
            stock=stock,
            created_at=now,
            updated_at=now,
        )
        try:
            created = await self.save(product)
        except DuplicateKeyError as e:
            raise DuplicateProductError(branch_id, name, component="ProductAdapter") from e

        logger.info(
            "Product created", product_id=created.id, branch_id=branch_id, name=name
        )
        return created

    async def get_by_id(self, product_id: str) -> Optional[Product]:
        return await self.find_by_id(product_id)

    async def list_by_branch(self, branch_id: str) -> List[Product]:
        return await self.find_by_query({"branch_id": branch_id})

    async def list_all(self) -> List[Product]:
        return [product async for product in self.find_all()]

    async def search_by_name(self, term: str) -> List[Product]:
        """Products whose name contains ``term``, ignoring case."""
        return await self.find_by_query({"name": name_contains(term)})

    async def update_stock(self, product_id: str, stock: int) -> Product:
        """Set the stock of a product with a single targeted update."""
        if stock < 0:
            raise ValidationError(
                "stock", stock, "must be zero or greater", component="ProductAdapter"
            )
        matched = await self.update_first_matched(
            {"id": product_id}, {"stock": stock, "updated_at": utc_now()}
        )
        if not matched:
            raise ProductNotFoundError(product_id, component="ProductAdapter")

        product = await self.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(product_id, component="ProductAdapter")

        logger.info("Product stock updated", product_id=product_id, stock=stock)
        return product

    async def update(self, product_id: str, changes: Product) -> Product:
        """Merge the present fields of ``changes`` into the stored product.

        Moving a product to another branch requires that branch to exist.
        """
        new_branch_id = (changes.branch_id or "").strip()
        if new_branch_id:
            await self._require_branch(new_branch_id)

        changes = dataclasses.replace(changes, updated_at=utc_now())
        try:
            updated = await self.merge_non_null_and_save(product_id, changes)
        except DuplicateKeyError as e:
            scope = e.key.get("branch_id") or new_branch_id
            if not scope:
                stored = await self.get_by_id(product_id)
                scope = stored.branch_id if stored else None
            raise DuplicateProductError(
                scope,
                e.key.get("name") or (changes.name or "").strip(),
                component="ProductAdapter",
            ) from e

        logger.info("Product updated", product_id=product_id)
        return updated

    async def delete(self, product_id: str) -> None:
        if not await self.delete_by_id(product_id):
            raise ProductNotFoundError(product_id, component="ProductAdapter")
        logger.info("Product deleted", product_id=product_id)
