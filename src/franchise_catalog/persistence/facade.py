"""
Hydration facade over the three collection adapters.

The store keeps franchises, branches and products in flat collections
related only by id. The facade rebuilds nested views from them at read
time, computes the cross-collection reports and enforces the parent/child
relationship rules the store cannot express.
"""

import asyncio
import dataclasses
from typing import Dict, List, Optional

from ..core.exceptions import (
    BranchNotFoundError,
    BranchNotInFranchiseError,
    DataIntegrityError,
    FranchiseNotFoundError,
    ProductNotFoundError,
    ProductNotInBranchError,
)
from ..core.logging import get_logger
from ..domain.models import Branch, Franchise, MaxStockEntry, Product, ProductGlobalView
from .branch_adapter import BranchAdapter
from .franchise_adapter import FranchiseAdapter
from .product_adapter import ProductAdapter

logger = get_logger(__name__)


class CatalogFacade:
    """Catalog operations across franchises, branches and products."""

    def __init__(
        self,
        franchises: FranchiseAdapter,
        branches: BranchAdapter,
        products: ProductAdapter,
    ) -> None:
        self.franchises = franchises
        self.branches = branches
        self.products = products

    async def ensure_indexes(self) -> None:
        """Declare the unique index of every collection."""
        await self.franchises.ensure_indexes()
        await self.branches.ensure_indexes()
        await self.products.ensure_indexes()

    # Hydration

    async def _hydrate_branch(self, branch: Branch) -> Branch:
        products = await self.products.list_by_branch(branch.id)
        return dataclasses.replace(branch, products=products)

    async def _hydrate_branches(self, branches: List[Branch]) -> List[Branch]:
        return list(await asyncio.gather(*(self._hydrate_branch(b) for b in branches)))

    async def _hydrate_franchise(
        self, franchise: Franchise, include_products: bool = True
    ) -> Franchise:
        branches = await self.branches.list_by_franchise(franchise.id)
        if include_products:
            branches = await self._hydrate_branches(branches)
        return dataclasses.replace(franchise, branches=branches)

    async def _require_franchise(self, franchise_id: str) -> None:
        if not await self.franchises.exists(franchise_id):
            raise FranchiseNotFoundError(franchise_id, component="CatalogFacade")

    async def _branch_of_franchise(self, franchise_id: str, branch_id: str) -> Branch:
        branch = await self.branches.get_by_id(branch_id)
        if branch is None:
            raise BranchNotFoundError(branch_id, component="CatalogFacade")
        if branch.franchise_id != franchise_id:
            raise BranchNotInFranchiseError(
                branch_id, franchise_id, component="CatalogFacade"
            )
        return branch

    async def _product_of_branch(self, branch_id: str, product_id: str) -> Product:
        product = await self.products.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(product_id, component="CatalogFacade")
        if product.branch_id != branch_id:
            raise ProductNotInBranchError(product_id, branch_id, component="CatalogFacade")
        return product

    # Franchises

    async def create_franchise(self, name: str) -> Franchise:
        return await self.franchises.create(name)

    async def get_franchise_by_id(self, franchise_id: str) -> Franchise:
        """Franchise with its branches and their products."""
        franchise = await self.franchises.get_by_id(franchise_id)
        if franchise is None:
            raise FranchiseNotFoundError(franchise_id, component="CatalogFacade")
        return await self._hydrate_franchise(franchise)

    async def get_franchise_by_name(self, name: str) -> Franchise:
        franchise = await self.franchises.get_by_name(name)
        if franchise is None:
            raise FranchiseNotFoundError(name, lookup="name", component="CatalogFacade")
        return await self._hydrate_franchise(franchise)

    async def list_franchises(self, include_products: bool = False) -> List[Franchise]:
        """Every franchise with its branches; products only when requested."""
        franchises = [f async for f in self.franchises.list_all()]
        return list(
            await asyncio.gather(
                *(self._hydrate_franchise(f, include_products) for f in franchises)
            )
        )

    async def update_franchise(self, franchise_id: str, changes: Franchise) -> Franchise:
        return await self.franchises.update(franchise_id, changes)

    async def delete_franchise(self, franchise_id: str) -> None:
        await self.franchises.delete(franchise_id)

    # Branches

    async def add_branch(self, franchise_id: str, name: str) -> Branch:
        await self._require_franchise(franchise_id)
        return await self.branches.create(franchise_id, name)

    async def get_branch_by_id(self, branch_id: str) -> Branch:
        """Branch with its products."""
        branch = await self.branches.get_by_id(branch_id)
        if branch is None:
            raise BranchNotFoundError(branch_id, component="CatalogFacade")
        return await self._hydrate_branch(branch)

    async def list_branches(self, franchise_id: str) -> List[Branch]:
        """Branches of a franchise, each with its products.

        An empty result is re-checked so that a missing franchise raises
        instead of looking like a franchise without branches.
        """
        branches = await self.branches.list_by_franchise(franchise_id)
        if not branches:
            await self._require_franchise(franchise_id)
            return []
        return await self._hydrate_branches(branches)

    async def update_branch(self, branch_id: str, changes: Branch) -> Branch:
        return await self.branches.update(branch_id, changes)

    async def delete_branch(self, branch_id: str) -> None:
        await self.branches.delete(branch_id)

    # Products scoped to a franchise and branch

    async def add_product(
        self, franchise_id: str, branch_id: str, name: str, stock: int
    ) -> Product:
        await self._branch_of_franchise(franchise_id, branch_id)
        return await self.products.create(branch_id, name, stock)

    async def delete_product(
        self, franchise_id: str, branch_id: str, product_id: str
    ) -> None:
        await self._branch_of_franchise(franchise_id, branch_id)
        await self._product_of_branch(branch_id, product_id)
        await self.products.delete(product_id)

    async def update_stock(
        self, franchise_id: str, branch_id: str, product_id: str, stock: int
    ) -> Product:
        await self._branch_of_franchise(franchise_id, branch_id)
        await self._product_of_branch(branch_id, product_id)
        return await self.products.update_stock(product_id, stock)

    async def products_of_branch(self, franchise_id: str, branch_id: str) -> List[Product]:
        await self._branch_of_franchise(franchise_id, branch_id)
        return await self.products.list_by_branch(branch_id)

    # Products

    async def update_product(self, product_id: str, changes: Product) -> Product:
        return await self.products.update(product_id, changes)

    async def all_products(self) -> List[Product]:
        return await self.products.list_all()

    async def search_products(self, term: str) -> List[Product]:
        return await self.products.search_by_name(term)

    # Reports

    @staticmethod
    def _global_view(product: Product, branch: Branch) -> ProductGlobalView:
        return ProductGlobalView(
            product_id=product.id,
            product_name=product.name,
            stock=product.stock,
            branch_id=branch.id,
            branch_name=branch.name,
            franchise_id=branch.franchise_id,
        )

    @staticmethod
    def _orphan_error(product: Product) -> DataIntegrityError:
        return DataIntegrityError(
            f"Product {product.id} references missing branch {product.branch_id}",
            details={"product_id": product.id, "branch_id": product.branch_id},
            component="CatalogFacade",
        )

    async def product_global_view(self, product_id: str) -> ProductGlobalView:
        """A product flattened with its branch and franchise ids."""
        product = await self.products.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(product_id, component="CatalogFacade")
        branch = await self.branches.get_by_id(product.branch_id)
        if branch is None:
            logger.error(
                "Orphaned product", product_id=product.id, branch_id=product.branch_id
            )
            raise self._orphan_error(product)
        return self._global_view(product, branch)

    async def all_products_view(self) -> List[ProductGlobalView]:
        """Every product flattened, looking each branch up once per call."""
        branch_cache: Dict[str, Optional[Branch]] = {}
        views = []
        for product in await self.products.list_all():
            if product.branch_id not in branch_cache:
                branch_cache[product.branch_id] = await self.branches.get_by_id(
                    product.branch_id
                )
            branch = branch_cache[product.branch_id]
            if branch is None:
                logger.error(
                    "Orphaned product", product_id=product.id, branch_id=product.branch_id
                )
                raise self._orphan_error(product)
            views.append(self._global_view(product, branch))
        return views

    async def _max_stock_entry(self, branch: Branch) -> MaxStockEntry:
        products = await self.products.list_by_branch(branch.id)
        if not products:
            return MaxStockEntry(branch_id=branch.id, branch_name=branch.name)
        best = max(products, key=lambda p: p.stock or 0)
        return MaxStockEntry(
            branch_id=branch.id,
            branch_name=branch.name,
            product_id=best.id,
            product_name=best.name,
            stock=best.stock or 0,
        )

    async def max_stock_per_branch(self, franchise_id: str) -> List[MaxStockEntry]:
        """The best-stocked product of every branch of a franchise, in branch order."""
        branches = await self.branches.list_by_franchise(franchise_id)
        if not branches:
            await self._require_franchise(franchise_id)
            return []
        return list(await asyncio.gather(*(self._max_stock_entry(b) for b in branches)))
