"""
Catalog use-case service.

Validates and normalizes caller input (names, stock, search terms) before
delegating to the hydration facade, and logs every operation with its
arguments and outcome.
"""

import functools
from typing import Any, Awaitable, Callable, List, Optional, TypeVar

from ..core.exceptions import CatalogError, ValidationError
from ..core.logging import OperationTimer, get_logger
from ..domain.models import (
    Branch,
    Franchise,
    MaxStockEntry,
    Product,
    ProductGlobalView,
)
from ..persistence.facade import CatalogFacade

logger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def logged_operation(operation: str) -> Callable[[F], F]:
    """Decorator timing an async service call and logging its failures."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(self: "CatalogService", *args: Any, **kwargs: Any) -> Any:
            logger.debug(f"{operation} requested", call_args=args, call_kwargs=kwargs)
            try:
                with OperationTimer(logger, operation):
                    return await func(self, *args, **kwargs)
            except CatalogError as e:
                logger.warning(
                    f"{operation} failed",
                    error_type=type(e).__name__,
                    error_code=e.error_code,
                    error=e.message,
                )
                raise

        return wrapper  # type: ignore

    return decorator


def require_name(value: Optional[str], field: str = "name") -> str:
    """Strip a required name, rejecting missing or blank values."""
    if value is None or not value.strip():
        raise ValidationError(field, value, "is required", component="CatalogService")
    return value.strip()


def optional_name(value: Optional[str], field: str = "name") -> Optional[str]:
    """Strip an optional name; a provided value must not be blank."""
    if value is None:
        return None
    return require_name(value, field)


def require_stock(value: Any) -> int:
    """Stock must be an integer of zero or more."""
    if value is None or isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(
            "stock", value, "must be an integer", component="CatalogService"
        )
    if value < 0:
        raise ValidationError(
            "stock", value, "must be zero or greater", component="CatalogService"
        )
    return value


class CatalogService:
    """Validated entry point to the catalog."""

    def __init__(self, facade: CatalogFacade):
        self.facade = facade

    # Franchises

    @logged_operation("create_franchise")
    async def create_franchise(self, name: Optional[str]) -> Franchise:
        return await self.facade.create_franchise(require_name(name))

    @logged_operation("get_franchise")
    async def get_franchise(self, franchise_id: str) -> Franchise:
        return await self.facade.get_franchise_by_id(franchise_id)

    @logged_operation("get_franchise_by_name")
    async def get_franchise_by_name(self, name: Optional[str]) -> Franchise:
        return await self.facade.get_franchise_by_name(require_name(name))

    @logged_operation("list_franchises")
    async def list_franchises(self, include_products: bool = False) -> List[Franchise]:
        return await self.facade.list_franchises(include_products)

    @logged_operation("update_franchise")
    async def update_franchise(
        self, franchise_id: str, name: Optional[str] = None
    ) -> Franchise:
        return await self.facade.update_franchise(
            franchise_id, Franchise(name=optional_name(name))
        )

    @logged_operation("delete_franchise")
    async def delete_franchise(self, franchise_id: str) -> None:
        await self.facade.delete_franchise(franchise_id)

    # Branches

    @logged_operation("add_branch")
    async def add_branch(self, franchise_id: str, name: Optional[str]) -> Branch:
        return await self.facade.add_branch(franchise_id, require_name(name))

    @logged_operation("get_branch")
    async def get_branch(self, branch_id: str) -> Branch:
        return await self.facade.get_branch_by_id(branch_id)

    @logged_operation("list_branches")
    async def list_branches(self, franchise_id: str) -> List[Branch]:
        return await self.facade.list_branches(franchise_id)

    @logged_operation("update_branch")
    async def update_branch(
        self,
        branch_id: str,
        name: Optional[str] = None,
        franchise_id: Optional[str] = None,
    ) -> Branch:
        changes = Branch(
            name=optional_name(name),
            franchise_id=optional_name(franchise_id, "franchise_id"),
        )
        return await self.facade.update_branch(branch_id, changes)

    @logged_operation("delete_branch")
    async def delete_branch(self, branch_id: str) -> None:
        await self.facade.delete_branch(branch_id)

    # Products

    @logged_operation("add_product")
    async def add_product(
        self, franchise_id: str, branch_id: str, name: Optional[str], stock: Any
    ) -> Product:
        return await self.facade.add_product(
            franchise_id, branch_id, require_name(name), require_stock(stock)
        )

    @logged_operation("delete_product")
    async def delete_product(
        self, franchise_id: str, branch_id: str, product_id: str
    ) -> None:
        await self.facade.delete_product(franchise_id, branch_id, product_id)

    @logged_operation("update_stock")
    async def update_stock(
        self, franchise_id: str, branch_id: str, product_id: str, stock: Any
    ) -> Product:
        return await self.facade.update_stock(
            franchise_id, branch_id, product_id, require_stock(stock)
        )

    @logged_operation("products_of_branch")
    async def products_of_branch(self, franchise_id: str, branch_id: str) -> List[Product]:
        return await self.facade.products_of_branch(franchise_id, branch_id)

    @logged_operation("update_product")
    async def update_product(
        self,
        product_id: str,
        name: Optional[str] = None,
        stock: Any = None,
        branch_id: Optional[str] = None,
    ) -> Product:
        changes = Product(
            name=optional_name(name),
            stock=require_stock(stock) if stock is not None else None,
            branch_id=optional_name(branch_id, "branch_id"),
        )
        return await self.facade.update_product(product_id, changes)

    @logged_operation("all_products")
    async def all_products(self) -> List[Product]:
        return await self.facade.all_products()

    @logged_operation("search_products")
    async def search_products(self, term: Optional[str]) -> List[Product]:
        """Products whose name contains ``term``; all products when nothing matches."""
        term = (term or "").strip()
        found = await self.facade.search_products(term)
        if found:
            return found
        logger.debug("Search matched nothing, returning all products", term=term)
        return await self.facade.all_products()

    # Reports

    @logged_operation("product_global_view")
    async def product_global_view(self, product_id: str) -> ProductGlobalView:
        return await self.facade.product_global_view(product_id)

    @logged_operation("all_products_view")
    async def all_products_view(self) -> List[ProductGlobalView]:
        return await self.facade.all_products_view()

    @logged_operation("max_stock_per_branch")
    async def max_stock_per_branch(self, franchise_id: str) -> List[MaxStockEntry]:
        return await self.facade.max_stock_per_branch(franchise_id)
