"""
Component wiring for the Franchise Catalog.

Builds the document store selected by configuration and assembles the
adapters, facade and service on top of it.
"""

from dataclasses import dataclass
from typing import Optional

from .core.config import Config, StoreBackend
from .core.exceptions import ConfigurationError
from .core.logging import get_logger
from .persistence.branch_adapter import BranchAdapter
from .persistence.facade import CatalogFacade
from .persistence.franchise_adapter import FranchiseAdapter
from .persistence.memory_store import InMemoryDocumentStore
from .persistence.product_adapter import ProductAdapter
from .persistence.store import DocumentStore
from .services.catalog_service import CatalogService

logger = get_logger(__name__)


def create_store(config: Config) -> DocumentStore:
    """Create the document store for the configured backend."""
    backend = config.store.backend
    if backend == StoreBackend.MEMORY:
        logger.info("Using in-memory document store")
        return InMemoryDocumentStore()
    if backend == StoreBackend.MONGO:
        from .persistence.mongo_store import MongoDocumentStore

        logger.info(
            "Using MongoDB document store",
            uri=config.store.uri,
            database=config.store.database,
        )
        return MongoDocumentStore.from_config(config.store)
    raise ConfigurationError(
        f"Unsupported store backend: {backend}", component="bootstrap"
    )


@dataclass
class CatalogContainer:
    """Every long-lived catalog component, built once per process."""

    store: DocumentStore
    franchises: FranchiseAdapter
    branches: BranchAdapter
    products: ProductAdapter
    facade: CatalogFacade
    service: CatalogService

    async def ensure_indexes(self) -> None:
        await self.facade.ensure_indexes()

    async def close(self) -> None:
        await self.store.close()


def build_container(
    config: Optional[Config] = None, store: Optional[DocumentStore] = None
) -> CatalogContainer:
    """Assemble the catalog on ``store``, or on a store built from ``config``."""
    if store is None:
        store = create_store(config or Config.from_env())
    franchises = FranchiseAdapter(store)
    branches = BranchAdapter(store, franchises)
    products = ProductAdapter(store, branches)
    facade = CatalogFacade(franchises, branches, products)
    return CatalogContainer(
        store=store,
        franchises=franchises,
        branches=branches,
        products=products,
        facade=facade,
        service=CatalogService(facade),
    )
