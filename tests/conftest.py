"""
Pytest configuration and fixtures for the Franchise Catalog.
Only the MongoDB server is mocked; everything else runs on the in-memory store.
"""

from typing import Generator

import pytest
from fastapi.testclient import TestClient

from franchise_catalog.bootstrap import CatalogContainer, build_container
from franchise_catalog.core.config import Config, Environment
from franchise_catalog.persistence.branch_adapter import BranchAdapter
from franchise_catalog.persistence.facade import CatalogFacade
from franchise_catalog.persistence.franchise_adapter import FranchiseAdapter
from franchise_catalog.persistence.memory_store import InMemoryDocumentStore
from franchise_catalog.persistence.product_adapter import ProductAdapter
from franchise_catalog.services.catalog_service import CatalogService
from franchise_catalog.web.app import create_app


@pytest.fixture
def test_config() -> Config:
    return Config(environment=Environment.TESTING)


@pytest.fixture
def memory_store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def container(memory_store: InMemoryDocumentStore) -> CatalogContainer:
    return build_container(store=memory_store)


@pytest.fixture
def franchise_adapter(container: CatalogContainer) -> FranchiseAdapter:
    return container.franchises


@pytest.fixture
def branch_adapter(container: CatalogContainer) -> BranchAdapter:
    return container.branches


@pytest.fixture
def product_adapter(container: CatalogContainer) -> ProductAdapter:
    return container.products


@pytest.fixture
def facade(container: CatalogContainer) -> CatalogFacade:
    return container.facade


@pytest.fixture
def service(container: CatalogContainer) -> CatalogService:
    return container.service


@pytest.fixture
def client(
    test_config: Config, memory_store: InMemoryDocumentStore
) -> Generator[TestClient, None, None]:
    """API client on an in-memory store, with indexes created at startup."""
    app = create_app(test_config, store=memory_store)
    with TestClient(app) as test_client:
        yield test_client
