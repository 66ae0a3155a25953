"""
Persistence layer: document stores, entity mapping, collection adapters
and the hydration facade.
"""

from .adapter import GenericAdapter
from .branch_adapter import BranchAdapter
from .facade import CatalogFacade
from .franchise_adapter import FranchiseAdapter
from .mapper import EntityMapper
from .memory_store import InMemoryDocumentStore
from .merge import PresenceRule
from .product_adapter import ProductAdapter
from .store import DocumentStore, DuplicateKeyError

__all__ = [
    "BranchAdapter",
    "CatalogFacade",
    "DocumentStore",
    "DuplicateKeyError",
    "EntityMapper",
    "FranchiseAdapter",
    "GenericAdapter",
    "InMemoryDocumentStore",
    "PresenceRule",
    "ProductAdapter",
]
