"""
Domain entities for the franchise -> branch -> product hierarchy.

Entities are plain dataclasses with no storage concerns. Every field is
optional so the same types double as partial updates: a field left as
None means "no change" when passed to an update operation.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass
class Product:
    """Leaf entity owned by a branch; carries a non-negative stock count."""

    id: Optional[str] = None
    branch_id: Optional[str] = None
    name: Optional[str] = None
    stock: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class Branch:
    """Mid-level entity owned by a franchise.

    ``products`` is only filled in by hydration and is never stored.
    """

    id: Optional[str] = None
    franchise_id: Optional[str] = None
    name: Optional[str] = None
    products: List[Product] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class Franchise:
    """Top-level owner entity, unique by name.

    ``branches`` is only filled in by hydration and is never stored.
    """

    id: Optional[str] = None
    name: Optional[str] = None
    branches: List[Branch] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class ProductGlobalView:
    """A product flattened together with the branch that owns it."""

    product_id: str
    product_name: str
    stock: int
    branch_id: str
    branch_name: str
    franchise_id: str


@dataclass
class MaxStockEntry:
    """Best-stocked product of one branch; product fields are None for empty branches."""

    branch_id: str
    branch_name: str
    product_id: Optional[str] = None
    product_name: Optional[str] = None
    stock: int = 0
