"""
Stored document shapes for the three catalog collections.

Documents mirror the entities' stored fields, add the optimistic ``version``
counter and declare their collection name, unique index and merge rules.
The ``id`` field is stored as ``_id``.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import ClassVar, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .merge import PresenceRule


@dataclass(frozen=True)
class IndexSpec:
    """A named unique index over one or more fields."""

    name: str
    fields: Tuple[str, ...]


def generate_id() -> str:
    """New server-side document id."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Current UTC time at the millisecond precision BSON dates keep."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


class CatalogDocument(BaseModel):
    """Fields shared by every stored catalog document."""

    model_config = ConfigDict(validate_assignment=True)

    collection: ClassVar[str]
    unique_index: ClassVar[IndexSpec]
    merge_rules: ClassVar[Dict[str, PresenceRule]]

    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    version: Optional[int] = None


class FranchiseDocument(CatalogDocument):
    collection: ClassVar[str] = "franchises"
    unique_index: ClassVar[IndexSpec] = IndexSpec("ux_franchise_name", ("name",))
    merge_rules: ClassVar[Dict[str, PresenceRule]] = {
        "name": PresenceRule.TEXT,
        "updated_at": PresenceRule.SCALAR,
    }

    name: Optional[str] = None


class BranchDocument(CatalogDocument):
    collection: ClassVar[str] = "branches"
    unique_index: ClassVar[IndexSpec] = IndexSpec(
        "ux_branch_franchise_name", ("franchise_id", "name")
    )
    merge_rules: ClassVar[Dict[str, PresenceRule]] = {
        "franchise_id": PresenceRule.TEXT,
        "name": PresenceRule.TEXT,
        "updated_at": PresenceRule.SCALAR,
    }

    franchise_id: Optional[str] = None
    name: Optional[str] = None


class ProductDocument(CatalogDocument):
    collection: ClassVar[str] = "products"
    unique_index: ClassVar[IndexSpec] = IndexSpec(
        "ux_product_branch_name", ("branch_id", "name")
    )
    merge_rules: ClassVar[Dict[str, PresenceRule]] = {
        "branch_id": PresenceRule.TEXT,
        "name": PresenceRule.TEXT,
        "stock": PresenceRule.SCALAR,
        "updated_at": PresenceRule.SCALAR,
    }

    branch_id: Optional[str] = None
    name: Optional[str] = None
    stock: Optional[int] = Field(default=None, ge=0)
