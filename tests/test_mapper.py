"""
Tests for the structural entity/document mapper.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from franchise_catalog.domain.models import Branch, Franchise, Product
from franchise_catalog.persistence.documents import FranchiseDocument, ProductDocument
from franchise_catalog.persistence.mapper import (
    EntityMapper,
    field_names,
    field_plan,
    map_list,
    map_object,
)


@dataclass
class ProductSummary:
    name: Optional[str] = None
    stock: Optional[int] = None
    note: str = "n/a"


@dataclass
class BranchSummary:
    name: Optional[str] = None
    products: List[ProductSummary] = field(default_factory=list)


class TestEntityMapper:
    """Test entity <-> document mapping."""

    def test_none_maps_to_none(self) -> None:
        mapper = EntityMapper(Product, ProductDocument)
        assert mapper.to_document(None) is None
        assert mapper.to_entity(None) is None

    def test_product_round_trip(self) -> None:
        now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        product = Product(
            id="p-1", branch_id="b-1", name="Widget", stock=7, created_at=now, updated_at=now
        )
        mapper = EntityMapper(Product, ProductDocument)

        document = mapper.to_document(product)
        assert isinstance(document, ProductDocument)
        assert document.version is None
        assert mapper.to_entity(document) == product

    def test_transient_fields_are_not_stored(self) -> None:
        franchise = Franchise(id="f-1", name="Acme", branches=[Branch(name="North")])
        document = EntityMapper(Franchise, FranchiseDocument).to_document(franchise)

        assert "branches" not in document.model_dump()
        assert document.name == "Acme"

    def test_fields_missing_on_target_keep_defaults(self) -> None:
        summary = map_object(Product(name="Widget", stock=3), ProductSummary)
        assert summary == ProductSummary(name="Widget", stock=3, note="n/a")

    def test_nested_lists_are_mapped_element_wise(self) -> None:
        branch = Branch(name="North", products=[Product(name="Widget", stock=10)])
        summary = map_object(branch, BranchSummary)

        assert summary.products == [ProductSummary(name="Widget", stock=10)]

    def test_map_list(self) -> None:
        products = [Product(name="A", stock=1), Product(name="B", stock=2)]
        assert [s.name for s in map_list(products, ProductSummary)] == ["A", "B"]

    def test_field_plan_is_cached(self) -> None:
        first = field_plan(Product, ProductDocument)
        second = field_plan(Product, ProductDocument)
        assert first is second
        assert [name for name, _ in first] == [
            name for name in field_names(ProductDocument) if name != "version"
        ]
