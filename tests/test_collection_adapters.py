"""
Tests for the franchise, branch and product collection adapters.
"""

import pytest

from franchise_catalog.core.exceptions import (
    BranchNotFoundError,
    DuplicateBranchError,
    DuplicateFranchiseError,
    DuplicateProductError,
    FranchiseNotFoundError,
    ProductNotFoundError,
    ValidationError,
)
from franchise_catalog.domain.models import Branch, Franchise, Product
from franchise_catalog.persistence.branch_adapter import BranchAdapter
from franchise_catalog.persistence.franchise_adapter import FranchiseAdapter
from franchise_catalog.persistence.memory_store import InMemoryDocumentStore
from franchise_catalog.persistence.product_adapter import ProductAdapter, name_contains


class TestFranchiseAdapter:
    """Test franchise creation, lookup and updates."""

    @pytest.mark.asyncio
    async def test_create_assigns_id_and_timestamps(
        self, franchise_adapter: FranchiseAdapter
    ) -> None:
        franchise = await franchise_adapter.create("Acme")

        assert franchise.id
        assert franchise.name == "Acme"
        assert franchise.created_at is not None
        assert franchise.created_at == franchise.updated_at
        assert franchise.created_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_duplicate_name_is_rejected_without_insert(
        self, franchise_adapter: FranchiseAdapter, memory_store: InMemoryDocumentStore
    ) -> None:
        await franchise_adapter.create("Acme")

        with pytest.raises(DuplicateFranchiseError):
            await franchise_adapter.create("Acme")

        assert await memory_store.count_where("franchises", {}) == 1

    @pytest.mark.asyncio
    async def test_duplicate_key_is_translated_when_precheck_is_bypassed(
        self, franchise_adapter: FranchiseAdapter, memory_store: InMemoryDocumentStore
    ) -> None:
        await franchise_adapter.ensure_indexes()
        await franchise_adapter.create("Acme")

        async def no_match(filters: dict) -> bool:
            return False

        franchise_adapter.exists_by_query = no_match  # type: ignore

        with pytest.raises(DuplicateFranchiseError) as exc_info:
            await franchise_adapter.create("Acme")
        assert exc_info.value.details == {"name": "Acme"}

    @pytest.mark.asyncio
    async def test_get_by_name(self, franchise_adapter: FranchiseAdapter) -> None:
        created = await franchise_adapter.create("Acme")

        assert (await franchise_adapter.get_by_name("Acme")).id == created.id
        assert await franchise_adapter.get_by_name("Globex") is None

    @pytest.mark.asyncio
    async def test_update_refreshes_updated_at(
        self, franchise_adapter: FranchiseAdapter
    ) -> None:
        created = await franchise_adapter.create("Acme")

        updated = await franchise_adapter.update(created.id, Franchise(name="Acme Corp"))

        assert updated.name == "Acme Corp"
        assert updated.created_at == created.created_at
        assert updated.updated_at >= created.updated_at

    @pytest.mark.asyncio
    async def test_update_to_taken_name(self, franchise_adapter: FranchiseAdapter) -> None:
        await franchise_adapter.create("Acme")
        globex = await franchise_adapter.create("Globex")

        with pytest.raises(DuplicateFranchiseError):
            await franchise_adapter.update(globex.id, Franchise(name="Acme"))

    @pytest.mark.asyncio
    async def test_update_keeping_own_name(self, franchise_adapter: FranchiseAdapter) -> None:
        acme = await franchise_adapter.create("Acme")
        updated = await franchise_adapter.update(acme.id, Franchise(name="Acme"))
        assert updated.name == "Acme"

    @pytest.mark.asyncio
    async def test_update_missing(self, franchise_adapter: FranchiseAdapter) -> None:
        with pytest.raises(FranchiseNotFoundError):
            await franchise_adapter.update("nope", Franchise(name="Acme"))

    @pytest.mark.asyncio
    async def test_delete(self, franchise_adapter: FranchiseAdapter) -> None:
        acme = await franchise_adapter.create("Acme")

        await franchise_adapter.delete(acme.id)

        assert await franchise_adapter.get_by_id(acme.id) is None
        with pytest.raises(FranchiseNotFoundError):
            await franchise_adapter.delete(acme.id)


class TestBranchAdapter:
    """Test branch scoping and parent validation."""

    @pytest.mark.asyncio
    async def test_unknown_franchise_is_rejected_without_insert(
        self, branch_adapter: BranchAdapter, memory_store: InMemoryDocumentStore
    ) -> None:
        with pytest.raises(FranchiseNotFoundError) as exc_info:
            await branch_adapter.create("missing", "North")

        assert exc_info.value.key == "missing"
        assert await memory_store.count_where("branches", {}) == 0

    @pytest.mark.asyncio
    async def test_name_is_unique_per_franchise(
        self, franchise_adapter: FranchiseAdapter, branch_adapter: BranchAdapter
    ) -> None:
        acme = await franchise_adapter.create("Acme")
        globex = await franchise_adapter.create("Globex")
        await branch_adapter.create(acme.id, "North")

        await branch_adapter.create(globex.id, "North")
        with pytest.raises(DuplicateBranchError):
            await branch_adapter.create(acme.id, "North")

    @pytest.mark.asyncio
    async def test_list_by_franchise(
        self, franchise_adapter: FranchiseAdapter, branch_adapter: BranchAdapter
    ) -> None:
        acme = await franchise_adapter.create("Acme")
        await branch_adapter.create(acme.id, "North")
        await branch_adapter.create(acme.id, "South")

        branches = await branch_adapter.list_by_franchise(acme.id)

        assert [b.name for b in branches] == ["North", "South"]
        assert all(b.products == [] for b in branches)

    @pytest.mark.asyncio
    async def test_move_to_unknown_franchise(
        self, franchise_adapter: FranchiseAdapter, branch_adapter: BranchAdapter
    ) -> None:
        acme = await franchise_adapter.create("Acme")
        north = await branch_adapter.create(acme.id, "North")

        with pytest.raises(FranchiseNotFoundError):
            await branch_adapter.update(north.id, Branch(franchise_id="missing"))

        assert (await branch_adapter.get_by_id(north.id)).franchise_id == acme.id

    @pytest.mark.asyncio
    async def test_move_to_existing_franchise(
        self, franchise_adapter: FranchiseAdapter, branch_adapter: BranchAdapter
    ) -> None:
        acme = await franchise_adapter.create("Acme")
        globex = await franchise_adapter.create("Globex")
        north = await branch_adapter.create(acme.id, "North")

        moved = await branch_adapter.update(north.id, Branch(franchise_id=globex.id))

        assert moved.franchise_id == globex.id
        assert moved.name == "North"

    @pytest.mark.asyncio
    async def test_rename_into_taken_name_is_translated(
        self, franchise_adapter: FranchiseAdapter, branch_adapter: BranchAdapter
    ) -> None:
        await branch_adapter.ensure_indexes()
        acme = await franchise_adapter.create("Acme")
        await branch_adapter.create(acme.id, "North")
        south = await branch_adapter.create(acme.id, "South")

        with pytest.raises(DuplicateBranchError) as exc_info:
            await branch_adapter.update(south.id, Branch(name="North"))

        assert exc_info.value.details == {"franchise_id": acme.id, "name": "North"}
        assert acme.id in exc_info.value.message

    @pytest.mark.asyncio
    async def test_delete_missing(self, branch_adapter: BranchAdapter) -> None:
        with pytest.raises(BranchNotFoundError):
            await branch_adapter.delete("missing")


class TestProductAdapter:
    """Test product scoping, search and stock updates."""

    @pytest.mark.asyncio
    async def test_unknown_branch_is_rejected(
        self, product_adapter: ProductAdapter, memory_store: InMemoryDocumentStore
    ) -> None:
        with pytest.raises(BranchNotFoundError):
            await product_adapter.create("missing", "Widget", 1)
        assert await memory_store.count_where("products", {}) == 0

    @pytest.mark.asyncio
    async def test_name_is_unique_per_branch(
        self,
        franchise_adapter: FranchiseAdapter,
        branch_adapter: BranchAdapter,
        product_adapter: ProductAdapter,
    ) -> None:
        acme = await franchise_adapter.create("Acme")
        north = await branch_adapter.create(acme.id, "North")
        south = await branch_adapter.create(acme.id, "South")
        await product_adapter.create(north.id, "Widget", 1)

        with pytest.raises(DuplicateProductError):
            await product_adapter.create(north.id, "Widget", 2)
        other = await product_adapter.create(south.id, "Widget", 2)

        assert other.branch_id == south.id

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive_and_literal(
        self,
        franchise_adapter: FranchiseAdapter,
        branch_adapter: BranchAdapter,
        product_adapter: ProductAdapter,
    ) -> None:
        acme = await franchise_adapter.create("Acme")
        north = await branch_adapter.create(acme.id, "North")
        await product_adapter.create(north.id, "Blue Widget", 1)
        await product_adapter.create(north.id, "Widget (XL)", 1)
        await product_adapter.create(north.id, "Gadget", 1)

        by_word = await product_adapter.search_by_name("wIdGeT")
        by_symbols = await product_adapter.search_by_name("(xl)")
        wildcard = await product_adapter.search_by_name(".*")

        assert sorted(p.name for p in by_word) == ["Blue Widget", "Widget (XL)"]
        assert [p.name for p in by_symbols] == ["Widget (XL)"]
        assert wildcard == []

    def test_name_contains_escapes_pattern(self) -> None:
        pattern = name_contains("a.b")
        assert pattern.search("A.B") is not None
        assert pattern.search("axb") is None

    @pytest.mark.asyncio
    async def test_update_stock(
        self,
        franchise_adapter: FranchiseAdapter,
        branch_adapter: BranchAdapter,
        product_adapter: ProductAdapter,
    ) -> None:
        acme = await franchise_adapter.create("Acme")
        north = await branch_adapter.create(acme.id, "North")
        widget = await product_adapter.create(north.id, "Widget", 1)

        updated = await product_adapter.update_stock(widget.id, 42)

        assert updated.stock == 42
        assert updated.name == "Widget"
        assert updated.updated_at >= widget.updated_at

    @pytest.mark.asyncio
    async def test_update_stock_missing(self, product_adapter: ProductAdapter) -> None:
        with pytest.raises(ProductNotFoundError):
            await product_adapter.update_stock("missing", 3)

    @pytest.mark.asyncio
    async def test_update_stock_rejects_negative(
        self, product_adapter: ProductAdapter
    ) -> None:
        with pytest.raises(ValidationError):
            await product_adapter.update_stock("any", -1)

    @pytest.mark.asyncio
    async def test_update_merges_and_checks_branch(
        self,
        franchise_adapter: FranchiseAdapter,
        branch_adapter: BranchAdapter,
        product_adapter: ProductAdapter,
    ) -> None:
        acme = await franchise_adapter.create("Acme")
        north = await branch_adapter.create(acme.id, "North")
        widget = await product_adapter.create(north.id, "Widget", 10)

        renamed = await product_adapter.update(widget.id, Product(name=" Widget Pro ", stock=None))
        assert renamed.name == "Widget Pro"
        assert renamed.stock == 10

        with pytest.raises(BranchNotFoundError):
            await product_adapter.update(widget.id, Product(branch_id="missing"))

    @pytest.mark.asyncio
    async def test_rename_into_taken_name_names_the_branch(
        self,
        franchise_adapter: FranchiseAdapter,
        branch_adapter: BranchAdapter,
        product_adapter: ProductAdapter,
    ) -> None:
        await product_adapter.ensure_indexes()
        acme = await franchise_adapter.create("Acme")
        north = await branch_adapter.create(acme.id, "North")
        await product_adapter.create(north.id, "Widget", 1)
        gadget = await product_adapter.create(north.id, "Gadget", 1)

        with pytest.raises(DuplicateProductError) as exc_info:
            await product_adapter.update(gadget.id, Product(name="Widget"))

        assert exc_info.value.details == {"branch_id": north.id, "name": "Widget"}
        assert (await product_adapter.get_by_id(gadget.id)).name == "Gadget"

    @pytest.mark.asyncio
    async def test_list_all_and_delete(
        self,
        franchise_adapter: FranchiseAdapter,
        branch_adapter: BranchAdapter,
        product_adapter: ProductAdapter,
    ) -> None:
        acme = await franchise_adapter.create("Acme")
        north = await branch_adapter.create(acme.id, "North")
        widget = await product_adapter.create(north.id, "Widget", 1)
        await product_adapter.create(north.id, "Gadget", 1)

        await product_adapter.delete(widget.id)

        assert [p.name for p in await product_adapter.list_all()] == ["Gadget"]
        with pytest.raises(ProductNotFoundError):
            await product_adapter.delete(widget.id)
