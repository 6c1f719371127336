"""Tests for InMemoryCatalogStore."""

from decimal import Decimal

import pytest

from catalogcache.core.entities.catalog import CategoryFields, ProductFields
from catalogcache.core.entities.query_predicate import QueryPredicate
from catalogcache.core.errors import ConcurrencyConflictError, StoreError
from catalogcache.infrastructure.stores.memory import InMemoryCatalogStore


def product(category_id: int, name: str, sku: str | None = None, **kwargs) -> ProductFields:
    values = {"price": Decimal("10"), "stock": 1, **kwargs}
    return ProductFields(name=name, category_id=category_id, sku=sku, **values)


class TestInMemoryCatalogStore:
    """Tests for InMemoryCatalogStore."""

    @pytest.mark.asyncio
    async def test_ids_are_assigned(self, store: InMemoryCatalogStore, make_category) -> None:
        category = await make_category()
        transaction = store.transaction()
        transaction.add_products([product(category.id, "Alpha"), product(category.id, "Beta")])

        alpha, beta = await transaction.commit()

        assert (alpha.id, beta.id) == (1, 2)
        assert alpha.version == 1
        assert store.commit_count == 2

    @pytest.mark.asyncio
    async def test_prices_are_rounded(self, store: InMemoryCatalogStore, make_category) -> None:
        category = await make_category()
        transaction = store.transaction()
        transaction.add_product(product(category.id, "Alpha", price=Decimal("9.999")))

        [stored] = await transaction.commit()

        assert stored.price == Decimal("10.00")

    @pytest.mark.asyncio
    async def test_ordering_is_name_then_id(
        self, store: InMemoryCatalogStore, make_category, make_products
    ) -> None:
        category = await make_category()
        await make_products(category.id, ["Beta", "Alpha", "Beta", "Alpha"])

        rows, total = await store.list_products(QueryPredicate())

        assert [(p.name, p.id) for p in rows] == [
            ("Alpha", 2),
            ("Alpha", 4),
            ("Beta", 1),
            ("Beta", 3),
        ]
        assert total == 4

    @pytest.mark.asyncio
    async def test_search_matches_description(
        self, store: InMemoryCatalogStore, make_category
    ) -> None:
        category = await make_category()
        transaction = store.transaction()
        transaction.add_product(product(category.id, "Alpha", description="Fits a 19in RACK"))
        transaction.add_product(product(category.id, "Beta"))
        await transaction.commit()

        rows, _ = await store.list_products(QueryPredicate(search="rack"))

        assert [p.name for p in rows] == ["Alpha"]

    @pytest.mark.asyncio
    async def test_failed_commit_changes_nothing(
        self, store: InMemoryCatalogStore, make_category
    ) -> None:
        """Test that one bad operation rolls back the whole transaction."""
        category = await make_category()
        transaction = store.transaction()
        transaction.add_product(product(category.id, "Alpha"))
        transaction.add_product(product(99, "Orphan"))

        with pytest.raises(StoreError, match="Category 99 does not exist"):
            await transaction.commit()

        assert len(store) == 0
        retry = store.transaction()
        retry.add_product(product(category.id, "Alpha"))
        [stored] = await retry.commit()
        assert stored.id == 1

    @pytest.mark.asyncio
    async def test_duplicate_sku_in_one_batch(
        self, store: InMemoryCatalogStore, make_category
    ) -> None:
        category = await make_category()
        transaction = store.transaction()
        transaction.add_products(
            [product(category.id, "Alpha", sku="X-1"), product(category.id, "Beta", sku="X-1")]
        )

        with pytest.raises(StoreError, match="already in use"):
            await transaction.commit()
        assert not await store.sku_exists("X-1")

    @pytest.mark.asyncio
    async def test_update_checks_version(
        self, store: InMemoryCatalogStore, make_category, make_products
    ) -> None:
        category = await make_category()
        [row] = await make_products(category.id, ["Alpha"])

        first = store.transaction()
        first.update_product(row.id, product(category.id, "Beta"), 1)
        [updated] = await first.commit()

        second = store.transaction()
        second.update_product(row.id, product(category.id, "Gamma"), 1)
        with pytest.raises(ConcurrencyConflictError) as exc_info:
            await second.commit()

        assert updated.version == 2
        assert exc_info.value.expected == 1
        assert exc_info.value.actual == 2

    @pytest.mark.asyncio
    async def test_update_moves_sku(
        self, store: InMemoryCatalogStore, make_category
    ) -> None:
        category = await make_category()
        transaction = store.transaction()
        transaction.add_product(product(category.id, "Alpha", sku="OLD"))
        [row] = await transaction.commit()

        update = store.transaction()
        update.update_product(row.id, product(category.id, "Alpha", sku="NEW"), row.version)
        await update.commit()

        assert await store.sku_exists("NEW")
        assert not await store.sku_exists("OLD")

    @pytest.mark.asyncio
    async def test_delete_frees_sku(self, store: InMemoryCatalogStore, make_category) -> None:
        category = await make_category()
        transaction = store.transaction()
        transaction.add_product(product(category.id, "Alpha", sku="X-1"))
        [row] = await transaction.commit()

        delete = store.transaction()
        delete.delete_product(row.id)
        assert await delete.commit() == [None]

        assert await store.get_product(row.id) is None
        assert not await store.sku_exists("X-1")

    @pytest.mark.asyncio
    async def test_delete_missing_row(self, store: InMemoryCatalogStore) -> None:
        transaction = store.transaction()
        transaction.delete_product(7)

        with pytest.raises(ConcurrencyConflictError):
            await transaction.commit()

    @pytest.mark.asyncio
    async def test_transaction_commits_once(
        self, store: InMemoryCatalogStore
    ) -> None:
        transaction = store.transaction()
        transaction.add_category(CategoryFields(name="Servers"))
        await transaction.commit()

        with pytest.raises(StoreError, match="already committed"):
            await transaction.commit()

    @pytest.mark.asyncio
    async def test_category_constraints(
        self, store: InMemoryCatalogStore, make_category, make_products
    ) -> None:
        """Test unique names and the products-present rule for categories."""
        servers = await make_category("Servers")
        await make_products(servers.id, ["Alpha"])

        duplicate = store.transaction()
        duplicate.add_category(CategoryFields(name="Servers"))
        with pytest.raises(StoreError):
            await duplicate.commit()

        delete = store.transaction()
        delete.delete_category(servers.id)
        with pytest.raises(StoreError, match="still has products"):
            await delete.commit()

    @pytest.mark.asyncio
    async def test_category_lookups(self, store: InMemoryCatalogStore, make_category) -> None:
        storage = await make_category("Storage")
        await make_category("Networking")

        assert (await store.get_category_by_name("Storage")).id == storage.id
        assert await store.get_category_by_name("storage") is None
        assert [c.name for c in await store.list_categories()] == ["Networking", "Storage"]

    @pytest.mark.asyncio
    async def test_latency_is_applied(self) -> None:
        store = InMemoryCatalogStore(latency=0.001)

        assert await store.get_product(1) is None
