"""Tests for CatalogQueryEngine."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from catalogcache.core.entities.catalog import ProductFields
from catalogcache.core.entities.catalog_config import CatalogConfig
from catalogcache.core.entities.query_predicate import QueryPredicate
from catalogcache.core.errors import NotFoundError, StoreError
from catalogcache.core.services.concurrency_guard import ConcurrencyGuard
from catalogcache.core.services.query_engine import CatalogQueryEngine
from catalogcache.infrastructure.backends.memory import InMemoryVersionedCache
from catalogcache.infrastructure.key_builders.default import DefaultKeyBuilder
from catalogcache.infrastructure.stores.memory import InMemoryCatalogStore


class TestListProducts:
    """Tests for the cached product listing."""

    @pytest.mark.asyncio
    async def test_miss_then_hit(
        self, engine: CatalogQueryEngine, make_category, make_products
    ) -> None:
        """Test that the second identical listing is served from cache."""
        category = await make_category()
        await make_products(category.id, ["Alpha", "Beta"])

        first = await engine.list_products(QueryPredicate())
        second = await engine.list_products(QueryPredicate())

        assert second is first
        assert engine.stats == {"hits": 1, "misses": 1, "total": 2}

    @pytest.mark.asyncio
    async def test_items_carry_category_data(
        self, engine: CatalogQueryEngine, make_category, make_products
    ) -> None:
        """Test that listed products are joined with their category."""
        category = await make_category("Servers", image_url="https://img/servers.png")
        await make_products(category.id, ["Alpha"])

        page = await engine.list_products(QueryPredicate())

        [item] = page.items
        assert item.category_name == "Servers"
        assert item.category_image_url == "https://img/servers.png"
        assert item.version == 1

    @pytest.mark.asyncio
    async def test_pages_partition_the_result(
        self, engine: CatalogQueryEngine, make_category, make_products
    ) -> None:
        """Test that consecutive pages cover every match exactly once, in order."""
        category = await make_category()
        names = [f"Item {i:02d}" for i in range(23)]
        await make_products(category.id, list(reversed(names)))

        seen = []
        for page_number in range(1, 6):
            page = await engine.list_products(
                QueryPredicate(page_number=page_number, page_size=5)
            )
            assert page.total_count == 23
            assert page.total_pages == 5
            seen.extend(item.name for item in page.items)

        assert seen == names
        assert len(page.items) == 3
        assert page.has_next_page is False

    @pytest.mark.asyncio
    async def test_page_past_the_end_is_empty(
        self, engine: CatalogQueryEngine, make_category, make_products
    ) -> None:
        """Test that a page beyond the last one is empty but keeps the total."""
        category = await make_category()
        await make_products(category.id, ["Alpha", "Beta"])

        page = await engine.list_products(QueryPredicate(page_number=9))

        assert page.items == ()
        assert page.total_count == 2

    @pytest.mark.asyncio
    async def test_clamped_requests_share_an_entry(
        self, engine: CatalogQueryEngine, make_category, make_products
    ) -> None:
        """Test that equivalent out-of-range requests hit the same entry."""
        category = await make_category()
        await make_products(category.id, ["Alpha"])

        await engine.list_products(QueryPredicate(page_number=0, page_size=500))
        await engine.list_products(QueryPredicate(page_number=1, page_size=100))

        assert engine.stats["hits"] == 1

    @pytest.mark.asyncio
    async def test_filters_are_conjunctive(
        self, engine: CatalogQueryEngine, make_category, make_products
    ) -> None:
        """Test that every supplied filter must hold."""
        servers = await make_category("Servers")
        storage = await make_category("Storage")
        await make_products(servers.id, ["Rack server", "Tower server"], price="500.00")
        await make_products(servers.id, ["Rack rails"], price="20.00")
        await make_products(servers.id, ["Rack server (old)"], price="400.00", is_active=False)
        await make_products(storage.id, ["Rack NAS"], price="450.00")

        page = await engine.list_products(
            QueryPredicate(
                search="RACK",
                category_id=servers.id,
                min_price=Decimal("100"),
                max_price=Decimal("500"),
                is_active=True,
            )
        )

        assert [item.name for item in page.items] == ["Rack server"]
        assert page.total_count == 1

    @pytest.mark.asyncio
    async def test_price_bounds_are_inclusive(
        self, engine: CatalogQueryEngine, make_category, make_products
    ) -> None:
        """Test that products priced at a bound are included."""
        category = await make_category()
        await make_products(category.id, ["Low"], price="10.00")
        await make_products(category.id, ["High"], price="20.00")

        page = await engine.list_products(
            QueryPredicate(min_price=Decimal("10"), max_price=Decimal("20"))
        )

        assert page.total_count == 2

    @pytest.mark.asyncio
    async def test_mutation_makes_listing_fresh(
        self,
        engine: CatalogQueryEngine,
        guard: ConcurrencyGuard,
        make_category,
        make_products,
    ) -> None:
        """Test that a listing after a create reflects the new product."""
        category = await make_category()
        await make_products(category.id, ["Alpha"])
        await engine.list_products(QueryPredicate())

        await guard.create_product(
            ProductFields(name="Beta", price=Decimal("5"), stock=1, category_id=category.id)
        )
        page = await engine.list_products(QueryPredicate())

        assert [item.name for item in page.items] == ["Alpha", "Beta"]
        assert engine.stats["misses"] == 2

    @pytest.mark.asyncio
    async def test_store_failure_leaves_cache_untouched(
        self,
        store: InMemoryCatalogStore,
        cache: InMemoryVersionedCache,
        engine: CatalogQueryEngine,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test that a failed read neither caches anything nor bumps the epoch."""
        monkeypatch.setattr(
            store, "list_products", AsyncMock(side_effect=StoreError("database unavailable"))
        )

        with pytest.raises(StoreError):
            await engine.list_products(QueryPredicate())

        assert len(cache) == 0
        assert cache.epoch == 0

    @pytest.mark.asyncio
    async def test_page_weight_counts_items(
        self,
        cache: InMemoryVersionedCache,
        engine: CatalogQueryEngine,
        make_category,
        make_products,
    ) -> None:
        """Test that a cached page weighs one unit per item on it."""
        category = await make_category()
        await make_products(category.id, [f"Item {i}" for i in range(23)])

        await engine.list_products(QueryPredicate(page_size=100))

        assert cache.current_weight == 23

    @pytest.mark.asyncio
    async def test_empty_page_still_weighs_one(
        self, cache: InMemoryVersionedCache, engine: CatalogQueryEngine
    ) -> None:
        """Test that empty pages are cached at the minimum weight."""
        await engine.list_products(QueryPredicate())

        assert len(cache) == 1
        assert cache.current_weight == 1

    @pytest.mark.asyncio
    async def test_disabled_cache_goes_to_store(
        self,
        store: InMemoryCatalogStore,
        cache: InMemoryVersionedCache,
        key_builder: DefaultKeyBuilder,
        make_category,
        make_products,
    ) -> None:
        """Test that a disabled cache is neither read nor written."""
        engine = CatalogQueryEngine(store, cache, key_builder, CatalogConfig(enabled=False))
        category = await make_category()
        await make_products(category.id, ["Alpha"])

        await engine.list_products(QueryPredicate())
        await engine.list_products(QueryPredicate())

        assert len(cache) == 0
        assert engine.stats["total"] == 0


class TestGetProduct:
    """Tests for single product lookups."""

    @pytest.mark.asyncio
    async def test_cached_lookup(
        self, engine: CatalogQueryEngine, make_category, make_products
    ) -> None:
        """Test that a product is served from cache after the first lookup."""
        category = await make_category()
        [product] = await make_products(category.id, ["Alpha"])

        first = await engine.get_product(product.id)
        second = await engine.get_product(product.id)

        assert second is first
        assert first.category_name == "Servers"
        assert engine.stats["hits"] == 1

    @pytest.mark.asyncio
    async def test_entity_ttl(
        self, clock, engine: CatalogQueryEngine, make_category, make_products
    ) -> None:
        """Test that product lookups expire after the entity TTL."""
        category = await make_category()
        [product] = await make_products(category.id, ["Alpha"])
        await engine.get_product(product.id)

        clock.advance(301)
        await engine.get_product(product.id)

        assert engine.stats == {"hits": 0, "misses": 2, "total": 2}

    @pytest.mark.asyncio
    async def test_update_is_visible(
        self,
        engine: CatalogQueryEngine,
        guard: ConcurrencyGuard,
        make_category,
        make_products,
    ) -> None:
        """Test that an update through the guard drops the cached lookup."""
        category = await make_category()
        [product] = await make_products(category.id, ["Alpha"])
        await engine.get_product(product.id)

        await guard.update_product(
            product.id,
            ProductFields(name="Omega", price=Decimal("5"), stock=1, category_id=category.id),
        )

        view = await engine.get_product(product.id)
        assert view.name == "Omega"
        assert view.version == 2

    @pytest.mark.asyncio
    async def test_missing_product(self, engine: CatalogQueryEngine) -> None:
        """Test that an unknown id raises NotFoundError."""
        with pytest.raises(NotFoundError, match="Product 99 not found"):
            await engine.get_product(99)


class TestCategoryReads:
    """Tests for category reads."""

    @pytest.mark.asyncio
    async def test_get_category_counts_products(
        self, engine: CatalogQueryEngine, make_category, make_products
    ) -> None:
        """Test that a category view carries its product count."""
        category = await make_category()
        await make_products(category.id, ["Alpha", "Beta", "Gamma"])

        view = await engine.get_category(category.id)

        assert view.name == "Servers"
        assert view.product_count == 3

    @pytest.mark.asyncio
    async def test_get_category_is_cached(
        self, engine: CatalogQueryEngine, make_category
    ) -> None:
        category = await make_category()

        await engine.get_category(category.id)
        await engine.get_category(category.id)

        assert engine.stats["hits"] == 1

    @pytest.mark.asyncio
    async def test_missing_category(self, engine: CatalogQueryEngine) -> None:
        with pytest.raises(NotFoundError, match="Category 7 not found"):
            await engine.get_category(7)

    @pytest.mark.asyncio
    async def test_list_categories_sorted_by_name(
        self, engine: CatalogQueryEngine, make_category, make_products
    ) -> None:
        """Test listing every category with counts."""
        storage = await make_category("Storage")
        await make_category("Networking")
        await make_products(storage.id, ["Disk"])

        views = await engine.list_categories()

        assert [(v.name, v.product_count) for v in views] == [
            ("Networking", 0),
            ("Storage", 1),
        ]
