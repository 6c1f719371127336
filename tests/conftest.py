"""Pytest configuration for catalogcache tests."""

from collections.abc import Awaitable, Callable, Sequence
from decimal import Decimal

import pytest

from catalogcache import (
    AtomicEpochCounter,
    CatalogConfig,
    CatalogQueryEngine,
    Category,
    CategoryFields,
    ConcurrencyGuard,
    DefaultKeyBuilder,
    InMemoryCatalogStore,
    InMemoryVersionedCache,
    Product,
    ProductFields,
)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> InMemoryCatalogStore:
    return InMemoryCatalogStore()


@pytest.fixture
def cache(clock: FakeClock) -> InMemoryVersionedCache:
    return InMemoryVersionedCache(
        epoch_counter=AtomicEpochCounter(),
        size_limit=1000,
        max_entry_weight=100,
        timer=clock,
    )


@pytest.fixture
def key_builder() -> DefaultKeyBuilder:
    return DefaultKeyBuilder(prefix="test")


@pytest.fixture
def config() -> CatalogConfig:
    return CatalogConfig(key_prefix="test")


@pytest.fixture
def engine(
    store: InMemoryCatalogStore,
    cache: InMemoryVersionedCache,
    key_builder: DefaultKeyBuilder,
    config: CatalogConfig,
) -> CatalogQueryEngine:
    return CatalogQueryEngine(store, cache, key_builder, config)


@pytest.fixture
def guard(
    store: InMemoryCatalogStore,
    cache: InMemoryVersionedCache,
    key_builder: DefaultKeyBuilder,
) -> ConcurrencyGuard:
    return ConcurrencyGuard(store, cache, key_builder)


@pytest.fixture
def make_category(
    store: InMemoryCatalogStore,
) -> Callable[..., Awaitable[Category]]:
    """Insert a category straight into the store."""

    async def _make(name: str = "Servers", image_url: str | None = None) -> Category:
        transaction = store.transaction()
        transaction.add_category(CategoryFields(name=name, image_url=image_url))
        [category] = await transaction.commit()
        return category

    return _make


@pytest.fixture
def make_products(
    store: InMemoryCatalogStore,
) -> Callable[..., Awaitable[list[Product]]]:
    """Insert products straight into the store, bypassing the cache."""

    async def _make(
        category_id: int,
        names: Sequence[str],
        price: str = "10.00",
        is_active: bool = True,
    ) -> list[Product]:
        transaction = store.transaction()
        transaction.add_products(
            ProductFields(
                name=name,
                price=Decimal(price),
                stock=5,
                category_id=category_id,
                is_active=is_active,
            )
            for name in names
        )
        return await transaction.commit()

    return _make
