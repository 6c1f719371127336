"""In-memory catalog store implementation."""

import asyncio
import threading
from collections.abc import Iterable
from dataclasses import replace
from typing import Any

from catalogcache.core.entities.catalog import (
    Category,
    CategoryFields,
    Product,
    ProductFields,
    round_price,
    utcnow,
)
from catalogcache.core.entities.query_predicate import QueryPredicate
from catalogcache.core.errors import ConcurrencyConflictError, StoreError


def _matches(product: Product, predicate: QueryPredicate) -> bool:
    if predicate.search is not None:
        needle = predicate.search.casefold()
        haystacks = [product.name, product.description or ""]
        if not any(needle in text.casefold() for text in haystacks):
            return False
    if predicate.category_id is not None and product.category_id != predicate.category_id:
        return False
    if predicate.min_price is not None and product.price < predicate.min_price:
        return False
    if predicate.max_price is not None and product.price > predicate.max_price:
        return False
    if predicate.is_active is not None and product.is_active != predicate.is_active:
        return False
    return True


class InMemoryCatalogStore:
    """Dictionary-backed store for products and categories.

    Suitable for tests, demos and single-process deployments. Every read and
    commit awaits ``latency`` seconds to behave like remote I/O, and all
    state changes go through transactions that apply atomically.
    """

    def __init__(self, latency: float = 0.0) -> None:
        """Initialize an empty store.

        Args:
            latency: Simulated I/O delay in seconds per read or commit.
        """
        self._products: dict[int, Product] = {}
        self._categories: dict[int, Category] = {}
        self._skus: dict[str, int] = {}
        self._next_product_id = 1
        self._next_category_id = 1
        self._latency = latency
        self._lock = threading.Lock()
        self._commit_count = 0

    @property
    def commit_count(self) -> int:
        """Return the number of successful commits."""
        return self._commit_count

    async def get_product(self, product_id: int) -> Product | None:
        await self._io()
        with self._lock:
            return self._products.get(product_id)

    async def sku_exists(self, sku: str) -> bool:
        await self._io()
        with self._lock:
            return sku in self._skus

    async def list_products(
        self, predicate: QueryPredicate
    ) -> tuple[list[Product], int]:
        """Filter, order by name then id, and slice one page."""
        await self._io()
        with self._lock:
            rows = [p for p in self._products.values() if _matches(p, predicate)]
        rows.sort(key=lambda p: (p.name, p.id))
        start = predicate.offset
        return rows[start:start + predicate.page_size], len(rows)

    async def count_products(self, category_id: int) -> int:
        await self._io()
        with self._lock:
            return sum(1 for p in self._products.values() if p.category_id == category_id)

    async def get_category(self, category_id: int) -> Category | None:
        await self._io()
        with self._lock:
            return self._categories.get(category_id)

    async def get_category_by_name(self, name: str) -> Category | None:
        await self._io()
        with self._lock:
            for category in self._categories.values():
                if category.name == name:
                    return category
        return None

    async def list_categories(self) -> list[Category]:
        await self._io()
        with self._lock:
            categories = list(self._categories.values())
        return sorted(categories, key=lambda c: (c.name, c.id))

    def transaction(self) -> "InMemoryTransaction":
        """Start a new unit of work."""
        return InMemoryTransaction(self)

    async def _commit(self, operations: list[tuple[str, tuple[Any, ...]]]) -> list[Any]:
        await self._io()
        with self._lock:
            changes = _Changeset(self)
            results = [changes.apply(name, args) for name, args in operations]
            changes.merge()
            self._commit_count += 1
        return results

    async def _io(self) -> None:
        await asyncio.sleep(self._latency)

    def __len__(self) -> int:
        """Return the number of stored products."""
        with self._lock:
            return len(self._products)


class InMemoryTransaction:
    """Staged operations applied by ``InMemoryCatalogStore`` on commit."""

    def __init__(self, store: InMemoryCatalogStore) -> None:
        self._store = store
        self._operations: list[tuple[str, tuple[Any, ...]]] = []
        self._committed = False

    def add_product(self, fields: ProductFields) -> None:
        self._operations.append(("add_product", (fields,)))

    def add_products(self, batch: Iterable[ProductFields]) -> None:
        self._operations.extend(("add_product", (fields,)) for fields in batch)

    def update_product(
        self, product_id: int, fields: ProductFields, expected_version: int
    ) -> None:
        self._operations.append(("update_product", (product_id, fields, expected_version)))

    def delete_product(self, product_id: int, expected_version: int | None = None) -> None:
        self._operations.append(("delete_product", (product_id, expected_version)))

    def add_category(self, fields: CategoryFields) -> None:
        self._operations.append(("add_category", (fields,)))

    def update_category(self, category_id: int, fields: CategoryFields) -> None:
        self._operations.append(("update_category", (category_id, fields)))

    def delete_category(self, category_id: int) -> None:
        self._operations.append(("delete_category", (category_id,)))

    async def commit(self) -> list[Any]:
        """Apply every staged operation atomically.

        Returns:
            The record produced by each operation (None for deletes).

        Raises:
            ConcurrencyConflictError: A guarded row changed or vanished.
            StoreError: A constraint failed, or the transaction was reused.
        """
        if self._committed:
            raise StoreError("Transaction already committed")
        self._committed = True
        return await self._store._commit(self._operations)


class _Changeset:
    """Overlay of pending changes validated against the store state.

    Must be used while holding the store lock. Nothing touches the store
    until ``merge``, so a failing operation leaves the store unchanged.
    """

    def __init__(self, store: InMemoryCatalogStore) -> None:
        self._store = store
        self._products: dict[int, Product | None] = {}
        self._categories: dict[int, Category | None] = {}
        self._skus: dict[str, int | None] = {}
        self._next_product_id = store._next_product_id
        self._next_category_id = store._next_category_id

    def apply(self, name: str, args: tuple[Any, ...]) -> Any:
        return getattr(self, f"_{name}")(*args)

    def merge(self) -> None:
        store = self._store
        for product_id, product in self._products.items():
            if product is None:
                store._products.pop(product_id, None)
            else:
                store._products[product_id] = product
        for category_id, category in self._categories.items():
            if category is None:
                store._categories.pop(category_id, None)
            else:
                store._categories[category_id] = category
        for sku, owner in self._skus.items():
            if owner is None:
                store._skus.pop(sku, None)
            else:
                store._skus[sku] = owner
        store._next_product_id = self._next_product_id
        store._next_category_id = self._next_category_id

    # Lookups through the overlay

    def _product(self, product_id: int) -> Product | None:
        if product_id in self._products:
            return self._products[product_id]
        return self._store._products.get(product_id)

    def _category(self, category_id: int) -> Category | None:
        if category_id in self._categories:
            return self._categories[category_id]
        return self._store._categories.get(category_id)

    def _sku_owner(self, sku: str) -> int | None:
        if sku in self._skus:
            return self._skus[sku]
        return self._store._skus.get(sku)

    def _categories_view(self) -> list[Category]:
        merged = dict(self._store._categories)
        merged.update(self._categories)
        return [c for c in merged.values() if c is not None]

    def _has_products(self, category_id: int) -> bool:
        for product_id, product in self._store._products.items():
            if product_id not in self._products and product.category_id == category_id:
                return True
        return any(
            p is not None and p.category_id == category_id
            for p in self._products.values()
        )

    def _require_category(self, category_id: int) -> None:
        if self._category(category_id) is None:
            raise StoreError(f"Category {category_id} does not exist")

    def _claim_sku(self, sku: str, product_id: int) -> None:
        owner = self._sku_owner(sku)
        if owner is not None and owner != product_id:
            raise StoreError(f"SKU '{sku}' is already in use")
        self._skus[sku] = product_id

    # Operations

    def _add_product(self, fields: ProductFields) -> Product:
        self._require_category(fields.category_id)
        product_id = self._next_product_id
        if fields.sku:
            self._claim_sku(fields.sku, product_id)
        product = Product(
            id=product_id,
            name=fields.name,
            description=fields.description,
            price=round_price(fields.price),
            stock=fields.stock,
            sku=fields.sku or None,
            category_id=fields.category_id,
            is_active=fields.is_active,
            created_at=utcnow(),
        )
        self._next_product_id += 1
        self._products[product_id] = product
        return product

    def _update_product(
        self, product_id: int, fields: ProductFields, expected_version: int
    ) -> Product:
        current = self._product(product_id)
        if current is None or current.version != expected_version:
            raise ConcurrencyConflictError(
                product_id, expected_version, current.version if current else None
            )
        self._require_category(fields.category_id)
        sku = current.sku
        if fields.sku and fields.sku != current.sku:
            self._claim_sku(fields.sku, product_id)
            if current.sku:
                self._skus[current.sku] = None
            sku = fields.sku
        updated = replace(
            current,
            name=fields.name,
            description=fields.description,
            price=round_price(fields.price),
            stock=fields.stock,
            sku=sku,
            category_id=fields.category_id,
            is_active=fields.is_active,
            updated_at=utcnow(),
            version=current.version + 1,
        )
        self._products[product_id] = updated
        return updated

    def _delete_product(self, product_id: int, expected_version: int | None) -> None:
        current = self._product(product_id)
        if current is None:
            raise ConcurrencyConflictError(product_id, expected_version or 0, None)
        if expected_version is not None and current.version != expected_version:
            raise ConcurrencyConflictError(product_id, expected_version, current.version)
        if current.sku:
            self._skus[current.sku] = None
        self._products[product_id] = None
        return None

    def _add_category(self, fields: CategoryFields) -> Category:
        if any(c.name == fields.name for c in self._categories_view()):
            raise StoreError(f"Category name '{fields.name}' is already in use")
        category = Category(
            id=self._next_category_id,
            name=fields.name,
            description=fields.description,
            image_url=fields.image_url,
            created_at=utcnow(),
        )
        self._next_category_id += 1
        self._categories[category.id] = category
        return category

    def _update_category(self, category_id: int, fields: CategoryFields) -> Category:
        current = self._category(category_id)
        if current is None:
            raise StoreError(f"Category {category_id} does not exist")
        if any(
            c.name == fields.name and c.id != category_id
            for c in self._categories_view()
        ):
            raise StoreError(f"Category name '{fields.name}' is already in use")
        updated = replace(
            current,
            name=fields.name,
            description=fields.description,
            image_url=fields.image_url,
        )
        self._categories[category_id] = updated
        return updated

    def _delete_category(self, category_id: int) -> None:
        if self._category(category_id) is None:
            raise StoreError(f"Category {category_id} does not exist")
        if self._has_products(category_id):
            raise StoreError(f"Category {category_id} still has products")
        self._categories[category_id] = None
        return None
