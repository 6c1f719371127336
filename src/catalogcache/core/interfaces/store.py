"""Store collaborator interface."""

from collections.abc import Iterable
from typing import Protocol

from catalogcache.core.entities.catalog import (
    Category,
    CategoryFields,
    Product,
    ProductFields,
)
from catalogcache.core.entities.query_predicate import QueryPredicate


class IStoreTransaction(Protocol):
    """Unit of work against the store.

    Mutations are staged and applied atomically by ``commit``. A transaction
    is used by one task and committed at most once.
    """

    def add_product(self, fields: ProductFields) -> None:
        """Stage a product insert."""
        ...

    def add_products(self, batch: Iterable[ProductFields]) -> None:
        """Stage a batch of product inserts."""
        ...

    def update_product(
        self, product_id: int, fields: ProductFields, expected_version: int
    ) -> None:
        """Stage a product update guarded by its row version."""
        ...

    def delete_product(self, product_id: int, expected_version: int | None = None) -> None:
        """Stage a product delete, optionally guarded by its row version."""
        ...

    def add_category(self, fields: CategoryFields) -> None:
        """Stage a category insert."""
        ...

    def update_category(self, category_id: int, fields: CategoryFields) -> None:
        """Stage a category update."""
        ...

    def delete_category(self, category_id: int) -> None:
        """Stage a category delete."""
        ...

    async def commit(self) -> list[Product | Category | None]:
        """Apply every staged operation atomically.

        Returns:
            The stored record produced by each staged operation, in staging
            order (``None`` for deletes).

        Raises:
            ConcurrencyConflictError: A guarded row changed or vanished.
            StoreError: A constraint failed or the store is unavailable.
        """
        ...


class ICatalogStore(Protocol):
    """Contract for the authoritative product and category store."""

    async def get_product(self, product_id: int) -> Product | None:
        ...

    async def sku_exists(self, sku: str) -> bool:
        ...

    async def list_products(
        self, predicate: QueryPredicate
    ) -> tuple[list[Product], int]:
        """Filter, order and paginate products.

        Filters are conjunctive. Rows are ordered by name, then id, so pages
        are deterministic.

        Args:
            predicate: Filters and page coordinates.

        Returns:
            The rows of the requested page and the total matching count.
        """
        ...

    async def count_products(self, category_id: int) -> int:
        ...

    async def get_category(self, category_id: int) -> Category | None:
        ...

    async def get_category_by_name(self, name: str) -> Category | None:
        ...

    async def list_categories(self) -> list[Category]:
        ...

    def transaction(self) -> IStoreTransaction:
        """Start a new unit of work."""
        ...
