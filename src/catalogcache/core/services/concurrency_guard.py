"""Concurrency guard - the product mutation path.

Every successful product create, update or delete writes to the store,
drops the affected entity keys from the cache and bumps the epoch exactly
once. Updates are checked against the row version the writer read; a
mismatch surfaces as ``ConflictError`` and is never retried here.
"""

import itertools
import logging
import time
from collections.abc import Iterable
from dataclasses import replace

from catalogcache.core.entities.catalog import (
    Category,
    Product,
    ProductFields,
    ProductView,
)
from catalogcache.core.errors import (
    ConcurrencyConflictError,
    ConflictError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from catalogcache.core.interfaces.cache_backend import IVersionedCache
from catalogcache.core.interfaces.key_builder import IKeyBuilder
from catalogcache.core.interfaces.store import ICatalogStore, IStoreTransaction
from catalogcache.core.services.query_engine import CATEGORY, PRODUCT

logger = logging.getLogger(__name__)

CONFLICT_MESSAGE = (
    "The product was modified by another user. Reload it before trying again."
)


def sku_stem(category_name: str) -> str:
    """Return the SKU prefix for products of a category."""
    return f"SKU-{category_name.replace(' ', '')}"


class ConcurrencyGuard:
    """Applies product mutations and keeps the cache consistent with them."""

    def __init__(
        self,
        store: ICatalogStore,
        cache: IVersionedCache,
        key_builder: IKeyBuilder,
    ) -> None:
        """Initialize the guard.

        Args:
            store: The authoritative store.
            cache: The versioned cache to invalidate.
            key_builder: Builds the entity keys to remove.
        """
        self._store = store
        self._cache = cache
        self._key_builder = key_builder
        self._sku_sequence = itertools.count(1)

    async def create_product(self, fields: ProductFields) -> ProductView:
        """Create a product, generating a SKU when none is supplied.

        Raises:
            ValidationError: Bad price or stock, unknown category or SKU
                already in use.
        """
        self._check_amounts(fields)
        category = await self._require_category(fields.category_id)

        sku = fields.sku.strip() if fields.sku else None
        if sku:
            if await self._store.sku_exists(sku):
                raise ValidationError("A product with that SKU already exists")
        else:
            sku = await self._generate_sku(category.name)

        transaction = self._store.transaction()
        transaction.add_product(replace(fields, sku=sku))
        product = await self._commit_one(transaction)

        await self.invalidate(
            product_ids=[product.id], category_ids=[product.category_id]
        )
        logger.debug("Product %d created with SKU %s", product.id, product.sku)
        return ProductView.from_product(product, category)

    async def update_product(
        self,
        product_id: int,
        fields: ProductFields,
        expected_version: int | None = None,
    ) -> ProductView:
        """Replace a product's attributes if nobody changed it meanwhile.

        Args:
            product_id: The product to update.
            fields: The new attributes.
            expected_version: Row version the caller last read; defaults to
                the version read here.

        Raises:
            NotFoundError: The product does not exist.
            ValidationError: Bad price or stock, unknown category or SKU
                already in use.
            ConflictError: Another writer committed a newer version.
        """
        self._check_amounts(fields)
        current = await self._store.get_product(product_id)
        if current is None:
            raise NotFoundError(PRODUCT, product_id)

        version = current.version if expected_version is None else expected_version
        if version != current.version:
            logger.warning(
                "Update of product %d rejected: version %d is stale (current %d)",
                product_id, version, current.version,
            )
            raise ConflictError(CONFLICT_MESSAGE)

        category = await self._require_category(fields.category_id)

        sku = fields.sku.strip() if fields.sku else None
        if sku and sku != current.sku and await self._store.sku_exists(sku):
            raise ValidationError("A product with that SKU already exists")

        transaction = self._store.transaction()
        transaction.update_product(product_id, replace(fields, sku=sku), version)
        product = await self._commit_one(transaction)

        await self.invalidate(
            product_ids=[product_id],
            category_ids={current.category_id, product.category_id},
        )
        return ProductView.from_product(product, category)

    async def delete_product(
        self, product_id: int, expected_version: int | None = None
    ) -> None:
        """Delete a product.

        Raises:
            NotFoundError: The product does not exist.
            ConflictError: The product changed since ``expected_version``.
        """
        current = await self._store.get_product(product_id)
        if current is None:
            raise NotFoundError(PRODUCT, product_id)

        transaction = self._store.transaction()
        transaction.delete_product(
            product_id,
            current.version if expected_version is None else expected_version,
        )
        await self._commit(transaction)

        await self.invalidate(
            product_ids=[product_id], category_ids=[current.category_id]
        )

    async def invalidate(
        self,
        product_ids: Iterable[int] = (),
        category_ids: Iterable[int] = (),
    ) -> int:
        """Drop entity keys and bump the epoch once.

        This is the single invalidation path for product mutations, bulk
        inserts included.

        Args:
            product_ids: Products whose cached lookups are now stale.
            category_ids: Categories whose product counts changed.

        Returns:
            The new epoch.
        """
        for product_id in product_ids:
            await self._cache.remove(self._key_builder.build_entity_key(PRODUCT, product_id))
        for category_id in category_ids:
            await self._cache.remove(self._key_builder.build_entity_key(CATEGORY, category_id))
        return self._cache.bump_epoch()

    @staticmethod
    def _check_amounts(fields: ProductFields) -> None:
        if fields.price is None or fields.price <= 0:
            raise ValidationError("Price must be greater than zero")
        if fields.stock is None or fields.stock < 0:
            raise ValidationError("Stock cannot be negative")

    async def _require_category(self, category_id: int) -> Category:
        category = await self._store.get_category(category_id)
        if category is None:
            raise ValidationError("The specified category does not exist")
        return category

    async def _generate_sku(self, category_name: str) -> str:
        while True:
            sku = f"{sku_stem(category_name)}-{time.time_ns()}-{next(self._sku_sequence)}"
            if not await self._store.sku_exists(sku):
                return sku

    async def _commit(self, transaction: IStoreTransaction) -> list[Product | Category | None]:
        try:
            return await transaction.commit()
        except ConcurrencyConflictError as e:
            logger.warning("Write conflict: %s", e)
            raise ConflictError(CONFLICT_MESSAGE) from e

    async def _commit_one(self, transaction: IStoreTransaction) -> Product:
        results = await self._commit(transaction)
        product = results[0] if results else None
        if not isinstance(product, Product):
            raise StoreError(f"Store returned {product!r} for a product write")
        return product
