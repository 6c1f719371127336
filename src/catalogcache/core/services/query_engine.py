"""Catalog query engine - cached read path."""

import logging

from catalogcache.core.entities.catalog import CategoryView, PagedResult, ProductView
from catalogcache.core.entities.catalog_config import CatalogConfig
from catalogcache.core.entities.query_predicate import QueryPredicate
from catalogcache.core.errors import NotFoundError
from catalogcache.core.interfaces.cache_backend import IVersionedCache
from catalogcache.core.interfaces.key_builder import IKeyBuilder
from catalogcache.core.interfaces.store import ICatalogStore

logger = logging.getLogger(__name__)

PRODUCT = "product"
CATEGORY = "category"


class CatalogQueryEngine:
    """Serves product listings and lookups, populating the cache on misses.

    List pages are keyed by predicate and the current epoch, so any product
    mutation makes every earlier page unreachable. Single entities are keyed
    by id and removed explicitly by the mutation path.
    """

    def __init__(
        self,
        store: ICatalogStore,
        cache: IVersionedCache,
        key_builder: IKeyBuilder,
        config: CatalogConfig | None = None,
    ) -> None:
        """Initialize the query engine.

        Args:
            store: The authoritative store.
            cache: The versioned cache holding copies of read results.
            key_builder: The key builder for list and entity keys.
            config: Optional configuration. Uses defaults if not provided.
        """
        self._store = store
        self._cache = cache
        self._key_builder = key_builder
        self._config = config or CatalogConfig()

        # Statistics
        self._hits = 0
        self._misses = 0

    @property
    def stats(self) -> dict[str, int]:
        """Get cache statistics.

        Returns:
            Dictionary with hits, misses, and total requests.
        """
        return {
            "hits": self._hits,
            "misses": self._misses,
            "total": self._hits + self._misses,
        }

    async def list_products(self, predicate: QueryPredicate) -> PagedResult[ProductView]:
        """Return one page of products matching every supplied filter.

        Args:
            predicate: Filters and (already clamped) page coordinates.

        Returns:
            The page, ordered by name, with the total matching count.
        """
        key = self._key_builder.build_list_key(predicate, self._cache.epoch)

        if self._config.enabled:
            cached, found = await self._cache.get(key)
            if found:
                self._hits += 1
                logger.debug("Product list cache hit: %s", key)
                return cached
            self._misses += 1

        products, total_count = await self._store.list_products(predicate)
        categories = {}
        for category_id in {p.category_id for p in products}:
            categories[category_id] = await self._store.get_category(category_id)

        page = PagedResult(
            items=tuple(
                ProductView.from_product(p, categories.get(p.category_id))
                for p in products
            ),
            total_count=total_count,
            page_number=predicate.page_number,
            page_size=predicate.page_size,
        )

        if self._config.enabled:
            await self._cache.set(
                key,
                page,
                ttl=self._config.list_ttl,
                weight=self._page_weight(page),
            )
        return page

    async def get_product(self, product_id: int) -> ProductView:
        """Return a product joined with its category.

        Raises:
            NotFoundError: If the product does not exist.
        """
        key = self._key_builder.build_entity_key(PRODUCT, product_id)

        if self._config.enabled:
            cached, found = await self._cache.get(key)
            if found:
                self._hits += 1
                return cached
            self._misses += 1

        product = await self._store.get_product(product_id)
        if product is None:
            raise NotFoundError(PRODUCT, product_id)
        category = await self._store.get_category(product.category_id)
        view = ProductView.from_product(product, category)

        if self._config.enabled:
            await self._cache.set(key, view, ttl=self._config.entity_ttl, weight=1)
        return view

    async def get_category(self, category_id: int) -> CategoryView:
        """Return a category with its product count.

        Raises:
            NotFoundError: If the category does not exist.
        """
        key = self._key_builder.build_entity_key(CATEGORY, category_id)

        if self._config.enabled:
            cached, found = await self._cache.get(key)
            if found:
                self._hits += 1
                return cached
            self._misses += 1

        category = await self._store.get_category(category_id)
        if category is None:
            raise NotFoundError(CATEGORY, category_id)
        view = CategoryView.from_category(
            category, await self._store.count_products(category_id)
        )

        if self._config.enabled:
            await self._cache.set(key, view, ttl=self._config.category_ttl, weight=1)
        return view

    async def list_categories(self) -> list[CategoryView]:
        """Return every category with its product count (not cached)."""
        categories = await self._store.list_categories()
        return [
            CategoryView.from_category(c, await self._store.count_products(c.id))
            for c in categories
        ]

    def _page_weight(self, page: PagedResult[ProductView]) -> int:
        # One unit per row on the page, never the total match count
        return max(1, min(len(page.items), self._config.max_entry_weight))
