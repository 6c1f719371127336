"""Category service - category mutations with business-rule checks."""

import logging

from catalogcache.core.entities.catalog import (
    Category,
    CategoryFields,
    CategoryView,
    Product,
)
from catalogcache.core.errors import NotFoundError, StoreError, ValidationError
from catalogcache.core.interfaces.cache_backend import IVersionedCache
from catalogcache.core.interfaces.key_builder import IKeyBuilder
from catalogcache.core.interfaces.store import ICatalogStore
from catalogcache.core.services.query_engine import CATEGORY

logger = logging.getLogger(__name__)


class CategoryService:
    """Creates, renames and deletes categories.

    Names are unique, and a category cannot be deleted while any product
    references it. Renames bump the epoch because list pages embed the
    category name.
    """

    def __init__(
        self,
        store: ICatalogStore,
        cache: IVersionedCache,
        key_builder: IKeyBuilder,
    ) -> None:
        self._store = store
        self._cache = cache
        self._key_builder = key_builder

    async def create_category(self, fields: CategoryFields) -> CategoryView:
        """Create a category.

        Raises:
            ValidationError: A category with that name already exists.
        """
        name = self._clean_name(fields.name)
        if await self._store.get_category_by_name(name) is not None:
            raise ValidationError("A category with that name already exists")

        transaction = self._store.transaction()
        transaction.add_category(CategoryFields(name, fields.description, fields.image_url))
        category = self._written_category(await transaction.commit())

        logger.info("Category %s created with id %d", category.name, category.id)
        return CategoryView.from_category(category, 0)

    async def update_category(self, category_id: int, fields: CategoryFields) -> CategoryView:
        """Rename or redescribe a category.

        Raises:
            NotFoundError: The category does not exist.
            ValidationError: The new name belongs to another category.
        """
        current = await self._store.get_category(category_id)
        if current is None:
            raise NotFoundError(CATEGORY, category_id)

        name = self._clean_name(fields.name)
        if name != current.name and await self._store.get_category_by_name(name) is not None:
            raise ValidationError("A category with that name already exists")

        transaction = self._store.transaction()
        transaction.update_category(
            category_id, CategoryFields(name, fields.description, fields.image_url)
        )
        category = self._written_category(await transaction.commit())

        await self._cache.remove(self._key_builder.build_entity_key(CATEGORY, category_id))
        if name != current.name:
            self._cache.bump_epoch()
        return CategoryView.from_category(
            category, await self._store.count_products(category_id)
        )

    async def delete_category(self, category_id: int) -> None:
        """Delete a category that no product references.

        Raises:
            NotFoundError: The category does not exist.
            ValidationError: Products still reference the category.
        """
        if await self._store.get_category(category_id) is None:
            raise NotFoundError(CATEGORY, category_id)
        if await self._store.count_products(category_id) > 0:
            raise ValidationError("Cannot delete a category that has products")

        transaction = self._store.transaction()
        transaction.delete_category(category_id)
        await transaction.commit()

        await self._cache.remove(self._key_builder.build_entity_key(CATEGORY, category_id))
        logger.info("Category %d deleted", category_id)

    @staticmethod
    def _written_category(results: list[Product | Category | None]) -> Category:
        category = results[0] if results else None
        if not isinstance(category, Category):
            raise StoreError(f"Store returned {category!r} for a category write")
        return category

    @staticmethod
    def _clean_name(name: str) -> str:
        cleaned = (name or "").strip()
        if not cleaned:
            raise ValidationError("Category name is required")
        return cleaned
