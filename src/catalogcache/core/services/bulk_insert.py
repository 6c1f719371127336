"""Bulk insert pipeline - windowed synthetic product generation."""

import logging
import random
import time
from collections.abc import Callable
from datetime import timedelta
from decimal import Decimal

from catalogcache.core.entities.catalog import Category, ProductFields, round_price
from catalogcache.core.entities.catalog_config import CatalogConfig
from catalogcache.core.entities.outcome import BulkCreateResult
from catalogcache.core.errors import ValidationError
from catalogcache.core.interfaces.store import ICatalogStore
from catalogcache.core.services.concurrency_guard import ConcurrencyGuard, sku_stem

logger = logging.getLogger(__name__)

PROGRESS_EVERY = 10


class BulkInsertPipeline:
    """Generates and commits large batches of products in bounded windows.

    Each window builds at most ``batch_size`` products in memory and commits
    them in one store transaction, so memory and transaction size stay
    bounded whatever the total count. The epoch is bumped once at the end,
    also when a window fails after earlier ones committed.
    """

    def __init__(
        self,
        store: ICatalogStore,
        guard: ConcurrencyGuard,
        config: CatalogConfig | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        """Initialize the pipeline.

        Args:
            store: The authoritative store.
            guard: Owner of the shared invalidation path.
            config: Optional configuration. Uses defaults if not provided.
            rng: Random source for prices and stock, injectable for tests.
            clock: Clock used to measure elapsed time.
        """
        self._store = store
        self._guard = guard
        self._config = config or CatalogConfig()
        self._rng = rng or random.Random()
        self._clock = clock

    async def create_many(
        self,
        count: int,
        category_id: int,
        name_prefix: str = "Product",
        price_range: tuple[Decimal, Decimal] = (Decimal("10"), Decimal("1000")),
        batch_size: int | None = None,
    ) -> BulkCreateResult:
        """Create ``count`` synthetic products in one category.

        Args:
            count: Number of products, 1..``bulk_max_count``.
            category_id: Category of every generated product.
            name_prefix: Product names are ``"<prefix> <n:06d>"``.
            price_range: Inclusive ``(min, max)`` price bounds.
            batch_size: Products per committed window, 1..``bulk_max_batch_size``.

        Returns:
            The number committed and the elapsed time. When a window fails,
            ``error`` is set and the count covers earlier windows only.

        Raises:
            ValidationError: Bad count, batch size or price range, or an
                unknown category. Nothing is written in that case.
        """
        if batch_size is None:
            batch_size = self._config.bulk_default_batch_size
        min_price, max_price = (Decimal(str(bound)) for bound in price_range)
        self._validate(count, batch_size, min_price, max_price)

        category = await self._store.get_category(category_id)
        if category is None:
            raise ValidationError("The specified category does not exist")

        name_prefix = (name_prefix or "").strip() or "Product"
        logger.info(
            "Starting bulk creation of %d products for category %s",
            count, category.name,
        )

        started = self._clock()
        created = 0
        error: str | None = None
        window = 0

        while created < count:
            size = min(batch_size, count - created)
            batch = [
                self._generate(category, name_prefix, created + i + 1, min_price, max_price)
                for i in range(size)
            ]
            transaction = self._store.transaction()
            transaction.add_products(batch)
            try:
                await transaction.commit()
            except Exception as e:
                logger.exception(
                    "Bulk creation stopped after %d/%d products", created, count
                )
                error = str(e) or type(e).__name__
                break

            created += size
            if window % PROGRESS_EVERY == 0 or created == count:
                logger.info("Progress: %d/%d products created", created, count)
            window += 1

        if created:
            await self._guard.invalidate(category_ids=[category_id])

        elapsed = timedelta(seconds=self._clock() - started)
        result = BulkCreateResult(
            created_count=created,
            requested_count=count,
            category_name=category.name,
            elapsed=elapsed,
            error=error,
        )
        logger.info("Bulk creation finished: %s", result.message)
        return result

    def _validate(
        self, count: int, batch_size: int, min_price: Decimal, max_price: Decimal
    ) -> None:
        limit = self._config.bulk_max_count
        if not 1 <= count <= limit:
            raise ValidationError(f"Count must be between 1 and {limit:,}")
        max_batch = self._config.bulk_max_batch_size
        if not 1 <= batch_size <= max_batch:
            raise ValidationError(f"Batch size must be between 1 and {max_batch:,}")
        if min_price <= 0 or max_price < min_price:
            raise ValidationError("Price range must satisfy 0 < min <= max")

    def _generate(
        self,
        category: Category,
        name_prefix: str,
        number: int,
        min_price: Decimal,
        max_price: Decimal,
    ) -> ProductFields:
        price = self._rng.uniform(float(min_price), float(max_price))
        return ProductFields(
            name=f"{name_prefix} {number:06d}",
            description=f"Generated product #{number} for {category.name}",
            price=min(max(round_price(price), min_price), max_price),
            stock=self._rng.randrange(self._config.bulk_stock_ceiling),
            sku=f"{sku_stem(category.name)}-{time.time_ns()}-{number:06d}",
            category_id=category.id,
            is_active=True,
        )
