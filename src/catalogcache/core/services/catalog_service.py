"""Catalog service - main entry point for decoded commands."""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from catalogcache.core.entities.catalog_config import (
    CREATE_POLICY,
    GLOBAL_POLICY,
    CatalogConfig,
)
from catalogcache.core.entities.commands import (
    CREATE_COMMANDS,
    Command,
    CreateBulkProducts,
    CreateCategory,
    CreateProduct,
    DeleteCategory,
    DeleteProduct,
    GetCategory,
    GetProduct,
    ListCategories,
    ListProducts,
    UpdateCategory,
    UpdateProduct,
)
from catalogcache.core.entities.outcome import Outcome, OutcomeKind
from catalogcache.core.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    RateLimitedError,
    ValidationError,
)
from catalogcache.core.interfaces.cache_backend import IVersionedCache
from catalogcache.core.interfaces.identity import IAuthenticator
from catalogcache.core.interfaces.key_builder import IKeyBuilder
from catalogcache.core.interfaces.store import ICatalogStore
from catalogcache.core.services.bulk_insert import BulkInsertPipeline
from catalogcache.core.services.category_service import CategoryService
from catalogcache.core.services.concurrency_guard import ConcurrencyGuard
from catalogcache.core.services.query_engine import CatalogQueryEngine
from catalogcache.core.services.rate_limiter import FixedWindowRateLimiter

logger = logging.getLogger(__name__)

INTERNAL_FAILURE_MESSAGE = "Internal server error"


class CatalogService:
    """Domain service that executes catalog commands.

    Composes the query engine, the mutation guard, the bulk pipeline and
    the category service behind one ``execute`` call that authenticates the
    caller, applies rate limiting and turns every failure into an
    ``Outcome`` kind.
    """

    def __init__(
        self,
        store: ICatalogStore,
        cache: IVersionedCache,
        key_builder: IKeyBuilder,
        config: CatalogConfig | None = None,
        rate_limiter: FixedWindowRateLimiter | None = None,
        authenticator: IAuthenticator | None = None,
    ) -> None:
        """Initialize the catalog service.

        Args:
            store: The authoritative store.
            cache: The versioned cache for the read path.
            key_builder: The key builder for list and entity keys.
            config: Optional configuration. Uses defaults if not provided.
            rate_limiter: Optional admission controller; no limiting if None.
            authenticator: Optional identity collaborator; commands are
                accepted without credentials if None.
        """
        self._config = config or CatalogConfig()
        self._cache = cache
        self._rate_limiter = rate_limiter
        self._authenticator = authenticator

        self._queries = CatalogQueryEngine(store, cache, key_builder, self._config)
        self._guard = ConcurrencyGuard(store, cache, key_builder)
        self._bulk = BulkInsertPipeline(store, self._guard, self._config)
        self._categories = CategoryService(store, cache, key_builder)

        self._handlers: dict[type, Callable[[Any], Awaitable[Any]]] = {
            ListProducts: self._list_products,
            GetProduct: self._get_product,
            CreateProduct: self._create_product,
            UpdateProduct: self._update_product,
            DeleteProduct: self._delete_product,
            CreateBulkProducts: self._create_bulk_products,
            GetCategory: self._get_category,
            ListCategories: self._list_categories,
            CreateCategory: self._create_category,
            UpdateCategory: self._update_category,
            DeleteCategory: self._delete_category,
        }

    @property
    def config(self) -> CatalogConfig:
        """Get the catalog configuration."""
        return self._config

    @property
    def queries(self) -> CatalogQueryEngine:
        return self._queries

    @property
    def guard(self) -> ConcurrencyGuard:
        return self._guard

    @property
    def bulk(self) -> BulkInsertPipeline:
        return self._bulk

    @property
    def categories(self) -> CategoryService:
        return self._categories

    async def execute(
        self,
        command: Command,
        client_id: str = "unknown",
        credentials: Any = None,
    ) -> Outcome:
        """Execute a decoded command on behalf of a caller.

        Args:
            command: The command to execute.
            client_id: Caller identity used as the rate limit partition key,
                typically its network address.
            credentials: Opaque credentials for the identity collaborator.

        Returns:
            A success outcome with the command's result, or a failure
            outcome whose message is safe to show the caller.
        """
        handler = self._handlers.get(type(command))
        if handler is None:
            return Outcome.failure(
                OutcomeKind.VALIDATION_FAILED,
                f"Unsupported command: {type(command).__name__}",
            )

        try:
            await self._authenticate(credentials)
            if self._rate_limiter is not None:
                await self._rate_limiter.acquire(client_id, self._policy_for(command))
            return await handler(command)
        except ValidationError as e:
            return Outcome.failure(OutcomeKind.VALIDATION_FAILED, str(e))
        except NotFoundError as e:
            return Outcome.failure(OutcomeKind.NOT_FOUND, str(e))
        except ConflictError as e:
            return Outcome.failure(OutcomeKind.CONFLICT, str(e))
        except RateLimitedError:
            return Outcome.failure(
                OutcomeKind.RATE_LIMITED, "Too many requests. Try again later."
            )
        except AuthenticationError as e:
            return Outcome.failure(OutcomeKind.UNAUTHENTICATED, str(e))
        except Exception:
            logger.exception(
                "Failed to execute %s for client %s", type(command).__name__, client_id
            )
            return Outcome.failure(OutcomeKind.INTERNAL_FAILURE, INTERNAL_FAILURE_MESSAGE)

    async def _authenticate(self, credentials: Any) -> None:
        if self._authenticator is None:
            return
        subject = await self._authenticator.authenticate(credentials)
        if subject is None:
            raise AuthenticationError("Authentication required")

    @staticmethod
    def _policy_for(command: Command) -> str:
        return CREATE_POLICY if isinstance(command, CREATE_COMMANDS) else GLOBAL_POLICY

    # Handlers

    async def _list_products(self, command: ListProducts) -> Outcome:
        return Outcome.success(await self._queries.list_products(command.predicate))

    async def _get_product(self, command: GetProduct) -> Outcome:
        return Outcome.success(await self._queries.get_product(command.product_id))

    async def _create_product(self, command: CreateProduct) -> Outcome:
        product = await self._guard.create_product(command.fields)
        return Outcome.success(product, "Product created")

    async def _update_product(self, command: UpdateProduct) -> Outcome:
        product = await self._guard.update_product(
            command.product_id, command.fields, command.expected_version
        )
        return Outcome.success(product, "Product updated")

    async def _delete_product(self, command: DeleteProduct) -> Outcome:
        await self._guard.delete_product(command.product_id, command.expected_version)
        return Outcome.success(message="Product deleted")

    async def _create_bulk_products(self, command: CreateBulkProducts) -> Outcome:
        result = await self._bulk.create_many(
            count=command.count,
            category_id=command.category_id,
            name_prefix=command.name_prefix,
            price_range=(command.min_price, command.max_price),
            batch_size=command.batch_size,
        )
        if result.error is not None and result.created_count == 0:
            return Outcome.failure(OutcomeKind.INTERNAL_FAILURE, INTERNAL_FAILURE_MESSAGE)
        return Outcome.success(result, result.message)

    async def _get_category(self, command: GetCategory) -> Outcome:
        return Outcome.success(await self._queries.get_category(command.category_id))

    async def _list_categories(self, command: ListCategories) -> Outcome:
        return Outcome.success(await self._queries.list_categories())

    async def _create_category(self, command: CreateCategory) -> Outcome:
        category = await self._categories.create_category(command.fields)
        return Outcome.success(category, "Category created")

    async def _update_category(self, command: UpdateCategory) -> Outcome:
        category = await self._categories.update_category(
            command.category_id, command.fields
        )
        return Outcome.success(category, "Category updated")

    async def _delete_category(self, command: DeleteCategory) -> Outcome:
        await self._categories.delete_category(command.category_id)
        return Outcome.success(message="Category deleted")
