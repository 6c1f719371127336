"""Wiring of the default in-memory catalog service."""

from catalogcache.core.entities.catalog_config import CatalogConfig
from catalogcache.core.interfaces.identity import IAuthenticator
from catalogcache.core.interfaces.store import ICatalogStore
from catalogcache.core.services.catalog_service import CatalogService
from catalogcache.core.services.rate_limiter import FixedWindowRateLimiter
from catalogcache.infrastructure.backends.memory import InMemoryVersionedCache
from catalogcache.infrastructure.counters.atomic import AtomicEpochCounter
from catalogcache.infrastructure.key_builders.default import DefaultKeyBuilder
from catalogcache.infrastructure.stores.memory import InMemoryCatalogStore


def create_catalog_service(
    store: ICatalogStore | None = None,
    config: CatalogConfig | None = None,
    authenticator: IAuthenticator | None = None,
    rate_limited: bool = True,
) -> CatalogService:
    """Build a catalog service with the in-memory cache and limiter.

    Args:
        store: The store to serve; an empty in-memory store if None.
        config: Optional configuration. Uses defaults if not provided.
        authenticator: Optional identity collaborator.
        rate_limited: Whether to apply the configured rate limit policies.

    Returns:
        A ready-to-use CatalogService.

    Example:
        service = create_catalog_service()
        outcome = await service.execute(
            CreateCategory(CategoryFields(name="Servers")),
            client_id="10.0.0.7",
        )
    """
    config = config or CatalogConfig()
    cache = InMemoryVersionedCache(
        epoch_counter=AtomicEpochCounter(),
        size_limit=config.size_limit,
        max_entry_weight=config.max_entry_weight,
    )
    return CatalogService(
        store=store if store is not None else InMemoryCatalogStore(),
        cache=cache,
        key_builder=DefaultKeyBuilder(prefix=config.key_prefix),
        config=config,
        rate_limiter=FixedWindowRateLimiter(config.rate_limits) if rate_limited else None,
        authenticator=authenticator,
    )
