"""Core domain layer for catalogcache."""

from catalogcache.core.entities import CacheEntry, CatalogConfig, QueryPredicate
from catalogcache.core.interfaces import (
    IAuthenticator,
    ICatalogStore,
    IEpochCounter,
    IKeyBuilder,
    IStoreTransaction,
    IVersionedCache,
)
from catalogcache.core.services import CatalogService

__all__ = [
    # Entities
    "CacheEntry",
    "CatalogConfig",
    "QueryPredicate",
    # Interfaces
    "IVersionedCache",
    "IEpochCounter",
    "IKeyBuilder",
    "ICatalogStore",
    "IStoreTransaction",
    "IAuthenticator",
    # Services
    "CatalogService",
]
