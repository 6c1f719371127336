"""Core interfaces (Protocol classes) for catalogcache."""

from catalogcache.core.interfaces.cache_backend import IVersionedCache
from catalogcache.core.interfaces.epoch_counter import IEpochCounter
from catalogcache.core.interfaces.identity import IAuthenticator
from catalogcache.core.interfaces.key_builder import IKeyBuilder
from catalogcache.core.interfaces.store import ICatalogStore, IStoreTransaction

__all__ = [
    "IVersionedCache",
    "IEpochCounter",
    "IKeyBuilder",
    "ICatalogStore",
    "IStoreTransaction",
    "IAuthenticator",
]
