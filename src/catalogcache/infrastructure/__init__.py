"""Infrastructure layer implementations for catalogcache."""

from catalogcache.infrastructure.backends import InMemoryVersionedCache
from catalogcache.infrastructure.counters import AtomicEpochCounter
from catalogcache.infrastructure.identity import StaticTokenAuthenticator
from catalogcache.infrastructure.key_builders import DefaultKeyBuilder
from catalogcache.infrastructure.stores import InMemoryCatalogStore

__all__ = [
    "InMemoryVersionedCache",
    "AtomicEpochCounter",
    "DefaultKeyBuilder",
    "InMemoryCatalogStore",
    "StaticTokenAuthenticator",
]
