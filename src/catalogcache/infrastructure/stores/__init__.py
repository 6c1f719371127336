"""Store implementations."""

from catalogcache.infrastructure.stores.memory import (
    InMemoryCatalogStore,
    InMemoryTransaction,
)

__all__ = ["InMemoryCatalogStore", "InMemoryTransaction"]
