"""Cache backend implementations."""

from catalogcache.infrastructure.backends.memory import InMemoryVersionedCache

__all__ = ["InMemoryVersionedCache"]
