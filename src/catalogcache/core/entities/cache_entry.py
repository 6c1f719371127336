"""Cache entry entity."""

from dataclasses import dataclass
from datetime import timedelta
from typing import Any


@dataclass(frozen=True)
class CacheEntry:
    """Immutable cache entry value object.

    Holds a cached value together with its absolute expiry time (on the
    cache's monotonic clock) and the weight it counts against the cache's
    size budget.
    """

    key: str
    value: Any
    expires_at: float
    weight: int = 1

    def is_expired(self, now: float) -> bool:
        """Check if entry has expired.

        Args:
            now: Current reading of the cache clock.

        Returns:
            True if the entry has expired, False otherwise.
        """
        return now >= self.expires_at

    @classmethod
    def create(
        cls,
        key: str,
        value: Any,
        ttl: timedelta,
        now: float,
        weight: int = 1,
    ) -> "CacheEntry":
        """Factory method to create a new cache entry.

        Args:
            key: The cache key.
            value: The value to cache.
            ttl: Time-to-live relative to ``now``.
            now: Current reading of the cache clock.
            weight: Cost of the entry against the size budget.

        Returns:
            A new CacheEntry instance.
        """
        return cls(
            key=key,
            value=value,
            expires_at=now + ttl.total_seconds(),
            weight=weight,
        )
