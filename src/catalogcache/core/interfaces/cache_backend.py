"""Versioned cache interface."""

from datetime import timedelta
from typing import Any, Protocol


class IVersionedCache(Protocol):
    """Contract for the read-path cache.

    A bounded key/value store with per-entry TTL and a global epoch. List
    keys embed the epoch, so bumping it invalidates every previously built
    list key at once. Methods that touch entries are async so a distributed
    implementation can stand in for the in-memory one.
    """

    async def get(self, key: str) -> tuple[Any, bool]:
        """Retrieve cached value by key.

        Args:
            key: The cache key to retrieve.

        Returns:
            ``(value, True)`` on a hit, ``(None, False)`` if the key was
            never set, has expired or was removed.
        """
        ...

    async def set(
        self,
        key: str,
        value: Any,
        ttl: timedelta,
        weight: int = 1,
    ) -> None:
        """Store value, overwriting any existing entry.

        Args:
            key: The cache key.
            value: The value to store.
            ttl: Time-to-live of the entry.
            weight: Cost against the size budget (capped by the backend).
        """
        ...

    async def remove(self, key: str) -> bool:
        """Remove a cached value. Idempotent.

        Args:
            key: The cache key to remove.

        Returns:
            True if the key existed and was removed, False otherwise.
        """
        ...

    def bump_epoch(self) -> int:
        """Advance the epoch by one and return the new value."""
        ...

    @property
    def epoch(self) -> int:
        """Current epoch value."""
        ...
