"""In-memory versioned cache implementation."""

import logging
import threading
import time
from collections.abc import Callable
from datetime import timedelta
from typing import Any

from cachetools import Cache, TLRUCache  # type: ignore[import-untyped]

from catalogcache.core.entities.cache_entry import CacheEntry
from catalogcache.core.interfaces.epoch_counter import IEpochCounter
from catalogcache.infrastructure.counters.atomic import AtomicEpochCounter

logger = logging.getLogger(__name__)


def _time_to_use(key: str, entry: CacheEntry, now: float) -> float:
    return entry.expires_at


def _entry_weight(entry: CacheEntry) -> int:
    return entry.weight


class _InsertionOrderedTLRUCache(TLRUCache):
    """TLRUCache whose reads leave the eviction order untouched.

    Only writing a key moves it to the back, so ``popitem`` removes the
    least recently inserted live entry.
    """

    def __getitem__(self, key: str, cache_getitem: Any = Cache.__getitem__) -> CacheEntry:
        # TLRUCache.__contains__ checks expiry without reordering
        if key not in self:
            return self.__missing__(key)
        return cache_getitem(self, key)


class InMemoryVersionedCache:
    """Size-bounded in-memory cache with per-entry TTL and a global epoch.

    Suitable for single-process deployments. Uses cachetools' TLRUCache so
    every entry carries its own expiry and counts its weight against
    ``size_limit``. When an insert would exceed the budget, expired entries
    go first and then the least recently inserted ones; reads do not
    refresh an entry's position.

    cachetools caches are not thread-safe, so entry access is serialized by
    a lock held only for the in-memory operation itself.
    """

    def __init__(
        self,
        epoch_counter: IEpochCounter | None = None,
        size_limit: int = 10_000,
        max_entry_weight: int = 100,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the in-memory cache.

        Args:
            epoch_counter: Shared epoch; a private counter is created if None.
            size_limit: Total weight the cache may hold.
            max_entry_weight: Upper bound on the weight of a single entry.
            timer: Monotonic clock, injectable for tests.
        """
        if max_entry_weight < 1 or size_limit < max_entry_weight:
            raise ValueError("size_limit must be >= max_entry_weight >= 1")

        self._epoch = epoch_counter or AtomicEpochCounter()
        self._size_limit = size_limit
        self._max_entry_weight = max_entry_weight
        self._timer = timer
        self._cache: TLRUCache[str, CacheEntry] = _InsertionOrderedTLRUCache(
            maxsize=size_limit,
            ttu=_time_to_use,
            timer=timer,
            getsizeof=_entry_weight,
        )
        self._lock = threading.Lock()

    async def get(self, key: str) -> tuple[Any, bool]:
        """Retrieve cached value by key.

        Args:
            key: The cache key to retrieve.

        Returns:
            ``(value, True)`` on a hit, ``(None, False)`` otherwise.
        """
        with self._lock:
            entry = self._cache.get(key)
        if entry is None:
            return None, False
        return entry.value, True

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
            weight: Cost against the size budget, clamped to
                ``1..max_entry_weight``.
        """
        entry = CacheEntry.create(
            key=key,
            value=value,
            ttl=ttl,
            now=self._timer(),
            weight=self._bounded_weight(weight),
        )
        with self._lock:
            # TLRUCache silently skips entries that are already expired
            self._cache[key] = entry

    async def remove(self, key: str) -> bool:
        """Remove a cached value. Idempotent.

        Args:
            key: The cache key to remove.

        Returns:
            True if the key existed and was removed, False otherwise.
        """
        with self._lock:
            try:
                del self._cache[key]
                return True
            except KeyError:
                return False

    def bump_epoch(self) -> int:
        """Advance the epoch, orphaning every list key built before."""
        new_epoch = self._epoch.increment()
        logger.debug("Product listings invalidated, epoch is now %d", new_epoch)
        return new_epoch

    @property
    def epoch(self) -> int:
        """Current epoch value."""
        return self._epoch.value

    async def clear(self) -> None:
        """Clear all cached values. The epoch is left untouched."""
        with self._lock:
            self._cache.clear()

    def expire(self) -> int:
        """Drop expired entries now instead of on the next write.

        Returns:
            Number of entries removed.
        """
        with self._lock:
            return len(list(self._cache.expire()))

    def _bounded_weight(self, weight: int) -> int:
        return max(1, min(int(weight), self._max_entry_weight))

    def __len__(self) -> int:
        """Return the number of entries currently held."""
        with self._lock:
            return len(self._cache)

    @property
    def current_weight(self) -> int:
        """Return the summed weight of the held entries."""
        with self._lock:
            return int(self._cache.currsize)

    @property
    def size_limit(self) -> int:
        """Return the weight budget of the cache."""
        return self._size_limit

    @property
    def max_entry_weight(self) -> int:
        return self._max_entry_weight
