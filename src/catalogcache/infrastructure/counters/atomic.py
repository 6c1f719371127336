"""Lock-guarded epoch counter."""

import threading


class AtomicEpochCounter:
    """Process-wide epoch counter safe for concurrent callers.

    Reads and increments happen under a lock, so a bump is never lost and a
    read never observes a torn value, whether callers are asyncio tasks or
    threads.
    """

    def __init__(self, initial: int = 0) -> None:
        """Initialize the counter.

        Args:
            initial: Starting epoch value.
        """
        self._value = initial
        self._lock = threading.Lock()

    @property
    def value(self) -> int:
        with self._lock:
            return self._value

    def increment(self) -> int:
        """Advance the epoch by one.

        Returns:
            The new epoch value.
        """
        with self._lock:
            self._value += 1
            return self._value
