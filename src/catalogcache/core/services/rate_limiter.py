"""Fixed-window rate limiter.

Counts requests per ``(policy, partition key)`` inside fixed time windows.
Requests over the permit limit wait in a FIFO queue (up to the policy's
queue limit) and are admitted when a window rolls over; anything beyond the
queue is rejected at once.
"""

import asyncio
import logging
import threading
import time
from collections import deque
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum

from catalogcache.core.entities.catalog_config import RateLimitPolicy
from catalogcache.core.errors import RateLimitedError

logger = logging.getLogger(__name__)


class AdmissionDecision(Enum):
    ADMITTED = "ADMITTED"
    QUEUED = "QUEUED"
    REJECTED = "REJECTED"


@dataclass(frozen=True)
class Admission:
    """Result of ``try_admit``.

    A queued admission carries a future that resolves once the request is
    admitted by a later window.
    """

    decision: AdmissionDecision
    waiter: "asyncio.Future[None] | None" = None


@dataclass
class _Partition:
    policy: RateLimitPolicy
    window_start: float
    count: int = 0
    queue: "deque[asyncio.Future[None]]" = field(default_factory=deque)
    timer: asyncio.TimerHandle | None = None
    lock: threading.Lock = field(default_factory=threading.Lock)
    purged: bool = False


class FixedWindowRateLimiter:
    """Per-caller fixed-window admission controller.

    The partition table lock is held only to find or create a partition;
    counting and queueing happen under the partition's own lock, so a burst
    from one caller never blocks another.
    """

    def __init__(
        self,
        policies: Mapping[str, RateLimitPolicy],
        timer: Callable[[], float] = time.monotonic,
        purge_interval: int = 1024,
    ) -> None:
        """Initialize the limiter.

        Args:
            policies: Named policies, e.g. ``"create"`` and ``"global"``.
            timer: Monotonic clock used for window boundaries.
            purge_interval: Partition creations between idle-partition sweeps.
        """
        self._policies = dict(policies)
        self._timer = timer
        self._purge_interval = purge_interval
        self._partitions: dict[tuple[str, str], _Partition] = {}
        self._table_lock = threading.Lock()
        self._created_since_purge = 0

    @property
    def policies(self) -> dict[str, RateLimitPolicy]:
        return dict(self._policies)

    def try_admit(self, partition_key: str, policy_name: str) -> Admission:
        """Decide whether a request may proceed now.

        Queuing needs a running event loop, since the returned waiter is an
        asyncio future.

        Args:
            partition_key: Caller identity, e.g. its network address.
            policy_name: Name of the policy guarding the operation.

        Returns:
            The admission decision.

        Raises:
            KeyError: If the policy is unknown.
        """
        while True:
            partition = self._partition(partition_key, policy_name)
            policy = partition.policy

            with partition.lock:
                if partition.purged:
                    # Swept between lookup and lock; look it up again
                    continue

                now = self._timer()
                self._roll_window(partition, now)

                if partition.count < policy.permit_limit and not partition.queue:
                    partition.count += 1
                    return Admission(AdmissionDecision.ADMITTED)

                if len(partition.queue) < policy.queue_limit:
                    loop = asyncio.get_running_loop()
                    waiter: asyncio.Future[None] = loop.create_future()
                    partition.queue.append(waiter)
                    self._schedule_rollover(partition, loop, now)
                    return Admission(AdmissionDecision.QUEUED, waiter)
                break

        logger.warning(
            "Rate limit '%s' rejected request from %s", policy_name, partition_key
        )
        return Admission(AdmissionDecision.REJECTED)

    async def acquire(self, partition_key: str, policy_name: str) -> None:
        """Wait until the request is admitted.

        Args:
            partition_key: Caller identity.
            policy_name: Name of the policy guarding the operation.

        Raises:
            RateLimitedError: If the partition's queue is full.
        """
        admission = self.try_admit(partition_key, policy_name)
        if admission.decision is AdmissionDecision.REJECTED:
            raise RateLimitedError(partition_key, policy_name)
        if admission.waiter is not None:
            await admission.waiter

    def purge_idle(self) -> int:
        """Forget partitions whose window has ended and nothing is queued.

        Returns:
            Number of partitions removed.
        """
        now = self._timer()
        removed = 0
        with self._table_lock:
            for key, partition in list(self._partitions.items()):
                with partition.lock:
                    window = partition.policy.window.total_seconds()
                    if not partition.queue and now - partition.window_start >= window:
                        partition.purged = True
                        del self._partitions[key]
                        removed += 1
        return removed

    def __len__(self) -> int:
        """Return the number of tracked partitions."""
        with self._table_lock:
            return len(self._partitions)

    def _partition(self, partition_key: str, policy_name: str) -> _Partition:
        policy = self._policies[policy_name]
        key = (policy_name, partition_key)
        with self._table_lock:
            partition = self._partitions.get(key)
            if partition is not None:
                return partition
            partition = _Partition(policy=policy, window_start=self._timer())
            self._partitions[key] = partition
            self._created_since_purge += 1
            should_purge = self._created_since_purge >= self._purge_interval
            if should_purge:
                self._created_since_purge = 0
        if should_purge:
            self.purge_idle()
        return partition

    def _roll_window(self, partition: _Partition, now: float) -> None:
        """Start a new window if the current one ended and drain the queue.

        Caller must hold ``partition.lock``.
        """
        window = partition.policy.window.total_seconds()
        if now - partition.window_start < window:
            return

        elapsed_windows = int((now - partition.window_start) // window)
        partition.window_start += elapsed_windows * window
        partition.count = 0

        while partition.queue and partition.count < partition.policy.permit_limit:
            waiter = partition.queue.popleft()
            if waiter.done():
                # Caller gave up while queued
                continue
            partition.count += 1
            waiter.set_result(None)

    def _schedule_rollover(
        self,
        partition: _Partition,
        loop: asyncio.AbstractEventLoop,
        now: float,
    ) -> None:
        """Arrange for the queue to drain when the current window ends.

        Caller must hold ``partition.lock``.
        """
        if partition.timer is not None:
            return
        window = partition.policy.window.total_seconds()
        delay = max(0.0, partition.window_start + window - now)
        partition.timer = loop.call_later(delay, self._on_rollover, partition, loop)

    def _on_rollover(
        self, partition: _Partition, loop: asyncio.AbstractEventLoop
    ) -> None:
        with partition.lock:
            partition.timer = None
            now = self._timer()
            self._roll_window(partition, now)
            if partition.queue:
                self._schedule_rollover(partition, loop, now)
