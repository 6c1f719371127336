"""Catalog configuration entity."""

from dataclasses import dataclass, field
from datetime import timedelta

CREATE_POLICY = "create"
GLOBAL_POLICY = "global"


@dataclass(frozen=True)
class RateLimitPolicy:
    """Fixed-window admission policy.

    Attributes:
        permit_limit: Requests admitted per window and partition.
        window: Length of a counting window.
        queue_limit: Requests allowed to wait for the next window.
    """

    permit_limit: int
    window: timedelta
    queue_limit: int = 0

    def __post_init__(self) -> None:
        if self.permit_limit < 1:
            raise ValueError("permit_limit must be at least 1")
        if self.window <= timedelta(0):
            raise ValueError("window must be positive")
        if self.queue_limit < 0:
            raise ValueError("queue_limit cannot be negative")


def default_rate_limits() -> dict[str, RateLimitPolicy]:
    """Return the default per-caller policies.

    ``create`` guards the mutating create paths and is tighter than
    ``global``, which guards everything else.
    """
    return {
        CREATE_POLICY: RateLimitPolicy(
            permit_limit=20_000,
            window=timedelta(seconds=30),
            queue_limit=50_000,
        ),
        GLOBAL_POLICY: RateLimitPolicy(
            permit_limit=50_000,
            window=timedelta(seconds=30),
            queue_limit=50_000,
        ),
    }


@dataclass
class CatalogConfig:
    """Catalog service configuration.

    Provides TTLs for the three families of cached reads, the cache size
    budget, bulk insert bounds, and the rate limit policies.

    Weight:
        Every cache entry costs a weight against ``size_limit``. List pages
        cost one unit per item on the page, single entities cost one unit,
        and no entry may cost more than ``max_entry_weight``.
    """

    enabled: bool = True
    key_prefix: str = "catalog"

    # TTL policy
    list_ttl: timedelta | None = None
    entity_ttl: timedelta | None = None
    category_ttl: timedelta | None = None

    # Size budget
    size_limit: int = 10_000
    max_entry_weight: int = 100

    # Bulk insert
    bulk_max_count: int = 100_000
    bulk_default_batch_size: int = 1000
    bulk_max_batch_size: int = 10_000
    bulk_stock_ceiling: int = 1000

    rate_limits: dict[str, RateLimitPolicy] = field(default_factory=default_rate_limits)

    def __post_init__(self) -> None:
        """Set default TTLs if not provided."""
        if self.list_ttl is None:
            self.list_ttl = timedelta(seconds=30)
        if self.entity_ttl is None:
            self.entity_ttl = timedelta(minutes=5)
        if self.category_ttl is None:
            self.category_ttl = timedelta(minutes=10)
        if self.max_entry_weight < 1:
            raise ValueError("max_entry_weight must be at least 1")
        if self.size_limit < self.max_entry_weight:
            raise ValueError("size_limit must be at least max_entry_weight")
        if not 1 <= self.bulk_default_batch_size <= self.bulk_max_batch_size:
            raise ValueError(
                "bulk_default_batch_size must be between 1 and bulk_max_batch_size"
            )
