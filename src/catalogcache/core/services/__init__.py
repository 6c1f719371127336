"""Domain services for catalogcache."""

from catalogcache.core.services.bulk_insert import BulkInsertPipeline
from catalogcache.core.services.catalog_service import CatalogService
from catalogcache.core.services.category_service import CategoryService
from catalogcache.core.services.concurrency_guard import ConcurrencyGuard
from catalogcache.core.services.query_engine import CatalogQueryEngine
from catalogcache.core.services.rate_limiter import (
    Admission,
    AdmissionDecision,
    FixedWindowRateLimiter,
)

__all__ = [
    "CatalogService",
    "CatalogQueryEngine",
    "ConcurrencyGuard",
    "BulkInsertPipeline",
    "CategoryService",
    # Admission control
    "FixedWindowRateLimiter",
    "Admission",
    "AdmissionDecision",
]
