"""Domain entities for catalogcache."""

from catalogcache.core.entities.cache_entry import CacheEntry
from catalogcache.core.entities.catalog import (
    Category,
    CategoryFields,
    CategoryView,
    PagedResult,
    Product,
    ProductFields,
    ProductView,
    round_price,
)
from catalogcache.core.entities.catalog_config import (
    CREATE_POLICY,
    GLOBAL_POLICY,
    CatalogConfig,
    RateLimitPolicy,
)
from catalogcache.core.entities.commands import (
    Command,
    CreateBulkProducts,
    CreateCategory,
    CreateProduct,
    DeleteCategory,
    DeleteProduct,
    GetCategory,
    GetProduct,
    ListCategories,
    ListProducts,
    UpdateCategory,
    UpdateProduct,
)
from catalogcache.core.entities.outcome import (
    BulkCreateResult,
    Outcome,
    OutcomeKind,
    Subject,
)
from catalogcache.core.entities.query_predicate import QueryPredicate

__all__ = [
    "CacheEntry",
    "CatalogConfig",
    "RateLimitPolicy",
    "CREATE_POLICY",
    "GLOBAL_POLICY",
    # Catalog records and read models
    "Category",
    "CategoryFields",
    "CategoryView",
    "PagedResult",
    "Product",
    "ProductFields",
    "ProductView",
    "QueryPredicate",
    "round_price",
    # Commands
    "Command",
    "ListProducts",
    "GetProduct",
    "CreateProduct",
    "UpdateProduct",
    "DeleteProduct",
    "CreateBulkProducts",
    "GetCategory",
    "ListCategories",
    "CreateCategory",
    "UpdateCategory",
    "DeleteCategory",
    # Results
    "BulkCreateResult",
    "Outcome",
    "OutcomeKind",
    "Subject",
]
