"""catalogcache - Cached catalog query and mutation service.

A Python library serving a product-and-category catalog through a
process-local read cache with epoch-based invalidation, a windowed bulk
insert pipeline, optimistic-concurrency conflict detection and per-caller
fixed-window rate limiting.

Example:
    from decimal import Decimal

    from catalogcache import (
        CategoryFields,
        CreateCategory,
        CreateProduct,
        ListProducts,
        ProductFields,
        QueryPredicate,
        create_catalog_service,
    )

    service = create_catalog_service()

    created = await service.execute(
        CreateCategory(CategoryFields(name="Servers")),
        client_id="10.0.0.7",
    )
    await service.execute(
        CreateProduct(
            ProductFields(
                name="Rack server",
                price=Decimal("1999.90"),
                stock=4,
                category_id=created.value.id,
            )
        ),
        client_id="10.0.0.7",
    )

    # Served from the store the first time, from the cache afterwards,
    # until the next product mutation bumps the epoch.
    outcome = await service.execute(
        ListProducts(QueryPredicate(search="rack", page_size=20)),
        client_id="10.0.0.7",
    )
    for product in outcome.value.items:
        print(product.name, product.price)
"""

from catalogcache.core.entities import (
    CREATE_POLICY,
    GLOBAL_POLICY,
    BulkCreateResult,
    CacheEntry,
    CatalogConfig,
    Category,
    CategoryFields,
    CategoryView,
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
    Outcome,
    OutcomeKind,
    PagedResult,
    Product,
    ProductFields,
    ProductView,
    QueryPredicate,
    RateLimitPolicy,
    Subject,
    UpdateCategory,
    UpdateProduct,
)
from catalogcache.core.errors import (
    AuthenticationError,
    CatalogError,
    ConcurrencyConflictError,
    ConflictError,
    NotFoundError,
    RateLimitedError,
    StoreError,
    ValidationError,
)
from catalogcache.core.interfaces import (
    IAuthenticator,
    ICatalogStore,
    IEpochCounter,
    IKeyBuilder,
    IStoreTransaction,
    IVersionedCache,
)
from catalogcache.core.services import (
    Admission,
    AdmissionDecision,
    BulkInsertPipeline,
    CatalogQueryEngine,
    CatalogService,
    CategoryService,
    ConcurrencyGuard,
    FixedWindowRateLimiter,
)
from catalogcache.factory import create_catalog_service
from catalogcache.infrastructure import (
    AtomicEpochCounter,
    DefaultKeyBuilder,
    InMemoryCatalogStore,
    InMemoryVersionedCache,
    StaticTokenAuthenticator,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Core entities
    "CacheEntry",
    "CatalogConfig",
    "RateLimitPolicy",
    "CREATE_POLICY",
    "GLOBAL_POLICY",
    "QueryPredicate",
    "Category",
    "CategoryFields",
    "CategoryView",
    "Product",
    "ProductFields",
    "ProductView",
    "PagedResult",
    "BulkCreateResult",
    "Subject",
    # Commands and outcomes
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
    "Outcome",
    "OutcomeKind",
    # Errors
    "CatalogError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "RateLimitedError",
    "AuthenticationError",
    "StoreError",
    "ConcurrencyConflictError",
    # Core interfaces
    "IVersionedCache",
    "IEpochCounter",
    "IKeyBuilder",
    "ICatalogStore",
    "IStoreTransaction",
    "IAuthenticator",
    # Core services
    "CatalogService",
    "CatalogQueryEngine",
    "ConcurrencyGuard",
    "BulkInsertPipeline",
    "CategoryService",
    "FixedWindowRateLimiter",
    "Admission",
    "AdmissionDecision",
    # Infrastructure implementations
    "InMemoryVersionedCache",
    "AtomicEpochCounter",
    "DefaultKeyBuilder",
    "InMemoryCatalogStore",
    "StaticTokenAuthenticator",
    # Wiring
    "create_catalog_service",
]
