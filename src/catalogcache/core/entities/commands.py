"""Inbound commands accepted by the catalog service.

Commands arrive already decoded from the transport; they carry structured,
typed values only.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from catalogcache.core.entities.catalog import CategoryFields, ProductFields
from catalogcache.core.entities.query_predicate import QueryPredicate


@dataclass(frozen=True)
class ListProducts:
    predicate: QueryPredicate = field(default_factory=QueryPredicate)


@dataclass(frozen=True)
class GetProduct:
    product_id: int


@dataclass(frozen=True)
class CreateProduct:
    fields: ProductFields


@dataclass(frozen=True)
class UpdateProduct:
    """Replace a product's attributes.

    ``expected_version`` is the row version the caller last read. When
    omitted the version read at the start of the update is used.
    """

    product_id: int
    fields: ProductFields
    expected_version: int | None = None


@dataclass(frozen=True)
class DeleteProduct:
    product_id: int
    expected_version: int | None = None


@dataclass(frozen=True)
class CreateBulkProducts:
    """Generate ``count`` synthetic products in one category."""

    count: int
    category_id: int
    name_prefix: str = "Product"
    min_price: Decimal = Decimal("10")
    max_price: Decimal = Decimal("1000")
    batch_size: int | None = None


@dataclass(frozen=True)
class GetCategory:
    category_id: int


@dataclass(frozen=True)
class ListCategories:
    pass


@dataclass(frozen=True)
class CreateCategory:
    fields: CategoryFields


@dataclass(frozen=True)
class UpdateCategory:
    category_id: int
    fields: CategoryFields


@dataclass(frozen=True)
class DeleteCategory:
    category_id: int


Command = (
    ListProducts
    | GetProduct
    | CreateProduct
    | UpdateProduct
    | DeleteProduct
    | CreateBulkProducts
    | GetCategory
    | ListCategories
    | CreateCategory
    | UpdateCategory
    | DeleteCategory
)

CREATE_COMMANDS = (CreateProduct, CreateBulkProducts, CreateCategory)
