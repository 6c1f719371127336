"""Catalog domain entities and read models."""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Generic, TypeVar

T = TypeVar("T")

PRICE_QUANTUM = Decimal("0.01")


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def round_price(value: Decimal | float | int | str) -> Decimal:
    """Round a price to two decimal places (half-up).

    Args:
        value: Any value ``Decimal`` accepts.

    Returns:
        The price as a two-place ``Decimal``.
    """
    return Decimal(str(value)).quantize(PRICE_QUANTUM, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Category:
    """Stored category record."""

    id: int
    name: str
    description: str | None = None
    image_url: str | None = None
    created_at: datetime = field(default_factory=utcnow)


@dataclass(frozen=True)
class Product:
    """Stored product record.

    ``version`` is the row-version token used for optimistic concurrency.
    The store assigns ``id`` and bumps ``version`` on every committed update.
    """

    id: int
    name: str
    price: Decimal
    stock: int
    category_id: int
    description: str | None = None
    sku: str | None = None
    is_active: bool = True
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime | None = None
    version: int = 1


@dataclass(frozen=True)
class ProductFields:
    """Caller-supplied product attributes for create and update."""

    name: str
    price: Decimal
    stock: int
    category_id: int
    description: str | None = None
    sku: str | None = None
    is_active: bool = True


@dataclass(frozen=True)
class CategoryFields:
    """Caller-supplied category attributes for create and update."""

    name: str
    description: str | None = None
    image_url: str | None = None


@dataclass(frozen=True)
class ProductView:
    """Product joined with its category data, as returned to callers."""

    id: int
    name: str
    description: str | None
    price: Decimal
    stock: int
    sku: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime | None
    category_id: int
    category_name: str
    category_image_url: str | None
    version: int

    @classmethod
    def from_product(
        cls, product: Product, category: Category | None
    ) -> "ProductView":
        """Build the read model for a product and its (optional) category."""
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            price=product.price,
            stock=product.stock,
            sku=product.sku,
            is_active=product.is_active,
            created_at=product.created_at,
            updated_at=product.updated_at,
            category_id=product.category_id,
            category_name=category.name if category else "",
            category_image_url=category.image_url if category else None,
            version=product.version,
        )


@dataclass(frozen=True)
class CategoryView:
    """Category with its derived product count."""

    id: int
    name: str
    description: str | None
    image_url: str | None
    created_at: datetime
    product_count: int = 0

    @classmethod
    def from_category(cls, category: Category, product_count: int) -> "CategoryView":
        return cls(
            id=category.id,
            name=category.name,
            description=category.description,
            image_url=category.image_url,
            created_at=category.created_at,
            product_count=product_count,
        )


@dataclass(frozen=True)
class PagedResult(Generic[T]):
    """One page of an ordered result set."""

    items: tuple[T, ...]
    total_count: int
    page_number: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size) if self.page_size else 0

    @property
    def has_previous_page(self) -> bool:
        return self.page_number > 1

    @property
    def has_next_page(self) -> bool:
        return self.page_number < self.total_pages
