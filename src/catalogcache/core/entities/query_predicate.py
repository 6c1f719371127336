"""Query predicate value object."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from catalogcache.utils.hashing import normalize_decimal

MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 10


@dataclass(frozen=True)
class QueryPredicate:
    """Immutable filter and pagination request for product listings.

    All supplied filters are conjunctive. Pagination coordinates are clamped
    on construction (page number to at least 1, page size to 1..100), so two
    out-of-range requests that mean the same page are equal predicates and
    share one cache key.

    Attributes:
        page_number: 1-based page index.
        page_size: Number of items per page.
        search: Case-insensitive substring matched against name or description.
        category_id: Restrict to a single category.
        min_price: Inclusive lower price bound.
        max_price: Inclusive upper price bound.
        is_active: Restrict to active (True) or inactive (False) products.
    """

    page_number: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    search: str | None = None
    category_id: int | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    is_active: bool | None = None

    def __post_init__(self) -> None:
        """Clamp pagination and normalize optional filters."""
        object.__setattr__(self, "page_number", max(1, int(self.page_number)))
        object.__setattr__(
            self,
            "page_size",
            min(MAX_PAGE_SIZE, max(MIN_PAGE_SIZE, int(self.page_size))),
        )

        search = self.search.strip() if self.search is not None else None
        object.__setattr__(self, "search", search or None)

        for name in ("min_price", "max_price"):
            bound = getattr(self, name)
            if bound is not None and not isinstance(bound, Decimal):
                object.__setattr__(self, name, Decimal(str(bound)))

    @property
    def offset(self) -> int:
        """Number of ordered rows that precede the requested page."""
        return (self.page_number - 1) * self.page_size

    def to_key_dict(self) -> dict[str, Any]:
        """Return a canonical, JSON-friendly form used for key derivation."""
        return {
            "page_number": self.page_number,
            "page_size": self.page_size,
            "search": self.search,
            "category_id": self.category_id,
            "min_price": (
                normalize_decimal(self.min_price) if self.min_price is not None else None
            ),
            "max_price": (
                normalize_decimal(self.max_price) if self.max_price is not None else None
            ),
            "is_active": self.is_active,
        }

    def with_page(self, page_number: int) -> "QueryPredicate":
        """Return the same filters pointed at another page."""
        return QueryPredicate(
            page_number=page_number,
            page_size=self.page_size,
            search=self.search,
            category_id=self.category_id,
            min_price=self.min_price,
            max_price=self.max_price,
            is_active=self.is_active,
        )
