"""Catalog value objects.

Immutable records shared by every layer: the catalog item as this core
sees it, the normalized filter state that drives a listing request, and
the page of results a single request produces.
"""

from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import Self


def _to_decimal(value: Decimal | int | float | str) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


# ============================================================================
# Catalog Item
# ============================================================================


@dataclass(frozen=True)
class CatalogItem:
    """One sellable product.

    Created by the remote catalog and never mutated here; a newer fetch
    returning the same ``id`` replaces the whole record.

    Attributes:
        id: Stable unique identifier.
        name: Display name.
        category: Product category (e.g., "Hoodies").
        gender: Target gender (e.g., "Women").
        season: Season (e.g., "Winter", "All Season").
        style: Style (e.g., "Plain", "Graphic").
        occasion: Occasion (e.g., "Casual", "Formal").
        base_price: Non-negative list price in major units.
        on_sale: Whether a sale percentage applies.
        sale_percentage: Discount in 0..100, meaningful only when on sale.
        colors: Ordered color options, may be empty.
        sizes: Ordered size options, may be empty.
        image: Opaque image reference.
    """

    id: str
    name: str
    category: str = ""
    gender: str = ""
    season: str = ""
    style: str = ""
    occasion: str = ""
    base_price: Decimal = Decimal("0")
    on_sale: bool = False
    sale_percentage: Decimal = Decimal("0")
    colors: tuple[str, ...] = ()
    sizes: tuple[str, ...] = ()
    image: str | None = None

    def __post_init__(self) -> None:
        """Normalize numeric fields and enforce ranges."""
        if not self.id:
            raise ValueError("CatalogItem id must be non-empty")
        object.__setattr__(self, "base_price", _to_decimal(self.base_price))
        object.__setattr__(self, "sale_percentage", _to_decimal(self.sale_percentage))
        object.__setattr__(self, "colors", tuple(self.colors))
        object.__setattr__(self, "sizes", tuple(self.sizes))
        if self.base_price < 0:
            raise ValueError(f"base_price cannot be negative: {self.base_price}")
        if not Decimal("0") <= self.sale_percentage <= Decimal("100"):
            raise ValueError(
                f"sale_percentage must be within 0..100: {self.sale_percentage}"
            )


# ============================================================================
# Filter State
# ============================================================================


class SortMode(str, Enum):
    """Listing sort order."""

    FEATURED = "featured"
    PRICE_LOW = "price-low"
    PRICE_HIGH = "price-high"

    @classmethod
    def parse(cls, value: "str | SortMode | None") -> "SortMode":
        """Parse a raw sort value, falling back to FEATURED."""
        if isinstance(value, SortMode):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.FEATURED


DEFAULT_PAGE_SIZE = 24

FILTER_DIMENSIONS: tuple[str, ...] = ("category", "gender", "season", "style", "occasion")

_FLAG_PARAMS: dict[str, str] = {
    "on_sale": "onSale",
    "in_collection": "inCollection",
    "featured": "featured",
    "active": "active",
}


@dataclass(frozen=True)
class FilterState:
    """Canonical listing query.

    A field set to None places no constraint on that dimension. This is
    different from the UI sentinel "all", which never reaches this type.
    """

    search: str | None = None
    category: str | None = None
    gender: str | None = None
    season: str | None = None
    style: str | None = None
    occasion: str | None = None
    sort_mode: SortMode = SortMode.FEATURED
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    on_sale: bool | None = None
    in_collection: bool | None = None
    featured: bool | None = None
    active: bool | None = None

    def __post_init__(self) -> None:
        """Validate pagination bounds."""
        if self.page < 1:
            raise ValueError(f"page must be >= 1: {self.page}")
        if self.page_size < 1:
            raise ValueError(f"page_size must be positive: {self.page_size}")

    @property
    def offset(self) -> int:
        """Index of the first item this page covers."""
        return (self.page - 1) * self.page_size

    def with_page(self, page: int) -> Self:
        """Return a copy pointing at another page."""
        return replace(self, page=page)

    def with_page_size(self, page_size: int) -> Self:
        """Return a copy with another page size."""
        return replace(self, page_size=page_size)

    def same_query(self, other: "FilterState") -> bool:
        """Check whether two states differ only by page number."""
        return replace(self, page=1) == replace(other, page=1)

    def to_query_params(self) -> dict[str, str]:
        """Encode as listing query parameters.

        Returns:
            Query parameters with absent fields omitted.
        """
        params: dict[str, str] = {}
        if self.search:
            params["search"] = self.search
        for dimension in FILTER_DIMENSIONS:
            value = getattr(self, dimension)
            if value is not None:
                params[dimension] = value
        params["sortBy"] = self.sort_mode.value
        params["page"] = str(self.page)
        params["limit"] = str(self.page_size)
        for attr, param in _FLAG_PARAMS.items():
            flag = getattr(self, attr)
            if flag is not None:
                params[param] = "true" if flag else "false"
        return params


# ============================================================================
# Catalog Page
# ============================================================================


@dataclass(frozen=True)
class CatalogPage:
    """Result of one listing request.

    Attributes:
        items: Items in the order the collaborator returned them.
        total_count: Total matching items across all pages.
        total_pages: Total pages, always at least 1.
        page: Page number this result answers.
        page_size: Requested page size.
        degraded: True when produced by a reduced-size retry.
    """

    items: tuple[CatalogItem, ...]
    total_count: int
    total_pages: int
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    degraded: bool = False

    def __post_init__(self) -> None:
        """Keep pagination controls well-defined."""
        object.__setattr__(self, "items", tuple(self.items))
        object.__setattr__(self, "total_pages", max(self.total_pages, 1))

    @property
    def has_next(self) -> bool:
        """Check if there's a next page."""
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        """Check if there's a previous page."""
        return self.page > 1

    @property
    def ids(self) -> list[str]:
        """Item ids in page order."""
        return [item.id for item in self.items]


# ============================================================================
# Session
# ============================================================================


@dataclass(frozen=True)
class UserSession:
    """Signed-in user as reported by the external auth collaborator."""

    user_id: str | None = None
    token: str | None = None

    @property
    def is_authenticated(self) -> bool:
        """True when both a user and a token are present."""
        return bool(self.user_id and self.token)

    @classmethod
    def anonymous(cls) -> Self:
        """Session with no signed-in user."""
        return cls()
