"""Filter normalization.

Combines navigation parameters (e.g., a link to "/products?gender=Women")
with the filter controls a shopper set locally into one canonical
``FilterState``. Navigation values win over local ones; a dimension left
at the "all" sentinel on both sides is dropped so the query stays as
broad as possible.
"""

from dataclasses import dataclass
from typing import Mapping

from catalogsync.domain.models import (
    DEFAULT_PAGE_SIZE,
    FILTER_DIMENSIONS,
    FilterState,
    SortMode,
)

ALL = "all"


@dataclass(frozen=True)
class FilterSelection:
    """Filter controls as held by the listing view."""

    search: str = ""
    category: str = ALL
    gender: str = ALL
    season: str = ALL
    style: str = ALL
    occasion: str = ALL


def _constraint(value: str | None) -> str | None:
    """Return the value if it constrains the query, else None."""
    if value is None:
        return None
    value = value.strip()
    if not value or value.lower() == ALL:
        return None
    return value


def _text(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


def normalize_filters(
    external: Mapping[str, str | None] | None,
    local: FilterSelection | None = None,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
    sort_mode: SortMode | str | None = None,
) -> FilterState:
    """Build the canonical filter state for a listing request.

    Args:
        external: Navigation-derived parameters; missing keys mean "not given".
        local: Locally held filter controls.
        page: Requested page; values below 1 become 1.
        page_size: Requested page size; non-positive values use the default.
        sort_mode: Sort mode; unknown or missing values mean "featured".

    Returns:
        Normalized filter state.
    """
    external = external or {}
    local = local or FilterSelection()

    search = _text(external.get("search")) or _text(local.search)
    dimensions = {
        name: _constraint(external.get(name)) or _constraint(getattr(local, name))
        for name in FILTER_DIMENSIONS
    }

    return FilterState(
        search=search,
        sort_mode=SortMode.parse(sort_mode),
        page=page if page >= 1 else 1,
        page_size=page_size if page_size >= 1 else DEFAULT_PAGE_SIZE,
        **dimensions,
    )
