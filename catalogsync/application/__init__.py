"""Application layer module.

Contains the listing, fill, favorite, cart and preference workflows that
orchestrate domain logic over the catalog API client.
"""

from catalogsync.application.background_fill import BackgroundFillCoordinator
from catalogsync.application.cart import CartReservationAdapter
from catalogsync.application.favorites import FavoriteStateTracker
from catalogsync.application.merger import MergedCatalog, merge_items
from catalogsync.application.page_fetcher import (
    DegradedRetryPolicy,
    PageFetcher,
    is_transient,
    page_count,
)
from catalogsync.application.preferences import PreferenceSync, TrailingDebouncer
from catalogsync.application.product_list import ListingState, ProductListController
from catalogsync.application.query_normalizer import FilterSelection, normalize_filters

__all__ = [
    # Listing
    "FilterSelection",
    "normalize_filters",
    "PageFetcher",
    "DegradedRetryPolicy",
    "is_transient",
    "page_count",
    "ListingState",
    "ProductListController",
    # Bulk views
    "BackgroundFillCoordinator",
    "MergedCatalog",
    "merge_items",
    # User actions
    "FavoriteStateTracker",
    "CartReservationAdapter",
    "PreferenceSync",
    "TrailingDebouncer",
]
