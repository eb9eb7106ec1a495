"""Storefront product listing.

Owns the filter state for one listing view and loads pages for it. Every
change to the query starts a new request generation; a response that
arrives after a newer request was issued is dropped so an older, slower
answer can never repaint over a newer one.
"""

from dataclasses import dataclass

import structlog

from catalogsync.application.page_fetcher import DegradedRetryPolicy, PageFetcher
from catalogsync.domain.exceptions import GENERIC_FAILURE_MESSAGE
from catalogsync.domain.models import CatalogItem, CatalogPage, FilterState

logger = structlog.get_logger()


@dataclass(frozen=True)
class ListingState:
    """What the listing view renders."""

    items: tuple[CatalogItem, ...] = ()
    total_count: int = 0
    total_pages: int = 1
    page: int = 1
    failed: bool = False
    error_message: str | None = None
    degraded: bool = False

    @classmethod
    def from_page(cls, page: CatalogPage) -> "ListingState":
        return cls(
            items=page.items,
            total_count=page.total_count,
            total_pages=page.total_pages,
            page=page.page,
            degraded=page.degraded,
        )

    @classmethod
    def failure(cls, page: int, message: str) -> "ListingState":
        """Empty listing shown when the foreground fetch fails."""
        return cls(page=page, failed=True, error_message=message)


class ProductListController:
    """Loads listing pages for the current filter state.

    Attributes:
        fetcher: Page source, normally a ``DegradedRetryPolicy``.
        filters: Current query.
        state: Last applied listing state.
    """

    def __init__(
        self,
        fetcher: DegradedRetryPolicy | PageFetcher,
        filters: FilterState | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.filters = filters or FilterState()
        self.state = ListingState()
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def apply_filters(self, filters: FilterState) -> FilterState:
        """Replace the query, resetting to page 1 when anything but the page changed.

        Args:
            filters: New filter state.

        Returns:
            The filter state now in effect.
        """
        if not filters.same_query(self.filters):
            filters = filters.with_page(1)
        self.filters = filters
        self._generation += 1
        return self.filters

    def go_to_page(self, page: int) -> FilterState:
        """Move to another page of the same query."""
        self.filters = self.filters.with_page(max(page, 1))
        self._generation += 1
        return self.filters

    async def load(self) -> ListingState | None:
        """Load the page for the current filters.

        Returns:
            The applied listing state, or None if a newer request was issued
            while this one was in flight.
        """
        generation = self._generation
        filters = self.filters

        try:
            page = await self.fetcher.fetch(filters)
        except Exception as e:
            if generation != self._generation:
                logger.debug("Dropping stale listing failure", page=filters.page)
                return None
            message = str(getattr(e, "message", None) or GENERIC_FAILURE_MESSAGE)
            logger.error("Failed to load products", page=filters.page, error=message)
            self.state = ListingState.failure(filters.page, message)
            return self.state

        if generation != self._generation:
            logger.debug(
                "Dropping stale listing response",
                page=filters.page,
                generation=generation,
                current=self._generation,
            )
            return None

        self.state = ListingState.from_page(page)
        return self.state
