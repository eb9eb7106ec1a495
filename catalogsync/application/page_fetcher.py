"""Page fetching with a bounded degraded retry.

``PageFetcher`` issues exactly one listing request per call and lets
every collaborator error through untouched. ``DegradedRetryPolicy`` wraps
it: when the catalog times out or reports overload it waits briefly and
asks once more for a smaller page, so the shopper sees a partial page
instead of an error.
"""

import asyncio
import math

import structlog

from catalogsync.domain.exceptions import (
    AuthenticationRequiredError,
    TransientUnavailableError,
)
from catalogsync.domain.models import CatalogPage, FilterState
from catalogsync.infrastructure.catalog_client import (
    TRANSIENT_STATUS_CODES,
    CatalogAPIClient,
)

logger = structlog.get_logger()

_TRANSIENT_MARKERS = ("timeout", "timed out", "service unavailable")


def page_count(total: int, page_size: int) -> int:
    """Number of pages needed for ``total`` items, never less than 1."""
    return max(math.ceil(total / page_size), 1)


def is_transient(error: BaseException) -> bool:
    """Check whether an error is a timeout or overload signal.

    Args:
        error: Error raised by a fetch.

    Returns:
        True if the error qualifies for a degraded retry.
    """
    if isinstance(error, AuthenticationRequiredError):
        return False
    if isinstance(error, (TransientUnavailableError, TimeoutError)):
        return True
    if getattr(error, "status_code", None) in TRANSIENT_STATUS_CODES:
        return True
    message = str(getattr(error, "message", None) or error).lower()
    return any(marker in message for marker in _TRANSIENT_MARKERS)


class PageFetcher:
    """Fetches one page of a listing query."""

    def __init__(self, client: CatalogAPIClient) -> None:
        self.client = client

    async def fetch(self, filters: FilterState) -> CatalogPage:
        """Fetch the page described by ``filters``.

        Args:
            filters: Normalized query including page and page size.

        Returns:
            The page of items with totals.

        Raises:
            RemoteError: Whatever the collaborator raised, unchanged.
        """
        listing = await self.client.list_products(filters.to_query_params())
        items = listing.items()
        total = listing.total if listing.total is not None else len(items)
        if listing.pages is not None:
            total_pages = max(listing.pages, 1)
        else:
            total_pages = page_count(total, filters.page_size)

        logger.debug(
            "Fetched catalog page",
            page=filters.page,
            page_size=filters.page_size,
            item_count=len(items),
            total=total,
        )

        return CatalogPage(
            items=tuple(items),
            total_count=total,
            total_pages=total_pages,
            page=filters.page,
            page_size=filters.page_size,
        )


class DegradedRetryPolicy:
    """Retries a timed-out fetch once with a smaller page.

    Attributes:
        fetcher: Wrapped page fetcher.
        retry_delay: Seconds to wait before the retry.
        max_retry_page_size: Upper bound on the retry's page size.
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        retry_delay: float = 2.0,
        max_retry_page_size: int = 5,
    ) -> None:
        self.fetcher = fetcher
        self.retry_delay = retry_delay
        self.max_retry_page_size = max_retry_page_size

    def reduced_page_size(self, page_size: int) -> int:
        """Page size used by the retry.

        The largest divisor of ``page_size`` that is at most half of it and
        at most ``max_retry_page_size``. Dividing the requested size keeps
        every page boundary of the requested size on a retry boundary.
        """
        limit = max(1, min(self.max_retry_page_size, page_size // 2))
        for size in range(limit, 1, -1):
            if page_size % size == 0:
                return size
        return 1

    def retry_filters(self, filters: FilterState) -> FilterState:
        """Filters for the retry request, starting at the requested page's first item."""
        size = self.reduced_page_size(filters.page_size)
        page = filters.offset // size + 1
        return filters.with_page_size(size).with_page(page)

    async def fetch(self, filters: FilterState) -> CatalogPage:
        """Fetch a page, retrying once on timeout or overload.

        Args:
            filters: Normalized query.

        Returns:
            The full page, or a partial page flagged ``degraded``.

        Raises:
            RemoteError: Non-transient errors immediately; transient errors
                when the single retry also fails.
        """
        try:
            return await self.fetcher.fetch(filters)
        except Exception as e:
            if not is_transient(e):
                raise
            first_error = e

        retry = self.retry_filters(filters)
        logger.warning(
            "Catalog fetch timed out, retrying with fewer items",
            page=filters.page,
            page_size=filters.page_size,
            retry_page=retry.page,
            retry_page_size=retry.page_size,
            error=str(first_error),
        )
        await asyncio.sleep(self.retry_delay)

        try:
            partial = await self.fetcher.fetch(retry)
        except Exception as e:
            logger.error(
                "Degraded retry failed",
                page=filters.page,
                retry_page_size=retry.page_size,
                error=str(e),
            )
            raise

        logger.info(
            "Degraded retry succeeded",
            page=filters.page,
            item_count=len(partial.items),
            total=partial.total_count,
        )
        return CatalogPage(
            items=partial.items,
            total_count=partial.total_count,
            total_pages=page_count(partial.total_count, filters.page_size),
            page=filters.page,
            page_size=filters.page_size,
            degraded=True,
        )
