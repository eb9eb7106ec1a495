"""Background fill for bulk catalog views.

The admin product table paints page 1 right away and pulls the next few
pages in the background on a staggered schedule, merging each chunk as it
lands. Chunk failures only leave the table short; they never surface.

Example usage:
    coordinator = BackgroundFillCoordinator(
        DegradedRetryPolicy(PageFetcher(client)),
        chunk_fetcher=PageFetcher(client),
        on_chunk=lambda page: view.render(coordinator.catalog.values()),
    )
    first_page = await coordinator.start(FilterState(page_size=10))
    ...
    await coordinator.wait()
"""

import asyncio
import math
from typing import Callable

import structlog

from catalogsync.application.merger import MergedCatalog
from catalogsync.application.page_fetcher import DegradedRetryPolicy, PageFetcher
from catalogsync.domain.models import CatalogPage, FilterState

logger = structlog.get_logger()

Fetcher = PageFetcher | DegradedRetryPolicy
ChunkCallback = Callable[[CatalogPage], None]

MAX_BACKGROUND_CHUNKS = 5


class BackgroundFillCoordinator:
    """Loads page 1 in the foreground and up to ``max_chunks`` pages after it.

    Attributes:
        fetcher: Fetcher for the foreground page.
        chunk_fetcher: Fetcher for background chunks.
        catalog: Merged items across page 1 and all landed chunks.
        max_chunks: Cap on background requests per fill.
        interval: Seconds between consecutive chunk start times.
        on_chunk: Called with each chunk page after it is merged.
        failed_pages: Page numbers whose chunk fetch failed in the current fill.
        loaded_pages: Page numbers merged in the current fill.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        catalog: MergedCatalog | None = None,
        max_chunks: int = MAX_BACKGROUND_CHUNKS,
        interval: float = 1.0,
        on_chunk: ChunkCallback | None = None,
        chunk_fetcher: Fetcher | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.chunk_fetcher = chunk_fetcher or fetcher
        self.catalog = catalog if catalog is not None else MergedCatalog()
        self.max_chunks = max_chunks
        self.interval = interval
        self.on_chunk = on_chunk
        self.failed_pages: list[int] = []
        self.loaded_pages: list[int] = []
        self._tasks: set[asyncio.Task[None]] = set()
        self._generation = 0

    @property
    def pending(self) -> int:
        """Number of chunk tasks still outstanding."""
        return sum(1 for task in self._tasks if not task.done())

    def chunk_count(self, total_count: int, page_size: int) -> int:
        """Background chunks needed after page 1, capped at ``max_chunks``."""
        remaining = total_count - page_size
        if remaining <= 0:
            return 0
        return min(math.ceil(remaining / page_size), self.max_chunks)

    async def start(self, filters: FilterState) -> CatalogPage:
        """Start a fill, superseding any fill already running.

        Page 1 replaces whatever ``catalog`` held from an earlier fill.

        Args:
            filters: Query to fill; its page number is ignored.

        Returns:
            Page 1, already in ``catalog``.

        Raises:
            RemoteError: If page 1 cannot be loaded.
        """
        self.cancel()
        generation = self._generation
        self.failed_pages = []
        self.loaded_pages = []

        first = filters.with_page(1)
        page = await self.fetcher.fetch(first)
        if generation != self._generation:
            logger.debug("Fill superseded before first paint")
            return page

        self.catalog.clear()
        self.catalog.merge(page.items)
        self.loaded_pages.append(1)

        if page.degraded:
            logger.info(
                "Skipping background fill after degraded first page",
                total=page.total_count,
                item_count=len(page.items),
            )
            return page

        chunks = self.chunk_count(page.total_count, first.page_size)
        if chunks:
            logger.info(
                "Scheduling background chunks",
                total=page.total_count,
                remaining=page.total_count - len(page.items),
                chunks=chunks,
            )
        for k in range(1, chunks + 1):
            task = asyncio.create_task(
                self._load_chunk(generation, first.with_page(k + 1), k * self.interval)
            )
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
        return page

    async def _load_chunk(
        self,
        generation: int,
        filters: FilterState,
        delay: float,
    ) -> None:
        await asyncio.sleep(delay)
        try:
            page = await self.chunk_fetcher.fetch(filters)
        except Exception as e:
            logger.warning(
                "Failed to load catalog chunk",
                page=filters.page,
                error=str(e),
            )
            if generation == self._generation:
                self.failed_pages.append(filters.page)
            return

        if generation != self._generation:
            logger.debug("Discarding chunk from superseded fill", page=filters.page)
            return

        self.catalog.merge(page.items)
        self.loaded_pages.append(filters.page)
        logger.info(
            "Loaded catalog chunk",
            page=filters.page,
            item_count=len(page.items),
            merged_count=len(self.catalog),
        )

        if self.on_chunk is not None:
            try:
                self.on_chunk(page)
            except Exception:
                logger.exception("Chunk callback failed", page=filters.page)

    async def wait(self) -> None:
        """Wait until every scheduled chunk has finished or been cancelled."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def cancel(self) -> None:
        """Invalidate the current fill and cancel its outstanding chunks."""
        self._generation += 1
        for task in list(self._tasks):
            task.cancel()
