"""Tests for the storefront product listing controller."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from catalogsync.application.page_fetcher import DegradedRetryPolicy
from catalogsync.application.product_list import ListingState, ProductListController
from catalogsync.domain.exceptions import GENERIC_FAILURE_MESSAGE, RemoteFailureError
from catalogsync.domain.models import CatalogPage, FilterState
from tests.conftest import make_item


def _page(filters: FilterState, numbers: list[int], total: int) -> CatalogPage:
    return CatalogPage(
        items=tuple(make_item(n) for n in numbers),
        total_count=total,
        total_pages=3,
        page=filters.page,
        page_size=filters.page_size,
    )


@pytest.fixture
def fetcher() -> MagicMock:
    fetcher = MagicMock(spec=DegradedRetryPolicy)
    fetcher.fetch = AsyncMock()
    return fetcher


class TestFilterChanges:
    """Tests for filter and page changes."""

    def test_filter_change_resets_page(self, fetcher: MagicMock) -> None:
        controller = ProductListController(fetcher, FilterState(gender="Women", page=3))

        applied = controller.apply_filters(FilterState(gender="Men", page=3))

        assert applied.page == 1

    def test_page_kept_when_only_page_changes(self, fetcher: MagicMock) -> None:
        controller = ProductListController(fetcher, FilterState(gender="Women"))

        applied = controller.apply_filters(FilterState(gender="Women", page=2))

        assert applied.page == 2

    def test_go_to_page(self, fetcher: MagicMock) -> None:
        controller = ProductListController(fetcher, FilterState(gender="Women"))

        assert controller.go_to_page(4).page == 4
        assert controller.filters.gender == "Women"
        assert controller.go_to_page(0).page == 1

    def test_changes_bump_generation(self, fetcher: MagicMock) -> None:
        controller = ProductListController(fetcher)
        before = controller.generation

        controller.go_to_page(2)
        controller.apply_filters(FilterState(style="Graphic"))

        assert controller.generation == before + 2


class TestLoad:
    """Tests for ProductListController.load."""

    @pytest.mark.asyncio
    async def test_applies_page(self, fetcher: MagicMock) -> None:
        fetcher.fetch.side_effect = lambda f: _page(f, [1, 2], total=50)
        controller = ProductListController(fetcher, FilterState(page=2))

        state = await controller.load()

        assert state is controller.state
        assert [item.id for item in state.items] == [make_item(1).id, make_item(2).id]
        assert state.total_count == 50
        assert state.page == 2
        assert not state.failed

    @pytest.mark.asyncio
    async def test_failure_shows_empty_listing(self, fetcher: MagicMock) -> None:
        fetcher.fetch.side_effect = RemoteFailureError("Database error", status_code=500)
        controller = ProductListController(fetcher)

        state = await controller.load()

        assert state == ListingState(
            items=(),
            total_count=0,
            total_pages=1,
            page=1,
            failed=True,
            error_message="Database error",
        )

    @pytest.mark.asyncio
    async def test_unexpected_error_uses_generic_message(self, fetcher: MagicMock) -> None:
        fetcher.fetch.side_effect = ValueError("boom")
        controller = ProductListController(fetcher)

        state = await controller.load()

        assert state.failed
        assert state.error_message == GENERIC_FAILURE_MESSAGE

    @pytest.mark.asyncio
    async def test_stale_response_is_dropped(self, fetcher: MagicMock) -> None:
        """A slow answer for an old query never replaces a newer one."""
        slow_gate = asyncio.Event()

        async def fetch(filters: FilterState) -> CatalogPage:
            if filters.gender == "Men":
                await slow_gate.wait()
                return _page(filters, [1], total=1)
            return _page(filters, [2], total=1)

        fetcher.fetch.side_effect = fetch
        controller = ProductListController(fetcher, FilterState(gender="Men"))

        old = asyncio.create_task(controller.load())
        await asyncio.sleep(0)
        controller.apply_filters(FilterState(gender="Women"))
        newer = await controller.load()
        slow_gate.set()

        assert await old is None
        assert newer is not None
        assert controller.state is newer
        assert [item.id for item in controller.state.items] == [make_item(2).id]

    @pytest.mark.asyncio
    async def test_stale_failure_is_dropped(self, fetcher: MagicMock) -> None:
        gate = asyncio.Event()

        async def fetch(filters: FilterState) -> CatalogPage:
            if filters.page == 1:
                await gate.wait()
                raise RemoteFailureError("Request timeout", status_code=504)
            return _page(filters, [3], total=30)

        fetcher.fetch.side_effect = fetch
        controller = ProductListController(fetcher)

        old = asyncio.create_task(controller.load())
        await asyncio.sleep(0)
        controller.go_to_page(2)
        newer = await controller.load()
        gate.set()

        assert await old is None
        assert not controller.state.failed
        assert controller.state is newer

    @pytest.mark.asyncio
    async def test_degraded_flag_carried(self, fetcher: MagicMock) -> None:
        fetcher.fetch.return_value = CatalogPage(
            items=(make_item(1),),
            total_count=40,
            total_pages=2,
            degraded=True,
        )
        controller = ProductListController(fetcher)

        state = await controller.load()

        assert state.degraded
