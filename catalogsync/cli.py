"""Command line entry point.

Usage:
    catalogsync list --gender Women --page 2
    catalogsync list --search hoodie --sort price-low
    catalogsync fill --category Hoodies
"""

import argparse
import asyncio
import sys
from typing import Sequence

from catalogsync.application.background_fill import BackgroundFillCoordinator
from catalogsync.application.page_fetcher import DegradedRetryPolicy, PageFetcher
from catalogsync.application.product_list import ProductListController
from catalogsync.application.query_normalizer import normalize_filters
from catalogsync.domain.exceptions import RemoteError
from catalogsync.domain.models import FILTER_DIMENSIONS, CatalogItem, FilterState, SortMode
from catalogsync.domain.pricing import effective_price
from catalogsync.infrastructure.catalog_client import CatalogAPIClient
from catalogsync.infrastructure.config import Settings, settings
from catalogsync.infrastructure.logging_setup import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="catalogsync",
        description="Query and fill the remote product catalog",
    )
    parser.add_argument(
        "--api-url",
        default=None,
        help="Catalog API base URL (default: CATALOGSYNC_API_URL)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="Print one page of products")
    _add_filter_arguments(list_parser)
    list_parser.add_argument("--page", type=int, default=1, help="Page number")

    fill_parser = subparsers.add_parser(
        "fill",
        help="Load page 1 and fill the following pages in the background",
    )
    _add_filter_arguments(fill_parser)
    return parser


def _add_filter_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--search", default=None, help="Free-text search")
    for dimension in FILTER_DIMENSIONS:
        parser.add_argument(f"--{dimension}", default=None, help=f"Filter by {dimension}")
    parser.add_argument(
        "--sort",
        choices=[mode.value for mode in SortMode],
        default=SortMode.FEATURED.value,
        help="Sort order",
    )
    parser.add_argument("--page-size", type=int, default=None, help="Items per page")


def _filters_from_args(args: argparse.Namespace, page: int, page_size: int) -> FilterState:
    external = {name: getattr(args, name) for name in ("search", *FILTER_DIMENSIONS)}
    return normalize_filters(external, page=page, page_size=page_size, sort_mode=args.sort)


def _format_item(item: CatalogItem) -> str:
    price = effective_price(item)
    line = f"{item.id}  {item.name}  {price}"
    if item.on_sale and item.sale_percentage > 0:
        line += f"  (was {item.base_price}, -{item.sale_percentage}%)"
    return line


def _retry_policy(client: CatalogAPIClient, config: Settings) -> DegradedRetryPolicy:
    return DegradedRetryPolicy(
        PageFetcher(client),
        retry_delay=config.degraded_retry_delay_seconds,
        max_retry_page_size=config.degraded_max_retry_page_size,
    )


async def run_list(args: argparse.Namespace, client: CatalogAPIClient, config: Settings) -> int:
    filters = _filters_from_args(args, args.page, args.page_size or config.page_size)
    controller = ProductListController(_retry_policy(client, config), filters)
    state = await controller.load()
    if state is None:
        return 1
    if state.failed:
        print(f"Error: {state.error_message}", file=sys.stderr)
        return 1

    for item in state.items:
        print(_format_item(item))
    print()
    summary = f"Page {state.page} of {state.total_pages} ({state.total_count} products)"
    if state.degraded:
        summary += " [partial results]"
    print(summary)
    return 0


async def run_fill(args: argparse.Namespace, client: CatalogAPIClient, config: Settings) -> int:
    filters = _filters_from_args(args, 1, args.page_size or config.admin_page_size)
    coordinator = BackgroundFillCoordinator(
        _retry_policy(client, config),
        max_chunks=config.background_max_chunks,
        interval=config.background_interval_seconds,
        chunk_fetcher=PageFetcher(client),
    )
    try:
        first = await coordinator.start(filters)
    except RemoteError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    await coordinator.wait()

    print(f"Total products: {first.total_count}")
    print(f"Merged products: {len(coordinator.catalog)}")
    print(f"Loaded pages: {sorted(coordinator.loaded_pages)}")
    if coordinator.failed_pages:
        print(f"Failed pages: {sorted(coordinator.failed_pages)}")
    return 0


async def run(args: argparse.Namespace, config: Settings = settings) -> int:
    async with CatalogAPIClient(
        base_url=args.api_url or config.api_url,
        token=config.api_token,
        timeout=config.request_timeout,
    ) as client:
        if args.command == "list":
            return await run_list(args, client, config)
        return await run_fill(args, client, config)


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(settings.log_level, settings.log_json)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
