"""Pytest configuration and shared fixtures."""

from decimal import Decimal
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from catalogsync.domain.models import CatalogItem, UserSession
from catalogsync.infrastructure.catalog_client import CatalogAPIClient
from catalogsync.infrastructure.schemas import ProductListing


@pytest.fixture
def mock_client() -> MagicMock:
    """Create a mock catalog API client."""
    client = MagicMock(spec=CatalogAPIClient)

    # Make all methods async
    client.list_products = AsyncMock()
    client.check_favorite = AsyncMock(return_value=False)
    client.toggle_favorite = AsyncMock()
    client.add_cart_item = AsyncMock(return_value=None)
    client.save_preferences = AsyncMock(return_value=None)
    client.close = AsyncMock()

    return client


@pytest.fixture
def signed_in() -> UserSession:
    """Session of a signed-in shopper."""
    return UserSession(user_id="user-1", token="token-abc")


@pytest.fixture
def anonymous() -> UserSession:
    """Session with nobody signed in."""
    return UserSession.anonymous()


def make_id(n: int) -> str:
    """24-hex object id derived from a number."""
    return f"{n:024x}"


def make_item(n: int = 1, **overrides: Any) -> CatalogItem:
    """Create a catalog item with a valid object id."""
    fields: dict[str, Any] = {
        "id": make_id(n),
        "name": f"Product {n}",
        "category": "Hoodies",
        "gender": "Women",
        "base_price": Decimal("50.00"),
        "colors": ("Black", "Navy"),
        "sizes": ("S", "M", "L"),
    }
    fields.update(overrides)
    return CatalogItem(**fields)


def make_product_payload(n: int = 1, **overrides: Any) -> dict[str, Any]:
    """Create a product as the catalog service serializes it."""
    payload: dict[str, Any] = {
        "_id": make_id(n),
        "name": f"Product {n}",
        "price": 50,
        "category": "Hoodies",
        "gender": "Women",
        "onSale": False,
        "salePercentage": 0,
        "colors": ["Black", "Navy"],
        "sizes": ["S", "M", "L"],
        "image": f"/images/{n}.jpg",
    }
    payload.update(overrides)
    return payload


def make_listing(
    numbers: list[int],
    total: int | None = None,
    pages: int | None = None,
) -> ProductListing:
    """Create a listing envelope for the given product numbers."""
    return ProductListing(
        data=[make_product_payload(n) for n in numbers],
        total=total if total is not None else len(numbers),
        pages=pages,
    )
