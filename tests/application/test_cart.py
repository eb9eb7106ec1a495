"""Tests for the cart reservation adapter."""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from catalogsync.application.cart import ADD_FAILED_MESSAGE, CartReservationAdapter
from catalogsync.domain.cart import CartOutcomeStatus
from catalogsync.domain.exceptions import (
    AuthenticationRequiredError,
    InvalidIdentifierError,
    MissingSelectionError,
    RemoteFailureError,
)
from catalogsync.domain.models import UserSession
from catalogsync.infrastructure.config import settings
from tests.conftest import make_item


@pytest.fixture
def adapter(mock_client: MagicMock, signed_in: UserSession) -> CartReservationAdapter:
    return CartReservationAdapter(mock_client, signed_in)


class TestSelection:
    """Tests for size and color resolution."""

    def test_missing_size(self, adapter: CartReservationAdapter) -> None:
        with pytest.raises(MissingSelectionError) as exc_info:
            adapter.build_line_item(make_item(), None, "Black")
        assert exc_info.value.details["field"] == "size"

    def test_size_not_offered(self, adapter: CartReservationAdapter) -> None:
        with pytest.raises(MissingSelectionError):
            adapter.build_line_item(make_item(), "XXL", "Black")

    def test_reference_sizes_when_item_lists_none(
        self, adapter: CartReservationAdapter
    ) -> None:
        line = adapter.build_line_item(make_item(sizes=()), "xl", "Black")
        assert line.size == "XL"

    def test_color_required_when_item_has_colors(
        self, adapter: CartReservationAdapter
    ) -> None:
        with pytest.raises(MissingSelectionError) as exc_info:
            adapter.build_line_item(make_item(), "M")
        assert exc_info.value.details["field"] == "color"

    def test_color_matched_case_insensitively(
        self, adapter: CartReservationAdapter
    ) -> None:
        line = adapter.build_line_item(make_item(), "m", "navy")
        assert (line.size, line.color) == ("M", "Navy")

    def test_color_outside_palette(self, adapter: CartReservationAdapter) -> None:
        with pytest.raises(MissingSelectionError):
            adapter.build_line_item(make_item(), "M", "Red")

    def test_default_color_for_colorless_item(
        self, adapter: CartReservationAdapter
    ) -> None:
        line = adapter.build_line_item(make_item(colors=()), "M")
        assert line.color == "White"

    def test_colorless_item_uses_default_palette(
        self, adapter: CartReservationAdapter
    ) -> None:
        line = adapter.build_line_item(make_item(colors=()), "M", "gray")
        assert line.color == "Gray"

    def test_invalid_identifier(self, adapter: CartReservationAdapter) -> None:
        with pytest.raises(InvalidIdentifierError):
            adapter.build_line_item(make_item(id="legacy-1"), "M", "Black")

    def test_configured_id_pattern(
        self,
        mock_client: MagicMock,
        signed_in: UserSession,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr(settings, "item_id_pattern", r"^legacy-\d+$")
        adapter = CartReservationAdapter(mock_client, signed_in)

        line = adapter.build_line_item(make_item(id="legacy-1"), "M", "Black")

        assert line.key == "legacy-1-M-Black"

    def test_line_item_fields(self, adapter: CartReservationAdapter) -> None:
        item = make_item(
            base_price=Decimal("100"), on_sale=True, sale_percentage=Decimal("25")
        )

        line = adapter.build_line_item(item, "M", "Black")

        assert line.key == f"{item.id}-M-Black"
        assert line.price == Decimal("75.00")
        assert line.quantity == 1
        assert line.is_custom is False


class TestAddToCart:
    """Tests for CartReservationAdapter.add_to_cart."""

    @pytest.mark.asyncio
    async def test_added(
        self, adapter: CartReservationAdapter, mock_client: MagicMock
    ) -> None:
        item = make_item(name="Zip Hoodie")

        outcome = await adapter.add_to_cart(item, "L", "Black")

        assert outcome.status is CartOutcomeStatus.ADDED
        assert outcome.success
        assert outcome.message == "1x Zip Hoodie (L, Black)"
        mock_client.add_cart_item.assert_awaited_once_with(outcome.line_item)

    @pytest.mark.asyncio
    async def test_validation_error_sends_nothing(
        self, adapter: CartReservationAdapter, mock_client: MagicMock
    ) -> None:
        with pytest.raises(MissingSelectionError):
            await adapter.add_to_cart(make_item(), "")

        mock_client.add_cart_item.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unauthenticated_sends_nothing(
        self, mock_client: MagicMock, anonymous: UserSession
    ) -> None:
        adapter = CartReservationAdapter(mock_client, anonymous)

        outcome = await adapter.add_to_cart(make_item(), "M", "Black")

        assert outcome.status is CartOutcomeStatus.AUTHENTICATION_REQUIRED
        assert outcome.requires_sign_in
        mock_client.add_cart_item.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_expired_session(
        self, adapter: CartReservationAdapter, mock_client: MagicMock
    ) -> None:
        mock_client.add_cart_item.side_effect = AuthenticationRequiredError(
            "Token expired", status_code=401
        )

        outcome = await adapter.add_to_cart(make_item(), "M", "Black")

        assert outcome.status is CartOutcomeStatus.AUTHENTICATION_REQUIRED

    @pytest.mark.asyncio
    async def test_collaborator_message_surfaced(
        self, adapter: CartReservationAdapter, mock_client: MagicMock
    ) -> None:
        mock_client.add_cart_item.side_effect = RemoteFailureError(
            "Item out of stock", status_code=400
        )

        outcome = await adapter.add_to_cart(make_item(), "M", "Black")

        assert outcome.status is CartOutcomeStatus.FAILED
        assert outcome.message == "Item out of stock"

    @pytest.mark.asyncio
    async def test_generic_failure_message(
        self, adapter: CartReservationAdapter, mock_client: MagicMock
    ) -> None:
        mock_client.add_cart_item.side_effect = RemoteFailureError("", status_code=500)

        outcome = await adapter.add_to_cart(make_item(), "M", "Black")

        assert outcome.status is CartOutcomeStatus.FAILED
        assert outcome.message == ADD_FAILED_MESSAGE
