"""Add-to-cart for catalog items.

Resolves the shopper's size and color into a concrete line item, prices
it with the sale rules, and hands it to the cart service. Selection
problems are raised before anything is sent; what the cart service says
comes back as a ``CartOutcome`` the view can present directly.
"""

import structlog

from catalogsync.domain.cart import CartLineItem, CartOutcome, CartOutcomeStatus
from catalogsync.domain.exceptions import (
    AuthenticationRequiredError,
    InvalidIdentifierError,
    MissingSelectionError,
    RemoteError,
)
from catalogsync.domain.models import CatalogItem, UserSession
from catalogsync.domain.pricing import effective_price
from catalogsync.domain.reference import CatalogReference, IdentifierPolicy, get_reference
from catalogsync.infrastructure.catalog_client import CatalogAPIClient
from catalogsync.infrastructure.config import settings

logger = structlog.get_logger()

SIGN_IN_MESSAGE = "Please sign in or create an account to add items to your cart"
ADD_FAILED_MESSAGE = "Failed to add item to cart. Please try again."


class CartReservationAdapter:
    """Builds cart line items and delegates them to the cart service."""

    def __init__(
        self,
        client: CatalogAPIClient,
        session: UserSession,
        reference: CatalogReference | None = None,
        id_policy: IdentifierPolicy | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            client: Catalog API client (cart endpoints).
            session: Current user session.
            reference: Size and color reference table.
            id_policy: Accepted identifier shape. Defaults to
                ``settings.item_id_pattern``.
        """
        self.client = client
        self.session = session
        self.reference = reference or get_reference()
        self.id_policy = id_policy or IdentifierPolicy(settings.item_id_pattern)

    def resolve_size(self, item: CatalogItem, size: str | None) -> str:
        """Resolve the chosen size against the item's size options.

        Raises:
            MissingSelectionError: If no size was chosen or it is not offered.
        """
        if size is None or not size.strip():
            raise MissingSelectionError(item.id, "size", "a size must be selected")
        options = item.sizes or self.reference.sizes
        for option in options:
            if option.lower() == size.strip().lower():
                return option
        raise MissingSelectionError(item.id, "size", f"{size!r} is not offered")

    def resolve_color(self, item: CatalogItem, color: str | None) -> str:
        """Resolve the chosen color against the item's palette.

        Items without colors use the reference default colors, and with no
        choice made fall back to the default color token.

        Raises:
            MissingSelectionError: If the color is not in the palette, or the
                item has colors and none was chosen.
        """
        palette = item.colors or self.reference.default_colors
        if color is None or not color.strip():
            if not item.colors:
                return self.reference.default_color
            raise MissingSelectionError(item.id, "color", "a color must be selected")
        for option in palette:
            if option.lower() == color.strip().lower():
                return option
        raise MissingSelectionError(item.id, "color", f"{color!r} is not offered")

    def build_line_item(
        self,
        item: CatalogItem,
        size: str | None,
        color: str | None = None,
    ) -> CartLineItem:
        """Build a fully resolved line item for quantity 1.

        Raises:
            InvalidIdentifierError: If the item id has an unrecognized shape.
            MissingSelectionError: If size or color cannot be resolved.
        """
        resolved_size = self.resolve_size(item, size)
        resolved_color = self.resolve_color(item, color)
        if not self.id_policy.is_valid(item.id):
            raise InvalidIdentifierError(item.id)
        return CartLineItem(
            key=CartLineItem.build_key(item.id, resolved_size, resolved_color),
            product_id=item.id,
            name=item.name,
            price=effective_price(item),
            quantity=1,
            size=resolved_size,
            color=resolved_color,
            image=item.image,
        )

    async def add_to_cart(
        self,
        item: CatalogItem,
        size: str | None,
        color: str | None = None,
    ) -> CartOutcome:
        """Add one unit of an item to the cart.

        Args:
            item: Catalog item.
            size: Chosen size.
            color: Chosen color, optional for items without colors.

        Returns:
            Outcome: added, authentication required, or failed.

        Raises:
            ValidationError: If the selection is incomplete or the id is invalid.
        """
        line_item = self.build_line_item(item, size, color)

        if not self.session.is_authenticated:
            logger.info("Add to cart requires sign-in", product_id=item.id)
            return CartOutcome(
                status=CartOutcomeStatus.AUTHENTICATION_REQUIRED,
                message=SIGN_IN_MESSAGE,
                line_item=line_item,
            )

        try:
            await self.client.add_cart_item(line_item)
        except AuthenticationRequiredError:
            logger.info("Cart rejected unauthenticated add", product_id=item.id)
            return CartOutcome(
                status=CartOutcomeStatus.AUTHENTICATION_REQUIRED,
                message=SIGN_IN_MESSAGE,
                line_item=line_item,
            )
        except RemoteError as e:
            logger.warning(
                "Failed to add item to cart",
                product_id=item.id,
                key=line_item.key,
                error=e.message,
            )
            return CartOutcome(
                status=CartOutcomeStatus.FAILED,
                message=e.remote_message or ADD_FAILED_MESSAGE,
                line_item=line_item,
            )

        logger.info("Added item to cart", product_id=item.id, key=line_item.key)
        return CartOutcome(
            status=CartOutcomeStatus.ADDED,
            message=f"1x {item.name} ({line_item.size}, {line_item.color})",
            line_item=line_item,
        )
