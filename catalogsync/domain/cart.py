"""Cart line items and add-to-cart outcomes."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class CartLineItem:
    """A fully resolved line item handed to the cart collaborator.

    Attributes:
        key: Composite key "{product_id}-{size}-{color}".
        product_id: Catalog item id.
        name: Item name at the time of adding.
        price: Effective unit price.
        quantity: Units to add.
        size: Concrete size selection.
        color: Concrete color selection.
        image: Image reference, if any.
        is_custom: Always False for catalog items.
    """

    key: str
    product_id: str
    name: str
    price: Decimal
    quantity: int
    size: str
    color: str
    image: str | None = None
    is_custom: bool = False

    @staticmethod
    def build_key(product_id: str, size: str, color: str) -> str:
        return f"{product_id}-{size}-{color}"

    def to_payload(self) -> dict[str, Any]:
        """Serialize for the cart endpoint."""
        return {
            "product": self.product_id,
            "name": self.name,
            "price": float(self.price),
            "quantity": self.quantity,
            "size": self.size,
            "color": self.color,
            "image": self.image or "",
            "isCustom": self.is_custom,
        }


class CartOutcomeStatus(str, Enum):
    """How an add-to-cart attempt ended."""

    ADDED = "added"
    AUTHENTICATION_REQUIRED = "authentication_required"
    FAILED = "failed"


@dataclass(frozen=True)
class CartOutcome:
    """Result of an add-to-cart attempt, ready for the view to present."""

    status: CartOutcomeStatus
    message: str
    line_item: CartLineItem | None = None

    @property
    def success(self) -> bool:
        return self.status is CartOutcomeStatus.ADDED

    @property
    def requires_sign_in(self) -> bool:
        return self.status is CartOutcomeStatus.AUTHENTICATION_REQUIRED
