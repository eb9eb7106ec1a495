"""Domain layer - catalog value objects, pricing, state machines, errors.

Example usage:
    from catalogsync.domain import CatalogItem, effective_price

    item = CatalogItem(id="65f0c0ffee0000000000abcd", name="Zip Hoodie",
                       base_price=100, on_sale=True, sale_percentage=25)
    effective_price(item)  # Decimal("75.00")
"""

from catalogsync.domain.cart import CartLineItem, CartOutcome, CartOutcomeStatus
from catalogsync.domain.exceptions import (
    AuthenticationRequiredError,
    DomainError,
    InvalidIdentifierError,
    InvalidStateTransitionError,
    MissingSelectionError,
    RemoteError,
    RemoteFailureError,
    TransientUnavailableError,
    ValidationError,
)
from catalogsync.domain.models import (
    CatalogItem,
    CatalogPage,
    FilterState,
    SortMode,
    UserSession,
)
from catalogsync.domain.pricing import clamp_sale_percentage, effective_price
from catalogsync.domain.reference import CatalogReference, IdentifierPolicy, get_reference
from catalogsync.domain.state_machines import FavoriteStatus, validate_favorite_transition

__all__ = [
    "AuthenticationRequiredError",
    "CartLineItem",
    "CartOutcome",
    "CartOutcomeStatus",
    "CatalogItem",
    "CatalogPage",
    "CatalogReference",
    "DomainError",
    "FavoriteStatus",
    "FilterState",
    "IdentifierPolicy",
    "InvalidIdentifierError",
    "InvalidStateTransitionError",
    "MissingSelectionError",
    "RemoteError",
    "RemoteFailureError",
    "SortMode",
    "TransientUnavailableError",
    "UserSession",
    "ValidationError",
    "clamp_sale_percentage",
    "effective_price",
    "get_reference",
    "validate_favorite_transition",
]
