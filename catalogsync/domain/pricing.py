"""Sale price resolution.

Prices are Decimal in major units and resolve to whole cents with
ROUND_HALF_UP, the same rounding the cart collaborator applies.
"""

from decimal import ROUND_HALF_UP, Decimal

from catalogsync.domain.models import CatalogItem

CENT = Decimal("0.01")
_HUNDRED = Decimal("100")


def effective_price(item: CatalogItem) -> Decimal:
    """Resolve the price a shopper pays for an item.

    An item flagged on sale with a zero percentage is charged the base price.
    The percentage is assumed valid; callers clamp before storing it.

    Args:
        item: Catalog item.

    Returns:
        Effective price rounded to cents.
    """
    price = item.base_price
    if item.on_sale and item.sale_percentage > 0:
        price = price * (1 - item.sale_percentage / _HUNDRED)
    return price.quantize(CENT, rounding=ROUND_HALF_UP)


def discount_amount(item: CatalogItem) -> Decimal:
    """Amount saved against the base price, in cents precision."""
    base = item.base_price.quantize(CENT, rounding=ROUND_HALF_UP)
    return base - effective_price(item)


def clamp_sale_percentage(value: Decimal | int | float | str | None) -> Decimal:
    """Clamp a user-entered sale percentage into 0..100 before storage.

    Args:
        value: Raw percentage; None counts as 0.

    Returns:
        Percentage within [0, 100].
    """
    if value is None:
        return Decimal("0")
    pct = value if isinstance(value, Decimal) else Decimal(str(value))
    if pct.is_nan():
        return Decimal("0")
    return min(max(pct, Decimal("0")), _HUNDRED)
