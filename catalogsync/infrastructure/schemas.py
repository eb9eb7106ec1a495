"""Wire schemas for the remote catalog service.

Pydantic models for the JSON bodies the catalog, favorites and cart
endpoints return. They are parsed at the transport boundary and turned
into domain objects before leaving the infrastructure layer.
"""

from decimal import Decimal
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PayloadValidationError

from catalogsync.domain.models import CatalogItem

logger = structlog.get_logger()


class ProductPayload(BaseModel):
    """Product as serialized by the catalog service."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    object_id: str | None = Field(default=None, alias="_id")
    id: str | int | None = None
    name: str
    price: Decimal = Field(default=Decimal("0"), ge=0)
    category: str = ""
    gender: str = ""
    season: str = ""
    style: str = ""
    occasion: str = ""
    on_sale: bool = Field(default=False, alias="onSale")
    sale_percentage: Decimal = Field(
        default=Decimal("0"), ge=0, le=100, alias="salePercentage"
    )
    colors: list[str] = Field(default_factory=list)
    sizes: list[str] = Field(default_factory=list)
    image: str | None = None

    @property
    def stable_id(self) -> str | None:
        """Document id if present, else the legacy numeric id."""
        if self.object_id:
            return str(self.object_id)
        if self.id is not None and str(self.id):
            return str(self.id)
        return None

    def to_item(self) -> CatalogItem | None:
        """Convert to a CatalogItem, or None when the payload has no id."""
        item_id = self.stable_id
        if item_id is None:
            return None
        return CatalogItem(
            id=item_id,
            name=self.name,
            category=self.category,
            gender=self.gender,
            season=self.season,
            style=self.style,
            occasion=self.occasion,
            base_price=self.price,
            on_sale=self.on_sale,
            sale_percentage=self.sale_percentage,
            colors=tuple(self.colors),
            sizes=tuple(self.sizes),
            image=self.image,
        )


class ProductListing(BaseModel):
    """Paginated listing envelope: ``{success, data, total, page, pages}``."""

    model_config = ConfigDict(extra="ignore")

    data: list[dict[str, Any]] = Field(default_factory=list)
    total: int | None = None
    page: int | None = None
    pages: int | None = None

    @classmethod
    def from_body(cls, body: Any) -> "ProductListing":
        """Accept either the envelope or a bare list of products."""
        if isinstance(body, list):
            return cls(data=body, total=len(body))
        if isinstance(body, dict):
            return cls.model_validate(body)
        return cls()

    def items(self) -> list[CatalogItem]:
        """Parse products, dropping entries that are malformed or lack an id."""
        parsed: list[CatalogItem] = []
        for raw in self.data:
            try:
                item = ProductPayload.model_validate(raw).to_item()
            except PayloadValidationError as e:
                logger.warning(
                    "Dropping malformed product payload",
                    error_count=e.error_count(),
                    product_id=raw.get("_id") or raw.get("id"),
                )
                continue
            if item is None:
                logger.warning("Dropping product payload without id", name=raw.get("name"))
                continue
            parsed.append(item)
        return parsed


class FavoriteStatusPayload(BaseModel):
    """Response of the favorite check and toggle endpoints."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    is_favorite: bool = Field(default=False, alias="isFavorite")
    message: str | None = None

    @classmethod
    def from_body(cls, body: Any) -> "FavoriteStatusPayload":
        """Accept the bare object or one wrapped in ``data``."""
        if isinstance(body, dict) and isinstance(body.get("data"), dict):
            body = body["data"]
        if not isinstance(body, dict):
            return cls()
        return cls.model_validate(body)
