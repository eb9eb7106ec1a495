"""Read-only catalog reference data.

Size options, fallback colors and the color swatch table are built once
per process and passed to the components that need them.
"""

import re
from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping

DEFAULT_ID_PATTERN = r"^[0-9a-fA-F]{24}$"

SIZE_OPTIONS: tuple[str, ...] = ("XS", "S", "M", "L", "XL", "XXL")

DEFAULT_COLORS: tuple[str, ...] = ("White", "Black", "Gray", "Navy")

_COLOR_SWATCHES: dict[str, str] = {
    "white": "#ffffff",
    "black": "#111111",
    "navy": "#1f2a44",
    "gray": "#b6b6b6",
    "blue": "#5aa7e0",
    "charcoal": "#4a4a4a",
    "green": "#4fa884",
    "peach": "#f2b6a0",
    "pink": "#f2a8c7",
    "burgundy": "#722F37",
    "olive": "#556B2F",
    "cream": "#FFFDD0",
    "lavender": "#E6E6FA",
    "beige": "#f5f5dc",
    "brown": "#8b5e3c",
    "red": "#ef4444",
    "yellow": "#facc15",
    "orange": "#f97316",
    "purple": "#8b5cf6",
    "teal": "#14b8a6",
    "cyan": "#06b6d4",
}


@dataclass(frozen=True)
class CatalogReference:
    """Immutable lookup table shared by cart and listing components."""

    sizes: tuple[str, ...] = SIZE_OPTIONS
    default_colors: tuple[str, ...] = DEFAULT_COLORS
    swatches: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType(dict(_COLOR_SWATCHES))
    )

    @property
    def default_color(self) -> str:
        """Color token used when an item lists no colors."""
        return self.default_colors[0]

    def swatch(self, color: str) -> str | None:
        """Look up the hex swatch for a color name (case-insensitive)."""
        return self.swatches.get(color.strip().lower())


@lru_cache(maxsize=1)
def get_reference() -> CatalogReference:
    """Get the process-wide reference table."""
    return CatalogReference()


class IdentifierPolicy:
    """Decides which item ids may be sent to favorite and cart endpoints."""

    def __init__(self, pattern: str = DEFAULT_ID_PATTERN) -> None:
        self.pattern = re.compile(pattern)

    def is_valid(self, item_id: object) -> bool:
        return isinstance(item_id, str) and bool(self.pattern.fullmatch(item_id))
