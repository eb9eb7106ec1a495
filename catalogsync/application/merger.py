"""Identity-keyed merging of fetched catalog items.

Any number of overlapping or out-of-order fetches fold into one mapping
keyed by item id. The last merge performed wins for a given id; nothing
is ever pruned here, since no single fetch is assumed to be the whole
catalog.
"""

from typing import Iterable, Iterator, Mapping

from catalogsync.domain.models import CatalogItem


def merge_items(
    catalog: Mapping[str, CatalogItem],
    items: Iterable[CatalogItem],
) -> dict[str, CatalogItem]:
    """Merge items into a copy of ``catalog``.

    Args:
        catalog: Existing id -> item mapping (left untouched).
        items: Newly fetched items.

    Returns:
        New mapping with incoming items inserted or replacing by id.
    """
    merged = dict(catalog)
    for item in items:
        merged[item.id] = item
    return merged


class MergedCatalog:
    """Mutable id -> item collection owned by a single view."""

    def __init__(self, items: Iterable[CatalogItem] = ()) -> None:
        self._items: dict[str, CatalogItem] = {}
        self.merge(items)

    def merge(self, items: Iterable[CatalogItem]) -> "MergedCatalog":
        """Insert new ids and replace existing ones in place.

        Returns:
            This catalog, for chaining.
        """
        for item in items:
            self._items[item.id] = item
        return self

    def get(self, item_id: str) -> CatalogItem | None:
        return self._items.get(item_id)

    def ids(self) -> set[str]:
        return set(self._items)

    def items(self) -> list[tuple[str, CatalogItem]]:
        return list(self._items.items())

    def values(self) -> list[CatalogItem]:
        return list(self._items.values())

    def snapshot(self) -> dict[str, CatalogItem]:
        """Copy of the current mapping."""
        return dict(self._items)

    def clear(self) -> None:
        """Drop everything (explicit pruning by the owning view)."""
        self._items.clear()

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)
