"""Favorite tracking for a product listing.

Favorites are confirmed, not optimistic: the favorited set only changes
once the catalog service reports the new state. While a toggle is
outstanding the item is pending, and further toggles on it are ignored
so the view can disable the control.
"""

import asyncio
from typing import Iterable

import structlog

from catalogsync.domain.exceptions import (
    AuthenticationRequiredError,
    InvalidIdentifierError,
)
from catalogsync.domain.models import UserSession
from catalogsync.domain.reference import IdentifierPolicy
from catalogsync.domain.state_machines import (
    FavoriteStatus,
    validate_favorite_transition,
)
from catalogsync.infrastructure.catalog_client import CatalogAPIClient
from catalogsync.infrastructure.config import settings

logger = structlog.get_logger()


class FavoriteStateTracker:
    """Per-view favorite state with at most one request in flight per item."""

    def __init__(
        self,
        client: CatalogAPIClient,
        session: UserSession,
        id_policy: IdentifierPolicy | None = None,
    ) -> None:
        """Initialize the tracker.

        Args:
            client: Catalog API client.
            session: Current user session.
            id_policy: Accepted identifier shape. Defaults to
                ``settings.item_id_pattern``.
        """
        self.client = client
        self.session = session
        self.id_policy = id_policy or IdentifierPolicy(settings.item_id_pattern)
        self._favorites: set[str] = set()
        self._status: dict[str, FavoriteStatus] = {}

    @property
    def favorites(self) -> frozenset[str]:
        return frozenset(self._favorites)

    @property
    def in_flight(self) -> frozenset[str]:
        return frozenset(
            item_id for item_id, status in self._status.items() if status.is_in_flight()
        )

    def is_favorite(self, item_id: str) -> bool:
        return item_id in self._favorites

    def is_pending(self, item_id: str) -> bool:
        return self.status(item_id).is_in_flight()

    def status(self, item_id: str) -> FavoriteStatus:
        return self._status.get(item_id, FavoriteStatus.IDLE)

    def _transition(self, item_id: str, target: FavoriteStatus) -> None:
        validate_favorite_transition(item_id, self.status(item_id), target)
        self._status[item_id] = target

    async def toggle(self, item_id: str) -> bool:
        """Toggle an item's favorite state.

        Args:
            item_id: Catalog item id.

        Returns:
            The server-confirmed favorite state, or the unchanged current
            state if a toggle for this item is already in flight.

        Raises:
            InvalidIdentifierError: If the id has an unrecognized shape.
            AuthenticationRequiredError: If no user is signed in.
            RemoteError: If the catalog service rejects the toggle.
        """
        if not self.session.is_authenticated:
            raise AuthenticationRequiredError("Please sign in to add products to favorites")
        if not self.id_policy.is_valid(item_id):
            raise InvalidIdentifierError(item_id)

        if self.is_pending(item_id):
            logger.debug("Favorite toggle already in flight", product_id=item_id)
            return self.is_favorite(item_id)

        self._transition(item_id, FavoriteStatus.PENDING)
        try:
            confirmed = await self.client.toggle_favorite(item_id)
        except asyncio.CancelledError:
            self._transition(item_id, FavoriteStatus.FAILED)
            logger.info("Favorite toggle cancelled", product_id=item_id)
            raise
        except Exception as e:
            self._transition(item_id, FavoriteStatus.FAILED)
            logger.warning("Failed to toggle favorite", product_id=item_id, error=str(e))
            raise

        if confirmed:
            self._favorites.add(item_id)
        else:
            self._favorites.discard(item_id)
        self._transition(item_id, FavoriteStatus.CONFIRMED)
        logger.info("Favorite toggled", product_id=item_id, is_favorite=confirmed)
        return confirmed

    async def load(self, item_ids: Iterable[str]) -> frozenset[str]:
        """Load favorite status for the items currently on screen.

        Ids with an unrecognized shape are skipped. A failed check counts
        as "not favorited".

        Args:
            item_ids: Ids of the displayed items.

        Returns:
            The favorited ids after loading.
        """
        if not self.session.is_authenticated:
            self._favorites.clear()
            return self.favorites

        candidates = sorted({i for i in item_ids if self.id_policy.is_valid(i)})
        results = await asyncio.gather(
            *(self.client.check_favorite(item_id) for item_id in candidates),
            return_exceptions=True,
        )

        loaded: set[str] = set()
        for item_id, result in zip(candidates, results):
            if isinstance(result, Exception):
                logger.warning("Failed to check favorite", product_id=item_id, error=str(result))
            elif result is True:
                loaded.add(item_id)

        # Pending toggles own their ids until they resolve.
        for item_id in candidates:
            if self.is_pending(item_id):
                continue
            if item_id in loaded:
                self._favorites.add(item_id)
            else:
                self._favorites.discard(item_id)
        return self.favorites
