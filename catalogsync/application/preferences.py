"""Debounced persistence of shopper preferences.

Filter and display preferences change in bursts (a shopper clicking
through several filters in a row). Only the last value of a burst is
written, once the controls have been quiet for ``delay`` seconds.
"""

import asyncio
from typing import Any, Awaitable, Callable, Generic, TypeVar

import structlog

from catalogsync.infrastructure.catalog_client import CatalogAPIClient
from catalogsync.infrastructure.config import settings

logger = structlog.get_logger()

T = TypeVar("T")

_NOTHING = object()


class TrailingDebouncer(Generic[T]):
    """Runs ``action`` with the latest value after a quiet period.

    Attributes:
        delay: Quiet period in seconds.
        action: Async callable that receives the value.
    """

    def __init__(self, delay: float, action: Callable[[T], Awaitable[None]]) -> None:
        self.delay = delay
        self.action = action
        self._value: Any = _NOTHING
        self._timer: asyncio.Task[None] | None = None

    @property
    def pending(self) -> bool:
        return self._value is not _NOTHING

    def trigger(self, value: T) -> None:
        """Record a new value and restart the quiet timer."""
        self._value = value
        self._cancel_timer()
        self._timer = asyncio.create_task(self._fire_later())

    async def _fire_later(self) -> None:
        await asyncio.sleep(self.delay)
        self._timer = None
        await self._run()

    async def _run(self) -> None:
        if self._value is _NOTHING:
            return
        value, self._value = self._value, _NOTHING
        await self.action(value)

    async def flush(self) -> None:
        """Run the action now with the pending value, if any."""
        self._cancel_timer()
        await self._run()

    def cancel(self) -> None:
        """Drop the pending value without running the action."""
        self._cancel_timer()
        self._value = _NOTHING

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None


class PreferenceSync:
    """Saves user preferences through the catalog API, debounced."""

    def __init__(self, client: CatalogAPIClient, delay: float | None = None) -> None:
        """Initialize the sync.

        Args:
            client: Catalog API client.
            delay: Quiet period in seconds. Defaults to
                ``settings.preference_save_delay_seconds``.
        """
        self.client = client
        if delay is None:
            delay = settings.preference_save_delay_seconds
        self.debouncer: TrailingDebouncer[dict[str, Any]] = TrailingDebouncer(
            delay, self._save
        )
        self.saved_count = 0

    def update(self, preferences: dict[str, Any]) -> None:
        """Queue a preference snapshot for saving."""
        self.debouncer.trigger(dict(preferences))

    async def flush(self) -> None:
        await self.debouncer.flush()

    def cancel(self) -> None:
        self.debouncer.cancel()

    async def _save(self, preferences: dict[str, Any]) -> None:
        try:
            await self.client.save_preferences(preferences)
        except Exception as e:
            logger.warning("Failed to save preferences", error=str(e))
            return
        self.saved_count += 1
        logger.debug("Saved preferences", keys=sorted(preferences))
