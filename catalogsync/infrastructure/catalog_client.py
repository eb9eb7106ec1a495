"""Catalog service HTTP client.

Thin async client for the storefront's REST API: product listings,
favorites, cart items and user preferences. Transport failures are
translated into the domain error taxonomy here so every caller sees the
same exception classes regardless of how the failure happened.
"""

from typing import Any

import httpx
import structlog
from pydantic import ValidationError as PayloadValidationError

from catalogsync.domain.cart import CartLineItem
from catalogsync.domain.exceptions import (
    AuthenticationRequiredError,
    RemoteError,
    RemoteFailureError,
    TransientUnavailableError,
)
from catalogsync.infrastructure.schemas import FavoriteStatusPayload, ProductListing

logger = structlog.get_logger()

TRANSIENT_STATUS_CODES = frozenset({503, 504})

INVALID_RESPONSE_MESSAGE = "Invalid response from server"


def extract_error_message(body: Any, fallback: str) -> str:
    """Pull the human-readable message out of an error body.

    Args:
        body: Decoded JSON body, or raw text.
        fallback: Message to use when the body carries none.

    Returns:
        Collaborator-provided message or the fallback.
    """
    if isinstance(body, dict):
        nested = body.get("data")
        nested_message = nested.get("message") if isinstance(nested, dict) else None
        message = body.get("message") or body.get("error") or nested_message
        if isinstance(message, str) and message.strip():
            return message
    elif isinstance(body, str) and body.strip():
        return body.strip()
    return fallback


def error_for_status(status_code: int, message: str) -> RemoteError:
    """Map an HTTP error status to the domain taxonomy."""
    if status_code == 401:
        return AuthenticationRequiredError(message, status_code=status_code)
    if status_code in TRANSIENT_STATUS_CODES:
        return TransientUnavailableError(message, status_code=status_code)
    if status_code == 500 and "timeout" in message.lower():
        return TransientUnavailableError(message, status_code=status_code)
    return RemoteFailureError(message, status_code=status_code)


def _invalid_response(path: str, error: PayloadValidationError) -> RemoteFailureError:
    logger.error(
        "Invalid response body",
        path=path,
        error_count=error.error_count(),
    )
    return RemoteFailureError(INVALID_RESPONSE_MESSAGE, details={"path": path})


class CatalogAPIClient:
    """HTTP client for the storefront catalog API.

    Methods raise ``RemoteError`` subclasses on failure and return parsed
    payloads on success.
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the API client.

        Args:
            base_url: Catalog API base URL (e.g., "http://localhost:5000/api").
            token: Bearer token of the signed-in user, if any.
            timeout: Request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            headers = {
                "Content-Type": "application/json",
                "Accept": "application/json",
            }
            if self.token:
                headers["Authorization"] = f"Bearer {self.token}"
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=headers,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "CatalogAPIClient":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    async def _request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Make an API request.

        Args:
            method: HTTP method.
            path: API endpoint path.
            json: Request body as JSON.
            params: Query parameters.

        Returns:
            Decoded JSON body, or None for empty responses.

        Raises:
            AuthenticationRequiredError: On 401.
            TransientUnavailableError: On timeouts and 503/504.
            RemoteFailureError: On any other failure.
        """
        client = await self._get_client()

        if params:
            params = {k: v for k, v in params.items() if v is not None}

        logger.debug("Making API request", method=method, path=path)

        try:
            response = await client.request(
                method=method,
                url=path,
                json=json,
                params=params,
            )
        except httpx.TimeoutException as e:
            logger.error("API request timeout", path=path, error=str(e))
            raise TransientUnavailableError(
                f"Request timeout: {path}", status_code=504
            ) from e
        except httpx.RequestError as e:
            logger.error("API request failed", path=path, error=str(e))
            raise RemoteFailureError(f"Request failed: {e}") from e

        if response.status_code >= 400:
            try:
                body: Any = response.json()
            except ValueError:
                body = response.text
            message = extract_error_message(body, "")
            logger.warning(
                "API request rejected",
                method=method,
                path=path,
                status=response.status_code,
                error=message or response.reason_phrase,
            )
            raise error_for_status(response.status_code, message)

        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            logger.error("Invalid JSON from API", path=path)
            raise RemoteFailureError(
                "Invalid response from server", status_code=response.status_code
            ) from e

    # =========================================================================
    # Products
    # =========================================================================

    async def list_products(self, params: dict[str, Any]) -> ProductListing:
        """List products for one page of a query.

        Args:
            params: Listing query parameters (see ``FilterState.to_query_params``).

        Returns:
            Parsed listing envelope.
        """
        body = await self._request("GET", "/products", params=params)
        try:
            return ProductListing.from_body(body)
        except PayloadValidationError as e:
            raise _invalid_response("/products", e) from e

    # =========================================================================
    # Favorites
    # =========================================================================

    async def check_favorite(self, product_id: str) -> bool:
        """Check whether the signed-in user favorited a product."""
        path = f"/favorites/check/{product_id}"
        body = await self._request("GET", path)
        try:
            return FavoriteStatusPayload.from_body(body).is_favorite
        except PayloadValidationError as e:
            raise _invalid_response(path, e) from e

    async def toggle_favorite(self, product_id: str) -> bool:
        """Toggle a favorite and return the server-confirmed state."""
        path = f"/favorites/toggle/{product_id}"
        body = await self._request("POST", path)
        try:
            return FavoriteStatusPayload.from_body(body).is_favorite
        except PayloadValidationError as e:
            raise _invalid_response(path, e) from e

    # =========================================================================
    # Cart
    # =========================================================================

    async def add_cart_item(self, line_item: CartLineItem) -> None:
        """Add a resolved line item to the signed-in user's cart."""
        await self._request("POST", "/cart/items", json=line_item.to_payload())

    # =========================================================================
    # Preferences
    # =========================================================================

    async def save_preferences(self, preferences: dict[str, Any]) -> None:
        """Persist the signed-in user's UI preferences."""
        await self._request("PUT", "/user-preferences", json=preferences)
