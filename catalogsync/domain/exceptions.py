"""Domain exceptions.

All errors raised by the catalog synchronization core. Callers catch
``DomainError`` to handle anything this package raises, or one of the
narrower classes to pick a specific user-facing flow:

- ``ValidationError``: bad input caught before any request is sent.
- ``AuthenticationRequiredError``: the caller should redirect to sign-in.
- ``TransientUnavailableError``: timeout/overload, eligible for one degraded retry.
- ``RemoteFailureError``: any other collaborator failure.
"""

from typing import Any

GENERIC_FAILURE_MESSAGE = "Something went wrong. Please try again."


class DomainError(Exception):
    """Base class for all catalogsync exceptions."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# State Machine Errors
# ============================================================================


class InvalidStateTransitionError(DomainError):
    """Raised when an invalid state transition is attempted."""

    def __init__(
        self,
        entity_type: str,
        entity_id: str,
        current_state: str,
        target_state: str,
        allowed_transitions: list[str] | None = None,
    ) -> None:
        """Initialize invalid state transition error.

        Args:
            entity_type: Type of tracked entity (e.g., "Favorite").
            entity_id: ID of the entity.
            current_state: Current state of the entity.
            target_state: Attempted target state.
            allowed_transitions: List of allowed target states from current state.
        """
        allowed = allowed_transitions or []
        message = (
            f"Cannot transition {entity_type}({entity_id}) "
            f"from '{current_state}' to '{target_state}'. "
            f"Allowed transitions: {allowed}"
        )
        super().__init__(
            message,
            details={
                "entity_type": entity_type,
                "entity_id": entity_id,
                "current_state": current_state,
                "target_state": target_state,
                "allowed_transitions": allowed,
            },
        )


# ============================================================================
# Validation Errors
# ============================================================================


class ValidationError(DomainError):
    """Base class for input rejected before reaching a collaborator."""

    pass


class InvalidIdentifierError(ValidationError):
    """Raised when an item id does not match the accepted identifier shape."""

    def __init__(self, item_id: str) -> None:
        """Initialize invalid identifier error.

        Args:
            item_id: The rejected identifier.
        """
        super().__init__(
            f"Invalid item identifier: {item_id!r}",
            details={"item_id": item_id},
        )


class MissingSelectionError(ValidationError):
    """Raised when a required size or color selection is missing or unknown."""

    def __init__(self, item_id: str, field: str, reason: str) -> None:
        """Initialize missing selection error.

        Args:
            item_id: Item the selection applies to.
            field: Which selection is missing ("size" or "color").
            reason: Explanation of what is wrong with it.
        """
        super().__init__(
            f"Invalid {field} for item {item_id}: {reason}",
            details={"item_id": item_id, "field": field, "reason": reason},
        )


# ============================================================================
# Remote Collaborator Errors
# ============================================================================


class RemoteError(DomainError):
    """Base class for failures reported by a remote collaborator."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize remote error.

        Args:
            message: Collaborator-provided message; empty means none was given.
            status_code: HTTP status code if the failure had one.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message or GENERIC_FAILURE_MESSAGE, details=details)
        self.status_code = status_code
        self.remote_message = message or None


class AuthenticationRequiredError(RemoteError):
    """Raised when the operation needs a signed-in user."""

    def __init__(
        self,
        message: str = "Authentication required",
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code)


class TransientUnavailableError(RemoteError):
    """Raised on timeouts and 503/504-class overload signals."""

    pass


class RemoteFailureError(RemoteError):
    """Raised for any other collaborator failure."""

    pass
