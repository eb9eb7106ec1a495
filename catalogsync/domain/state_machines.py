"""State machine for per-item favorite toggles.

Each tracked item moves through a small, deterministic lifecycle while
a toggle request is outstanding. The transition table is the single
source of truth for which moves are legal.
"""

from enum import Enum

from catalogsync.domain.exceptions import InvalidStateTransitionError


class FavoriteStatus(str, Enum):
    """Favorite toggle lifecycle.

    State diagram:
        IDLE ──────► PENDING ──────► CONFIRMED
                       │  ▲              │
                       │  └──────────────┤
                       ▼                 │
                     FAILED ─────────────┘ (retry → PENDING)
    """

    IDLE = "idle"
    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"

    def can_transition_to(self, target: "FavoriteStatus") -> bool:
        """Check if transition to target state is valid.

        Args:
            target: Target state to transition to.

        Returns:
            True if transition is valid.
        """
        return target in _FAVORITE_TRANSITIONS.get(self, set())

    def allowed_transitions(self) -> list["FavoriteStatus"]:
        """Get list of valid target states."""
        return list(_FAVORITE_TRANSITIONS.get(self, set()))

    def is_in_flight(self) -> bool:
        """Check if a toggle request is outstanding."""
        return self is FavoriteStatus.PENDING


_FAVORITE_TRANSITIONS: dict[FavoriteStatus, set[FavoriteStatus]] = {
    FavoriteStatus.IDLE: {FavoriteStatus.PENDING},
    FavoriteStatus.PENDING: {FavoriteStatus.CONFIRMED, FavoriteStatus.FAILED},
    FavoriteStatus.CONFIRMED: {FavoriteStatus.PENDING},
    FavoriteStatus.FAILED: {FavoriteStatus.PENDING},
}


def validate_favorite_transition(
    item_id: str,
    current: FavoriteStatus,
    target: FavoriteStatus,
) -> None:
    """Validate a favorite status transition.

    Args:
        item_id: Item being toggled.
        current: Current status.
        target: Target status.

    Raises:
        InvalidStateTransitionError: If transition is not allowed.
    """
    if not current.can_transition_to(target):
        raise InvalidStateTransitionError(
            entity_type="Favorite",
            entity_id=item_id,
            current_state=current.value,
            target_state=target.value,
            allowed_transitions=[s.value for s in current.allowed_transitions()],
        )
