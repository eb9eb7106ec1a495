"""Tests for the favorite toggle state machine."""

import pytest

from catalogsync.domain import FavoriteStatus
from catalogsync.domain.exceptions import InvalidStateTransitionError
from catalogsync.domain.state_machines import validate_favorite_transition


class TestFavoriteStatus:
    """Tests for FavoriteStatus state machine."""

    def test_idle_can_transition_to_pending(self) -> None:
        """IDLE can transition to PENDING."""
        assert FavoriteStatus.IDLE.can_transition_to(FavoriteStatus.PENDING)

    def test_idle_cannot_confirm_directly(self) -> None:
        """IDLE cannot skip the request."""
        assert not FavoriteStatus.IDLE.can_transition_to(FavoriteStatus.CONFIRMED)

    def test_pending_resolves_to_confirmed_or_failed(self) -> None:
        """PENDING can transition to CONFIRMED or FAILED."""
        assert FavoriteStatus.PENDING.can_transition_to(FavoriteStatus.CONFIRMED)
        assert FavoriteStatus.PENDING.can_transition_to(FavoriteStatus.FAILED)

    def test_pending_cannot_start_another_request(self) -> None:
        """At most one toggle per item is in flight."""
        assert not FavoriteStatus.PENDING.can_transition_to(FavoriteStatus.PENDING)

    def test_settled_states_can_toggle_again(self) -> None:
        """CONFIRMED and FAILED both allow a new toggle."""
        assert FavoriteStatus.CONFIRMED.allowed_transitions() == [FavoriteStatus.PENDING]
        assert FavoriteStatus.FAILED.allowed_transitions() == [FavoriteStatus.PENDING]

    def test_only_pending_is_in_flight(self) -> None:
        assert FavoriteStatus.PENDING.is_in_flight()
        for status in (FavoriteStatus.IDLE, FavoriteStatus.CONFIRMED, FavoriteStatus.FAILED):
            assert not status.is_in_flight()


class TestValidateFavoriteTransition:
    """Tests for validate_favorite_transition."""

    def test_valid_transition_passes(self) -> None:
        validate_favorite_transition("abc", FavoriteStatus.IDLE, FavoriteStatus.PENDING)

    def test_invalid_transition_raises(self) -> None:
        """Invalid transition raises with details."""
        with pytest.raises(InvalidStateTransitionError) as exc_info:
            validate_favorite_transition(
                "abc", FavoriteStatus.PENDING, FavoriteStatus.PENDING
            )

        details = exc_info.value.details
        assert details["entity_type"] == "Favorite"
        assert details["entity_id"] == "abc"
        assert details["current_state"] == "pending"
        assert sorted(details["allowed_transitions"]) == ["confirmed", "failed"]
