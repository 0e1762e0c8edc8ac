# ==============================================================================
# STATUS MACHINE TESTS
# ==============================================================================
# Tests for the order lifecycle transition table
# ==============================================================================

import pytest

from order_desk.core.exceptions import InvalidTransitionError, ValidationError
from order_desk.services.status_machine import (
    TRANSITIONS,
    allowed_targets,
    is_terminal,
    require_known_status,
    validate_transition,
)


class TestTransitionTable:
    """Tests for allowed and forbidden moves."""

    @pytest.mark.parametrize(
        "current, target",
        [
            ("pending", "processing"),
            ("pending", "rejected"),
            ("processing", "approved"),
            ("processing", "completed"),
            ("processing", "rejected"),
            ("approved", "completed"),
            ("approved", "rejected"),
        ],
    )
    def test_allowed_moves(self, current: str, target: str):
        validate_transition("t1", current, target)

    @pytest.mark.parametrize(
        "current, target",
        [
            ("pending", "completed"),
            ("pending", "approved"),
            ("pending", "pending"),
            ("completed", "pending"),
            ("completed", "rejected"),
            ("rejected", "processing"),
            ("approved", "processing"),
        ],
    )
    def test_forbidden_moves(self, current: str, target: str):
        with pytest.raises(InvalidTransitionError) as exc_info:
            validate_transition("t1", current, target)

        error = exc_info.value
        assert error.status_code == 409
        assert error.message == f"order t1 could not transition from {current} to {target}"
        assert error.details["allowed_targets"] == sorted(TRANSITIONS[current])

    def test_terminal_statuses(self):
        assert is_terminal("completed")
        assert is_terminal("rejected")
        assert not is_terminal("pending")
        assert not is_terminal("mystery")

    def test_unknown_current_status_has_no_targets(self):
        assert allowed_targets("legacy") == frozenset()
        with pytest.raises(InvalidTransitionError):
            validate_transition("t1", "legacy", "processing")


class TestRequireKnownStatus:
    """Tests for target status normalization."""

    def test_normalizes_case_and_whitespace(self):
        assert require_known_status("  Completed ") == "completed"

    def test_rejects_unknown_status(self):
        with pytest.raises(ValidationError) as exc_info:
            require_known_status("shipped", field="target_status")

        assert exc_info.value.status_code == 422
        assert "target_status" in exc_info.value.errors

    def test_rejects_empty_status(self):
        with pytest.raises(ValidationError):
            require_known_status("")
