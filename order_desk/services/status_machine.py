# ==============================================================================
# STATUS MACHINE - Order Lifecycle Rules
# ==============================================================================
# Transition table for sell orders and the checks built on it
# ==============================================================================

from __future__ import annotations

from typing import Dict, FrozenSet

from order_desk.core.constants import TransactionConstants
from order_desk.core.exceptions import InvalidTransitionError, ValidationError

PENDING = TransactionConstants.STATUS_PENDING
PROCESSING = TransactionConstants.STATUS_PROCESSING
APPROVED = TransactionConstants.STATUS_APPROVED
COMPLETED = TransactionConstants.STATUS_COMPLETED
REJECTED = TransactionConstants.STATUS_REJECTED


# Allowed target statuses per current status. Completed and rejected
# orders are terminal; staying in the same status is not a transition.
TRANSITIONS: Dict[str, FrozenSet[str]] = {
    PENDING: frozenset({PROCESSING, REJECTED}),
    PROCESSING: frozenset({APPROVED, COMPLETED, REJECTED}),
    APPROVED: frozenset({COMPLETED, REJECTED}),
    COMPLETED: frozenset(),
    REJECTED: frozenset(),
}


def is_known_status(status: str) -> bool:
    return status in TRANSITIONS


def allowed_targets(current_status: str) -> FrozenSet[str]:
    """Statuses reachable from ``current_status``; empty for unknown values."""
    return TRANSITIONS.get(current_status, frozenset())


def is_terminal(status: str) -> bool:
    return is_known_status(status) and not TRANSITIONS[status]


def require_known_status(status: str, field: str = "status") -> str:
    """
    Normalize and check a requested status.

    Raises:
        ValidationError: If the value is not a lifecycle status
    """
    normalized = (status or "").strip().lower()
    if not is_known_status(normalized):
        raise ValidationError(
            message=f"Unknown order status: {status!r}",
            errors={field: f"must be one of {', '.join(TRANSITIONS)}"},
        )
    return normalized


def validate_transition(
    transaction_id: str,
    current_status: str,
    target_status: str,
) -> None:
    """
    Check a move against the transition table.

    Raises:
        InvalidTransitionError: If the move is not allowed
    """
    allowed = allowed_targets(current_status)
    if target_status not in allowed:
        raise InvalidTransitionError(
            transaction_id=transaction_id,
            current_status=current_status,
            target_status=target_status,
            allowed=allowed,
        )
