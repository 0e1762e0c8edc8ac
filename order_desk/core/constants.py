# ==============================================================================
# APPLICATION CONSTANTS - Centralized Configuration Values
# ==============================================================================
# Immutable constants used throughout the application
# Organized by category for easy maintenance
# ==============================================================================

from __future__ import annotations

from typing import Final


# ==============================================================================
# API CONSTANTS
# ==============================================================================

class APIConstants:
    """API-related constants."""

    # Pagination defaults (pages are zero-indexed)
    FIRST_PAGE: Final[int] = 0
    MIN_PAGE_SIZE: Final[int] = 1

    # Status filter that disables status filtering
    STATUS_FILTER_ALL: Final[str] = "All"

    # Response headers
    REQUEST_ID_HEADER: Final[str] = "X-Request-ID"

    # Content types
    CSV_CONTENT_TYPE: Final[str] = "text/csv; charset=utf-8"


# ==============================================================================
# DATABASE CONSTANTS
# ==============================================================================

class DatabaseConstants:
    """Database-related constants."""

    # Collection/Table names
    TRANSACTIONS_COLLECTION: Final[str] = "transactions"


# ==============================================================================
# TRANSACTION CONSTANTS
# ==============================================================================

class TransactionConstants:
    """Sell-order constants."""

    # Order statuses
    STATUS_PENDING: Final[str] = "pending"
    STATUS_PROCESSING: Final[str] = "processing"
    STATUS_APPROVED: Final[str] = "approved"
    STATUS_COMPLETED: Final[str] = "completed"
    STATUS_REJECTED: Final[str] = "rejected"

    # Bucket for records whose stored status is not recognised
    STATUS_UNKNOWN: Final[str] = "unknown"

    # Monetary precision
    MONEY_PLACES: Final[str] = "0.01"
    RATE_PLACES: Final[str] = "0.0001"

    # Submitted amount and rate bounds
    AMOUNT_MAX_DIGITS: Final[int] = 20
    AMOUNT_MAX_PLACES: Final[int] = 8

    # Fields fixed at creation or managed by the store
    IMMUTABLE_FIELDS: Final[frozenset] = frozenset({
        "id",
        "owner_id",
        "created_at",
        "pi_amount",
        "usd_value",
        "inr_value",
        "sell_rate_usd",
        "sell_rate_inr",
        "payment_identifier",
        "proof_image_ref",
        "user_info",
        "version",
        "updated_at",
    })

    @classmethod
    def all_statuses(cls) -> list[str]:
        """Get all valid order statuses in lifecycle order."""
        return [
            cls.STATUS_PENDING,
            cls.STATUS_PROCESSING,
            cls.STATUS_APPROVED,
            cls.STATUS_COMPLETED,
            cls.STATUS_REJECTED,
        ]


# ==============================================================================
# ERROR MESSAGES
# ==============================================================================

class ErrorMessages:
    """Standardized error messages."""

    # Authentication
    TOKEN_EXPIRED: Final[str] = "Authentication token has expired"
    TOKEN_INVALID: Final[str] = "Invalid authentication token"
    UNAUTHORIZED: Final[str] = "Authentication required"

    # Authorization
    ADMIN_REQUIRED: Final[str] = "Administrator access required"
    RESOURCE_FORBIDDEN: Final[str] = "Access to this order is forbidden"

    # Resources
    TRANSACTION_NOT_FOUND: Final[str] = "Order not found"
    USER_NOT_FOUND: Final[str] = "No orders found for user"

    # Dependencies
    STORAGE_NOT_CONFIGURED: Final[str] = "Object storage is not configured"


# ==============================================================================
# SUCCESS MESSAGES
# ==============================================================================

class SuccessMessages:
    """Standardized success messages."""

    TRANSACTION_CREATED: Final[str] = "Order submitted successfully"
    TRANSACTION_DELETED: Final[str] = "Order deleted successfully"
    USER_DELETED: Final[str] = "User orders deleted successfully"
