# ==============================================================================
# CORE PACKAGE INITIALIZATION
# ==============================================================================
# Core utilities: Settings, Security, Exceptions, Constants
# ==============================================================================

"""
Core Module
===========

Contains core utilities and configurations for the application:
- settings: Environment configuration management
- security: Verification of identity-provider tokens
- exceptions: Custom exception classes
- constants: Application-wide constants
"""

from order_desk.core.settings import settings, get_settings, DatabaseType
from order_desk.core.exceptions import (
    AppException,
    AuthenticationError,
    AuthorizationError,
    ConcurrentModificationError,
    DatabaseError,
    DependencyFailureError,
    ImmutableFieldViolationError,
    InvalidTransitionError,
    NotFoundError,
    PartialFailureError,
    ValidationError,
)

__all__ = [
    "settings",
    "get_settings",
    "DatabaseType",
    "AppException",
    "AuthenticationError",
    "AuthorizationError",
    "ConcurrentModificationError",
    "DatabaseError",
    "DependencyFailureError",
    "ImmutableFieldViolationError",
    "InvalidTransitionError",
    "NotFoundError",
    "PartialFailureError",
    "ValidationError",
]
