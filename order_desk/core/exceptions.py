# ==============================================================================
# CUSTOM EXCEPTIONS - Application Error Hierarchy
# ==============================================================================
# Structured exception classes for consistent error handling
# Each exception maps to appropriate HTTP status codes
# ==============================================================================

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional


class AppException(Exception):
    """
    Base exception for all application errors.

    Provides a consistent interface for error handling with:
    - Error code for programmatic identification
    - HTTP status code mapping
    - Detailed message and optional context

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable error identifier
        status_code: HTTP status code to return
        details: Additional context dictionary
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        error_code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary format for JSON response.

        Returns:
            Dictionary containing error details
        """
        return {
            "success": False,
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details,
            }
        }

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message='{self.message}', "
            f"error_code='{self.error_code}', "
            f"status_code={self.status_code})"
        )


# ==============================================================================
# DEPENDENCY EXCEPTIONS
# ==============================================================================

class DependencyFailureError(AppException):
    """
    Raised when a collaborator (store, object storage, price oracle,
    identity provider) fails.

    Maps to HTTP 503 Service Unavailable.

    Attributes:
        dependency: Name of the failing collaborator
        operation: Operation that was being attempted
    """

    def __init__(
        self,
        message: str = "A required service is unavailable",
        dependency: Optional[str] = None,
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        _details = details or {}
        if dependency:
            _details["dependency"] = dependency
        if operation:
            _details["operation"] = operation

        super().__init__(
            message=message,
            error_code="DEPENDENCY_FAILURE",
            status_code=503,
            details=_details,
        )
        self.dependency = dependency
        self.operation = operation


class DatabaseError(DependencyFailureError):
    """
    Raised when the persistent store fails.

    Raised when database operations fail due to:
    - Connection issues
    - Query execution failures
    """

    def __init__(
        self,
        message: str = "Database operation failed",
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            dependency="store",
            operation=operation,
            details=details,
        )
        self.error_code = "DATABASE_ERROR"


# ==============================================================================
# RESOURCE EXCEPTIONS
# ==============================================================================

class NotFoundError(AppException):
    """
    Raised when a requested resource does not exist.

    Maps to HTTP 404 Not Found.

    Attributes:
        resource_type: Type of resource that was not found
        resource_id: Identifier of the missing resource
    """

    def __init__(
        self,
        message: str = "Resource not found",
        resource_type: Optional[str] = None,
        resource_id: Optional[Any] = None,
    ) -> None:
        details = {}
        if resource_type:
            details["resource_type"] = resource_type
        if resource_id:
            details["resource_id"] = str(resource_id)

        super().__init__(
            message=message,
            error_code="NOT_FOUND",
            status_code=404,
            details=details,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ConcurrentModificationError(AppException):
    """
    Raised when an update was made against a stale record version.

    Maps to HTTP 409 Conflict.
    """

    def __init__(
        self,
        transaction_id: str,
        expected_version: int,
        actual_version: Optional[int] = None,
    ) -> None:
        details: Dict[str, Any] = {
            "transaction_id": str(transaction_id),
            "expected_version": expected_version,
        }
        if actual_version is not None:
            details["actual_version"] = actual_version

        super().__init__(
            message=(
                f"order {transaction_id} was modified by someone else "
                f"(expected version {expected_version})"
            ),
            error_code="CONCURRENT_MODIFICATION",
            status_code=409,
            details=details,
        )


# ==============================================================================
# VALIDATION EXCEPTIONS
# ==============================================================================

class ValidationError(AppException):
    """
    Raised when input validation fails.

    Maps to HTTP 422 Unprocessable Entity.
    Contains field-level validation errors.
    """

    def __init__(
        self,
        message: str = "Validation error",
        errors: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            status_code=422,
            details={"validation_errors": errors or {}},
        )
        self.errors = errors or {}


class ImmutableFieldViolationError(AppException):
    """
    Raised when an update names a write-once field.

    Maps to HTTP 422 Unprocessable Entity.

    Attributes:
        fields: Sorted names of the offending fields
    """

    def __init__(
        self,
        transaction_id: str,
        fields: Iterable[str],
    ) -> None:
        self.fields: List[str] = sorted(fields)
        super().__init__(
            message=(
                f"order {transaction_id} cannot be updated: "
                f"{', '.join(self.fields)} cannot be changed after creation"
            ),
            error_code="IMMUTABLE_FIELD_VIOLATION",
            status_code=422,
            details={
                "transaction_id": str(transaction_id),
                "fields": self.fields,
            },
        )


# ==============================================================================
# STATE MACHINE EXCEPTIONS
# ==============================================================================

class InvalidTransitionError(AppException):
    """
    Raised when a status change is not allowed by the transition table.

    Maps to HTTP 409 Conflict.
    """

    def __init__(
        self,
        transaction_id: str,
        current_status: str,
        target_status: str,
        allowed: Optional[Iterable[str]] = None,
    ) -> None:
        allowed_list = sorted(allowed or [])
        super().__init__(
            message=(
                f"order {transaction_id} could not transition "
                f"from {current_status} to {target_status}"
            ),
            error_code="INVALID_TRANSITION",
            status_code=409,
            details={
                "transaction_id": str(transaction_id),
                "current_status": current_status,
                "target_status": target_status,
                "allowed_targets": allowed_list,
            },
        )
        self.current_status = current_status
        self.target_status = target_status


# ==============================================================================
# BULK OPERATION EXCEPTIONS
# ==============================================================================

class PartialFailureError(AppException):
    """
    Raised when a bulk operation completed for some items only.

    Maps to HTTP 207 Multi-Status. The failed ids are listed so that
    the caller can retry just those.
    """

    def __init__(
        self,
        message: str = "Operation partially failed",
        succeeded: Optional[List[str]] = None,
        failed: Optional[List[str]] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        _details = details or {}
        _details["succeeded_ids"] = list(succeeded or [])
        _details["failed_ids"] = list(failed or [])

        super().__init__(
            message=message,
            error_code="PARTIAL_FAILURE",
            status_code=207,
            details=_details,
        )
        self.failed = list(failed or [])


# ==============================================================================
# AUTHENTICATION & AUTHORIZATION EXCEPTIONS
# ==============================================================================

class AuthenticationError(AppException):
    """
    Raised when authentication fails.

    Maps to HTTP 401 Unauthorized.
    """

    def __init__(
        self,
        message: str = "Authentication failed",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code="AUTHENTICATION_ERROR",
            status_code=401,
            details=details,
        )


class AuthorizationError(AppException):
    """
    Raised when the caller lacks permission for an action.

    Maps to HTTP 403 Forbidden.
    """

    def __init__(
        self,
        message: str = "Permission denied",
        required_permission: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        _details = details or {}
        if required_permission:
            _details["required_permission"] = required_permission

        super().__init__(
            message=message,
            error_code="AUTHORIZATION_ERROR",
            status_code=403,
            details=_details,
        )


class TokenExpiredError(AuthenticationError):
    """Raised when JWT token has expired."""

    def __init__(
        self,
        message: str = "Token has expired",
    ) -> None:
        super().__init__(message=message)
        self.error_code = "TOKEN_EXPIRED"


class InvalidTokenError(AuthenticationError):
    """Raised when JWT token is invalid or malformed."""

    def __init__(
        self,
        message: str = "Invalid token",
    ) -> None:
        super().__init__(message=message)
        self.error_code = "INVALID_TOKEN"
