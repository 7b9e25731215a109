"""
Base exception classes for application-wide error handling.

This module provides a standardized exception hierarchy that enables:
- Consistent error responses across the REST API and WebSocket consumers
- Machine-readable error codes for client handling
- Detailed error information for debugging

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ValidationError - Input validation failures
    ├── NotFoundError - Referenced property/thread absent
    ├── UnauthenticatedError - No active session for an operation that needs one
    ├── PermissionDeniedError - Authorization failures
    └── ExternalServiceError - Backend/third-party failures
        └── BackendUnavailableError - Database or channel layer unreachable

Usage:
    from core.exceptions import BackendUnavailableError, NotFoundError

    raise NotFoundError(
        f"Property {property_id} not found",
        error_code="NOT_FOUND",
        details={"property_id": property_id},
    )

    # Convert to dict for API response
    try:
        ...
    except BaseApplicationError as e:
        return Response(e.to_dict(), status=e.http_status)

Note:
    Expected failures inside services are normally returned as
    ServiceResult.failure() using the same error codes; these exceptions
    are raised when a failure has to cross a layer boundary.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (field errors, metadata, etc.)
        http_status: Status code used when the error reaches a view
    """

    default_error_code: str = "APPLICATION_ERROR"
    http_status: int = 400

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Example:
            {
                "error": "Thread not found",
                "error_code": "NOT_FOUND",
                "details": {"thread_id": 12}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when input validation fails.

    Example:
        raise ValidationError(
            "Message body cannot be empty",
            details={"body": ["This field may not be blank."]},
        )
    """

    default_error_code: str = "VALIDATION_ERROR"
    http_status: int = 400


class NotFoundError(BaseApplicationError):
    """Raised when a referenced property or thread does not exist."""

    default_error_code: str = "NOT_FOUND"
    http_status: int = 404


class UnauthenticatedError(BaseApplicationError):
    """
    Raised when an operation requires an authenticated session and none exists.

    Authorization failures (authenticated but not allowed) use
    PermissionDeniedError instead.
    """

    default_error_code: str = "UNAUTHENTICATED"
    http_status: int = 401


class PermissionDeniedError(BaseApplicationError):
    """Raised when an authenticated user may not access a thread or viewing."""

    default_error_code: str = "PERMISSION_DENIED"
    http_status: int = 403


class ExternalServiceError(BaseApplicationError):
    """
    Raised when a collaborator outside this process fails.

    Log the original error for debugging but don't expose internal
    details to clients in production.
    """

    default_error_code: str = "EXTERNAL_SERVICE_ERROR"
    http_status: int = 502


class BackendUnavailableError(ExternalServiceError):
    """
    Raised when the database or channel layer cannot serve a request.

    Services raise this from a caught DatabaseError; views answer 503 and
    the WebSocket consumer sends an error frame. Nothing is retried.
    """

    default_error_code: str = "BACKEND_UNAVAILABLE"
    http_status: int = 503


# Error codes shared by ServiceResult failures
NOT_FOUND = NotFoundError.default_error_code
UNAUTHENTICATED = UnauthenticatedError.default_error_code
VALIDATION_ERROR = ValidationError.default_error_code
PERMISSION_DENIED = PermissionDeniedError.default_error_code
BACKEND_UNAVAILABLE = BackendUnavailableError.default_error_code

ERROR_CODE_STATUS = {
    NOT_FOUND: NotFoundError.http_status,
    UNAUTHENTICATED: UnauthenticatedError.http_status,
    VALIDATION_ERROR: ValidationError.http_status,
    PERMISSION_DENIED: PermissionDeniedError.http_status,
    BACKEND_UNAVAILABLE: BackendUnavailableError.http_status,
}


def status_for_error_code(error_code: str | None, default: int = 400) -> int:
    """Map a ServiceResult error code to its HTTP status."""
    return ERROR_CODE_STATUS.get(error_code or "", default)
