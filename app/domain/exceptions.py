"""Domain exceptions for the dashboard service.

Defines domain-level exceptions independent of infrastructure concerns.
The presentation layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class DashboardException(Exception):
    """Base exception for all dashboard application errors.

    All custom exceptions inherit from this class so handlers can map
    them consistently using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON error responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(DashboardException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ResourceNotFoundException(DashboardException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'program').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class AggregationException(DashboardException):
    """Raised when a metrics snapshot cannot be computed at all.

    Carries a generic message only; the original cause is chained
    (``raise ... from``) and logged where it is caught.
    """

    def __init__(self, message: str, family: str | None = None) -> None:
        details = {"family": family} if family else {}
        super().__init__(message, "AGGREGATION_ERROR", details)


class StoreOperationException(DashboardException):
    """Raised when a write or lookup against the document store fails."""

    def __init__(self, message: str, collection: str | None = None) -> None:
        details = {"collection": collection} if collection else {}
        super().__init__(message, "STORE_ERROR", details)


class StoreNotConfiguredException(DashboardException):
    """Raised when an operation needs the document store but it is not configured."""

    def __init__(self) -> None:
        super().__init__(
            message="The document store is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
