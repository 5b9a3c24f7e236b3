"""Domain exceptions for the RecIMS application.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class RecimsException(Exception):
    """Base exception for all RecIMS application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

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
        """Return the JSON body rendered by the exception handlers."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(RecimsException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(RecimsException):
    """Raised when authentication fails (e.g. invalid credentials or token)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        """Initialize with optional message.

        Args:
            message: Description of the authentication failure.
        """
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(RecimsException):
    """Raised when the user's role lacks the capability required for the operation."""

    def __init__(
        self,
        capability: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        """Initialize with optional capability name and message.

        Args:
            capability: Capability flag that was required (e.g. 'canManageSettings').
            message: Human-readable message; default used when capability omitted.
        """
        details: dict[str, Any] = {}
        if capability:
            message = f"Permission denied: {capability} required"
            details["capability"] = capability
        super().__init__(message, "PERMISSION_DENIED", details)


class PageAccessDeniedException(RecimsException):
    """Raised when a page requires a higher phase than the user's limit."""

    def __init__(self, page_name: str, required_phase: int, max_phase: float) -> None:
        super().__init__(
            f"Page {page_name} requires phase {required_phase}",
            "PAGE_ACCESS_DENIED",
            {
                "page_name": page_name,
                "required_phase": required_phase,
                "max_phase": max_phase,
            },
        )


class ResourceNotFoundException(RecimsException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'user', 'app_setting').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class BootstrapException(RecimsException):
    """Raised when the startup schema evolution or seeding fails. Aborts startup."""

    def __init__(self, step: str, reason: str) -> None:
        """Initialize with the failing step and the underlying reason.

        Args:
            step: Bootstrap step (e.g. 'add_column:tenants.region').
            reason: Text of the underlying database error.
        """
        super().__init__(
            f"Database bootstrap failed at {step}: {reason}",
            "BOOTSTRAP_ERROR",
            {"step": step},
        )
