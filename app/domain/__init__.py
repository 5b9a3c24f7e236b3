"""Domain layer: enums and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.enums import AccountRole, DetailedRole, TenantStatus
from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    BootstrapException,
    PageAccessDeniedException,
    RecimsException,
    ResourceNotFoundException,
    ValidationException,
)

__all__ = [
    # Enums
    "AccountRole",
    "DetailedRole",
    "TenantStatus",
    # Exceptions
    "AuthenticationException",
    "AuthorizationException",
    "BootstrapException",
    "PageAccessDeniedException",
    "RecimsException",
    "ResourceNotFoundException",
    "ValidationException",
]
