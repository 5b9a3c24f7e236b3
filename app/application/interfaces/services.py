"""Service interfaces (ports) for the application layer."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.application.dtos.tenant_config import Permissions


class IPermissionResolver(Protocol):
    """Protocol for role to capability resolution."""

    def resolve(self, user: Mapping[str, Any] | None) -> Permissions:
        """Return the capability set for user (None for anonymous)."""
