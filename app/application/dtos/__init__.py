"""Application DTOs (no ORM dependency)."""

from app.application.dtos.tenant_config import (
    FeatureState,
    Permissions,
    PhaseAccess,
    TenantConfigResult,
    TenantTheme,
    ThemePalette,
)

__all__ = [
    "FeatureState",
    "Permissions",
    "PhaseAccess",
    "TenantConfigResult",
    "TenantTheme",
    "ThemePalette",
]
