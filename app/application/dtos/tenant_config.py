"""DTOs for tenant configuration resolution (no dependency on ORM)."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ThemePalette:
    """Palette resolved from an optional theme override object."""

    primary_color: str
    secondary_color: str
    glow: str
    gradient: str
    hero_text_color: str


@dataclass(frozen=True)
class TenantTheme:
    """Theme derived from tenant brand colors (exposed as CSS variables)."""

    primary_color: str
    secondary_color: str
    primary_hsl: str | None
    secondary_hsl: str | None
    gradient: str
    glow: str
    hero_text_color: str


@dataclass(frozen=True)
class Permissions:
    """Capability flags for a resolved role."""

    role: str
    can_manage_users: bool = False
    can_view_financials: bool = False
    can_approve_orders: bool = False
    can_export_data: bool = False
    can_manage_settings: bool = False
    can_delete_shipments: bool = False
    can_manage_tenants: bool = False
    can_configure_phases: bool = False

    def capabilities(self) -> dict[str, bool]:
        """Return the eight capability flags keyed by their client-facing names."""
        return {
            "canManageUsers": self.can_manage_users,
            "canViewFinancials": self.can_view_financials,
            "canApproveOrders": self.can_approve_orders,
            "canExportData": self.can_export_data,
            "canManageSettings": self.can_manage_settings,
            "canDeleteShipments": self.can_delete_shipments,
            "canManageTenants": self.can_manage_tenants,
            "canConfigurePhases": self.can_configure_phases,
        }


@dataclass(frozen=True)
class FeatureState:
    """Result of the feature-flag merge.

    merged_features keeps every merged value (including non-boolean tenant
    values); feature_flags is the boolean-only subset.
    """

    merged_features: dict[str, Any]
    feature_flags: dict[str, bool]


@dataclass(frozen=True)
class PhaseAccess:
    """Phase ceiling for a user. max_phase is math.inf when unrestricted."""

    max_phase: float = math.inf
    label: str | None = None
    is_restricted: bool = False


@dataclass(frozen=True)
class TenantConfigResult:
    """Everything page and route-guard collaborators consume for one user.

    feature_flags is the boolean flag set with the user's feature_overrides
    laid over it as given.
    """

    tenant_config: dict[str, Any]
    feature_flags: dict[str, Any]
    permissions: Permissions
    theme: TenantTheme
    phase_access: PhaseAccess
    module_phase_limit: float
    user: dict[str, Any] | None = None
    tenant_key: int | str | None = None
