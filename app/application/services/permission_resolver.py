"""Role to capability resolution, plus role display metadata.

Six known detailed roles map to fixed capability sets. A missing user resolves
to role 'none'; a present user with an unknown role resolves to
'warehouse_staff'. Both get no capabilities.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from app.application.dtos.tenant_config import Permissions
from app.domain.enums import DetailedRole

NO_USER_ROLE = "none"
DEFAULT_ROLE = DetailedRole.WAREHOUSE_STAFF.value

# Order: manage_users, view_financials, approve_orders, export_data,
# manage_settings, delete_shipments, manage_tenants, configure_phases.
ROLE_CAPABILITIES: dict[str, tuple[bool, ...]] = {
    DetailedRole.SUPERADMIN.value: (True, True, True, True, True, True, True, True),
    DetailedRole.ADMIN.value: (True, True, True, True, True, True, False, False),
    DetailedRole.MANAGER.value: (False, True, True, True, False, True, False, False),
    DetailedRole.WAREHOUSE_STAFF.value: (False,) * 8,
    DetailedRole.SALES_REPRESENTATIVE.value: (
        False, True, False, True, False, False, False, False,
    ),
    DetailedRole.QUALITY_CONTROL.value: (
        False, False, False, True, False, False, False, False,
    ),
}

ROLE_DISPLAY_NAMES: dict[str, str] = {
    DetailedRole.SUPERADMIN.value: "Super Administrator",
    DetailedRole.ADMIN.value: "Administrator",
    DetailedRole.MANAGER.value: "Manager",
    DetailedRole.WAREHOUSE_STAFF.value: "Warehouse Staff",
    DetailedRole.SALES_REPRESENTATIVE.value: "Sales Representative",
    DetailedRole.QUALITY_CONTROL.value: "Quality Control",
}

ROLE_COLORS: dict[str, str] = {
    DetailedRole.SUPERADMIN.value: "bg-red-100 text-red-700 border-red-300",
    DetailedRole.ADMIN.value: "bg-purple-100 text-purple-700 border-purple-300",
    DetailedRole.MANAGER.value: "bg-blue-100 text-blue-700 border-blue-300",
    DetailedRole.WAREHOUSE_STAFF.value: "bg-green-100 text-green-700 border-green-300",
    DetailedRole.SALES_REPRESENTATIVE.value: "bg-orange-100 text-orange-700 border-orange-300",
    DetailedRole.QUALITY_CONTROL.value: "bg-yellow-100 text-yellow-700 border-yellow-300",
}
DEFAULT_ROLE_COLOR = "bg-gray-100 text-gray-700 border-gray-300"


def _build(role: str, flags: tuple[bool, ...]) -> Permissions:
    (
        manage_users,
        view_financials,
        approve_orders,
        export_data,
        manage_settings,
        delete_shipments,
        manage_tenants,
        configure_phases,
    ) = flags
    return Permissions(
        role=role,
        can_manage_users=manage_users,
        can_view_financials=view_financials,
        can_approve_orders=approve_orders,
        can_export_data=export_data,
        can_manage_settings=manage_settings,
        can_delete_shipments=delete_shipments,
        can_manage_tenants=manage_tenants,
        can_configure_phases=configure_phases,
    )


def resolve_permissions(user: Mapping[str, Any] | None) -> Permissions:
    """Resolve capabilities from detailed_role, then role, then warehouse_staff."""
    if user is None:
        return Permissions(role=NO_USER_ROLE)
    role = user.get("detailed_role") or user.get("role") or DEFAULT_ROLE
    flags = ROLE_CAPABILITIES.get(role)
    if flags is None:
        return Permissions(role=DEFAULT_ROLE)
    return _build(role, flags)


class PermissionResolver:
    """Memoizes resolve_permissions on the identity of the last user object."""

    _UNSET = object()

    def __init__(self) -> None:
        self._last_user: Any = self._UNSET
        self._last_result: Permissions | None = None

    def resolve(self, user: Mapping[str, Any] | None) -> Permissions:
        if user is self._last_user and self._last_result is not None:
            return self._last_result
        self._last_user = user
        self._last_result = resolve_permissions(user)
        return self._last_result


def get_role_display_name(role: str | None) -> str:
    return ROLE_DISPLAY_NAMES.get(role or "", ROLE_DISPLAY_NAMES[DEFAULT_ROLE])


def get_role_color(role: str | None) -> str:
    return ROLE_COLORS.get(role or "", DEFAULT_ROLE_COLOR)
