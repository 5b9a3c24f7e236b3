"""Application services: theme, phase access, permissions, feature flags, tenant config."""

from app.application.services.permission_resolver import (
    PermissionResolver,
    get_role_color,
    get_role_display_name,
    resolve_permissions,
)
from app.application.services.phase_access import (
    PAGE_PHASE_REQUIREMENTS,
    can_access_page,
    get_page_phase_requirement,
)
from app.application.services.tenant_config_service import (
    DEFAULT_TENANT_CONFIG,
    TenantConfigService,
    resolve_tenant_key,
)
from app.application.services.theme_service import (
    DEFAULT_THEME_COLORS,
    get_theme_palette,
    with_alpha,
)

__all__ = [
    "DEFAULT_TENANT_CONFIG",
    "DEFAULT_THEME_COLORS",
    "PAGE_PHASE_REQUIREMENTS",
    "PermissionResolver",
    "TenantConfigService",
    "can_access_page",
    "get_page_phase_requirement",
    "get_role_color",
    "get_role_display_name",
    "get_theme_palette",
    "resolve_permissions",
    "resolve_tenant_key",
    "with_alpha",
]
