"""Tenant configuration assembly: tenant row + app settings + user -> TenantConfigResult.

Loads the user's tenant (by numeric id or by tenant code) and the app
settings visible to it, runs the feature-flag merge, applies per-user
feature overrides and phase gating, and derives theme, permissions and
phase access. Tenant and settings snapshots are cached with a TTL by the
repositories and dropped explicitly by refresh().
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from app.application.dtos.tenant_config import TenantConfigResult
from app.application.interfaces.repositories import IAppSettingRepository, ITenantRepository
from app.application.interfaces.services import IPermissionResolver
from app.application.services.feature_flags import (
    apply_feature_overrides,
    derive_feature_state,
    limit_features_by_phase,
)
from app.application.services.permission_resolver import PermissionResolver
from app.application.services.phase_access import (
    phase_exempt_features,
    resolve_gating_phase,
    resolve_module_phase_limit,
    resolve_phase_access,
)
from app.application.services.theme_service import derive_tenant_theme, normalize_hex

logger = logging.getLogger(__name__)

DEFAULT_TENANT_CONFIG: Mapping[str, Any] = MappingProxyType(
    {
        "name": "Default Tenant",
        "display_name": "Default Tenant",
        "region": "Global",
        "branding_primary_color": "#007A6E",
        "branding_secondary_color": "#005247",
    }
)

_INTEGER_RE = re.compile(r"^[+-]?\d+$")

# Tenant columns only callers with canManageTenants may see
SECRET_TENANT_FIELDS = frozenset({"api_keys_json"})


def resolve_tenant_key(tenant_id: Any) -> int | str | None:
    """Return an int for integer-like ids, the trimmed string for codes, None when empty."""
    if tenant_id is None or isinstance(tenant_id, bool):
        return None
    if isinstance(tenant_id, int):
        return tenant_id
    if isinstance(tenant_id, float):
        return int(tenant_id) if tenant_id.is_integer() else str(tenant_id)
    text = str(tenant_id).strip()
    if not text:
        return None
    if _INTEGER_RE.match(text):
        return int(text)
    return text


def _raw_features(tenant: Mapping[str, Any] | None) -> Any:
    """Tenant features come from 'features' when present, else the features_json column."""
    if not tenant:
        return None
    if "features" in tenant:
        return tenant["features"]
    return tenant.get("features_json")


class TenantConfigService:
    """Resolves the tenant configuration for one user.

    Snapshot caching (TTL and invalidation) lives in the repositories; this
    service only combines what they return.
    """

    def __init__(
        self,
        tenant_repo: ITenantRepository,
        app_setting_repo: IAppSettingRepository,
        *,
        default_config: Mapping[str, Any] = DEFAULT_TENANT_CONFIG,
        permission_resolver: IPermissionResolver | None = None,
    ) -> None:
        self.tenant_repo = tenant_repo
        self.app_setting_repo = app_setting_repo
        self.default_config = default_config
        self.permission_resolver = permission_resolver or PermissionResolver()

    async def _load_tenant(
        self, user: Mapping[str, Any] | None
    ) -> tuple[int | str | None, dict[str, Any] | None, str | None]:
        key = resolve_tenant_key(user.get("tenant_id") if user else None)
        tenant = await self.tenant_repo.get_snapshot(key) if key is not None else None
        if key is not None and tenant is None:
            logger.warning("Tenant %r not found; using default tenant configuration", key)
        scope = (tenant or {}).get("tenant_id") or (key if isinstance(key, str) else None)
        return key, tenant, scope

    async def tenant_scope(self, user: Mapping[str, Any] | None) -> str | None:
        """Return the tenant code that scopes the user's app settings (None = global only)."""
        _, _, scope = await self._load_tenant(user)
        return scope

    async def resolve(self, user: Mapping[str, Any] | None) -> TenantConfigResult:
        """Build the full configuration for user (None gives the anonymous defaults)."""
        key, tenant, scope = await self._load_tenant(user)
        app_settings = await self.app_setting_repo.list_snapshot(scope)

        state = derive_feature_state(_raw_features(tenant), app_settings)
        overrides = user.get("feature_overrides") if user else None
        merged = apply_feature_overrides(state.merged_features, overrides)
        flags = apply_feature_overrides(state.feature_flags, overrides)

        phase_access = resolve_phase_access(user)
        gating_phase = resolve_gating_phase(user, phase_access)
        if gating_phase is not None:
            exempt = phase_exempt_features(user)
            merged = limit_features_by_phase(merged, gating_phase, exempt)
            flags = limit_features_by_phase(flags, gating_phase, exempt)

        base = tenant if tenant is not None else self.default_config
        primary = normalize_hex(
            base.get("branding_primary_color"),
            self.default_config["branding_primary_color"],
        )
        secondary = normalize_hex(
            base.get("branding_secondary_color"),
            self.default_config["branding_secondary_color"],
        )
        permissions = self.permission_resolver.resolve(user)
        tenant_config = {
            **self.default_config,
            **base,
            "branding_primary_color": primary,
            "branding_secondary_color": secondary,
            "features": merged,
        }
        if not permissions.can_manage_tenants:
            for field in SECRET_TENANT_FIELDS:
                tenant_config.pop(field, None)

        return TenantConfigResult(
            tenant_config=tenant_config,
            feature_flags=flags,
            permissions=permissions,
            theme=derive_tenant_theme(primary, secondary),
            phase_access=phase_access,
            module_phase_limit=resolve_module_phase_limit(user, phase_access),
            user=dict(user) if user else None,
            tenant_key=key,
        )

    async def refresh(self, key: int | str | None = None) -> None:
        """Drop the cached tenant snapshot for key and every app-settings snapshot."""
        if key is not None:
            await self.tenant_repo.invalidate(key)
        await self.app_setting_repo.invalidate_all()
        logger.info("Tenant configuration cache refreshed (tenant=%r)", key)
