"""App settings API: list or read the caller's visible settings, upsert feature toggles."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.v1.dependencies import (
    CurrentUser,
    get_app_setting_repo,
    get_app_setting_repo_for_write,
    get_current_user,
    get_tenant_config_service,
    require_capability,
)
from app.application.services.permission_resolver import resolve_permissions
from app.application.services.tenant_config_service import TenantConfigService
from app.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)
from app.infrastructure.persistence.repositories import AppSettingRepository
from app.schemas.app_setting import AppSettingResponse, AppSettingUpsert

router = APIRouter()


@router.get("", response_model=list[AppSettingResponse])
async def list_app_settings(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[TenantConfigService, Depends(get_tenant_config_service)],
    repo: Annotated[AppSettingRepository, Depends(get_app_setting_repo)],
):
    """List global settings plus the caller's tenant settings."""
    scope = await service.tenant_scope(current_user)
    return await repo.list_for_tenant(scope)


@router.get("/{setting_key}", response_model=AppSettingResponse)
async def get_app_setting(
    setting_key: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[TenantConfigService, Depends(get_tenant_config_service)],
    repo: Annotated[AppSettingRepository, Depends(get_app_setting_repo)],
):
    """Return the effective row for setting_key: the tenant's own row, else the global one."""
    scope = await service.tenant_scope(current_user)
    setting = await repo.get_by_key(scope, setting_key) if scope else None
    if setting is None:
        setting = await repo.get_by_key(None, setting_key)
    if setting is None:
        raise ResourceNotFoundException("app_setting", setting_key)
    return setting


@router.put("/{setting_key}", response_model=AppSettingResponse)
async def upsert_app_setting(
    setting_key: str,
    body: AppSettingUpsert,
    current_user: Annotated[CurrentUser, Depends(require_capability("canManageSettings"))],
    service: Annotated[TenantConfigService, Depends(get_tenant_config_service)],
    repo: Annotated[AppSettingRepository, Depends(get_app_setting_repo_for_write)],
):
    """Create or update a setting for the caller's tenant (or globally).

    Cached settings snapshots are dropped so the next tenant-config read
    sees the new value.
    """
    key = setting_key.strip()
    if not key:
        raise ValidationException("setting_key must not be empty", field="setting_key")
    if body.is_global:
        if not resolve_permissions(current_user).can_manage_tenants:
            raise AuthorizationException("canManageTenants")
        scope = None
    else:
        scope = await service.tenant_scope(current_user)
        if scope is None:
            raise ValidationException(
                "Caller has no tenant; use is_global for global settings",
                field="is_global",
            )
    return await repo.upsert(
        scope,
        key,
        body.setting_value,
        setting_category=body.setting_category,
        description=body.description,
    )
