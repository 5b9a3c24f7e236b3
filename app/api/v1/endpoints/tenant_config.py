"""Tenant configuration API: resolved config for the bearer user, cache refresh."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from app.api.v1.dependencies import (
    CurrentUser,
    get_current_user,
    get_tenant_config_service,
)
from app.application.services.tenant_config_service import (
    TenantConfigService,
    resolve_tenant_key,
)
from app.schemas.tenant_config import TenantConfigResponse

router = APIRouter()


@router.get("", response_model=TenantConfigResponse)
async def get_tenant_config(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[TenantConfigService, Depends(get_tenant_config_service)],
) -> TenantConfigResponse:
    """Return tenant config, feature flags, permissions, theme and phase access."""
    result = await service.resolve(current_user)
    return TenantConfigResponse.from_result(result)


@router.post("/refresh", status_code=204)
async def refresh_tenant_config(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[TenantConfigService, Depends(get_tenant_config_service)],
) -> Response:
    """Drop the cached tenant and settings snapshots for the caller's tenant."""
    await service.refresh(resolve_tenant_key(current_user.get("tenant_id")))
    return Response(status_code=204)
