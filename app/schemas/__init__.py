"""Pydantic request/response schemas for the API."""

from app.schemas.app_setting import AppSettingResponse, AppSettingUpsert
from app.schemas.health import HealthResponse, ReadinessErrorResponse, ReadinessResponse
from app.schemas.role import RoleResponse
from app.schemas.tenant_config import (
    PageAccessResponse,
    PhaseAccessResponse,
    TenantConfigResponse,
    ThemeResponse,
)

__all__ = [
    "AppSettingResponse",
    "AppSettingUpsert",
    "HealthResponse",
    "PageAccessResponse",
    "PhaseAccessResponse",
    "ReadinessErrorResponse",
    "ReadinessResponse",
    "RoleResponse",
    "TenantConfigResponse",
    "ThemeResponse",
]
