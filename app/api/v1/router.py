"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from app.api.v1.dependencies (no manual repo/service construction).
"""

from fastapi import APIRouter

from app.api.v1.endpoints import app_settings, health, pages, roles, tenant_config

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(
    tenant_config.router, prefix="/tenant-config", tags=["tenant-config"]
)
api_router.include_router(pages.router, prefix="/pages", tags=["pages"])
api_router.include_router(
    app_settings.router, prefix="/app-settings", tags=["app-settings"]
)
api_router.include_router(roles.router, prefix="/roles", tags=["roles"])
