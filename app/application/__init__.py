"""Application layer: interfaces, DTOs and services.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (repositories, cache).
"""

from app.application.interfaces import (
    IAppSettingRepository,
    IPermissionResolver,
    ITenantRepository,
)
from app.application.services.tenant_config_service import TenantConfigService

__all__ = [
    "IAppSettingRepository",
    "IPermissionResolver",
    "ITenantRepository",
    "TenantConfigService",
]
