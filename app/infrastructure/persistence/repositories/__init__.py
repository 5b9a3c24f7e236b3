"""Persistence repositories. Re-exports for dependency injection."""

from app.infrastructure.persistence.repositories.app_setting_repo import (
    AppSettingRepository,
)
from app.infrastructure.persistence.repositories.base import BaseRepository, to_snapshot
from app.infrastructure.persistence.repositories.tenant_repo import TenantRepository
from app.infrastructure.persistence.repositories.user_repo import UserRepository

__all__ = [
    "AppSettingRepository",
    "BaseRepository",
    "TenantRepository",
    "UserRepository",
    "to_snapshot",
]
