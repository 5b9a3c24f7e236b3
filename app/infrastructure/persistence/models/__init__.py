"""Persistence models: ORM entities and mixins."""

from app.infrastructure.persistence.models.app_setting import AppSetting
from app.infrastructure.persistence.models.mixins import (
    AuditDateMixin,
    IntegerIdMixin,
    TimestampMixin,
)
from app.infrastructure.persistence.models.tenant import Tenant
from app.infrastructure.persistence.models.user import User

__all__ = [
    "AppSetting",
    "AuditDateMixin",
    "IntegerIdMixin",
    "Tenant",
    "TimestampMixin",
    "User",
]
