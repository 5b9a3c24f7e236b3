"""AppSetting repository: tenant-visible listing, keyed upsert, snapshot caching."""

from __future__ import annotations

from typing import Any

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.cache.cache_protocol import CacheProtocol
from app.infrastructure.cache.keys import app_settings_key, app_settings_pattern
from app.infrastructure.persistence.database import run_after_commit
from app.infrastructure.persistence.models.app_setting import AppSetting
from app.infrastructure.persistence.repositories.base import BaseRepository


def _setting_to_dict(setting: AppSetting) -> dict[str, Any]:
    return {
        "tenant_id": setting.tenant_id,
        "setting_key": setting.setting_key,
        "setting_value": setting.setting_value,
    }


class AppSettingRepository(BaseRepository[AppSetting]):
    """Settings rows are scoped by tenant code; tenant_id NULL rows are global.

    Any write drops every cached snapshot, since a global row is visible to
    all tenants.
    """

    def __init__(
        self,
        db: AsyncSession,
        cache_service: CacheProtocol | None = None,
        *,
        cache_ttl: int = 30,
    ) -> None:
        super().__init__(db, AppSetting)
        self.cache = cache_service
        self.cache_ttl = cache_ttl

    def _cache_available(self) -> bool:
        return self.cache is not None and self.cache.is_available()

    async def list_for_tenant(self, tenant_code: str | None) -> list[AppSetting]:
        """Return the tenant's rows plus global rows, ordered by key then id.

        Global rows come first for a shared key so tenant rows win when the
        list is folded into a dict.
        """
        scope = AppSetting.tenant_id.is_(None)
        if tenant_code:
            scope = or_(AppSetting.tenant_id == tenant_code, scope)
        result = await self.db.execute(
            select(AppSetting)
            .where(scope)
            .order_by(
                AppSetting.setting_key,
                AppSetting.tenant_id.is_not(None),
                AppSetting.id,
            )
        )
        return list(result.scalars().all())

    async def list_snapshot(self, tenant_code: str | None) -> list[dict[str, Any]]:
        """list_for_tenant() as plain dicts, served from cache when available."""
        cache_key = app_settings_key(tenant_code)
        if self._cache_available():
            cached = await self.cache.get(cache_key)
            if cached is not None:
                return cached
        snapshot = [_setting_to_dict(s) for s in await self.list_for_tenant(tenant_code)]
        if self._cache_available():
            await self.cache.set(cache_key, snapshot, ttl=self.cache_ttl)
        return snapshot

    async def get_by_key(self, tenant_code: str | None, setting_key: str) -> AppSetting | None:
        """Return the row for (tenant_code, setting_key); tenant_code None means global."""
        tenant_clause = (
            AppSetting.tenant_id == tenant_code
            if tenant_code
            else AppSetting.tenant_id.is_(None)
        )
        result = await self.db.execute(
            select(AppSetting)
            .where(tenant_clause, AppSetting.setting_key == setting_key)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def upsert(
        self,
        tenant_code: str | None,
        setting_key: str,
        setting_value: str,
        *,
        setting_category: str | None = None,
        description: str | None = None,
    ) -> AppSetting:
        """Create or update the (tenant_code, setting_key) row."""
        existing = await self.get_by_key(tenant_code, setting_key)
        if existing is None:
            return await self.create(
                AppSetting(
                    tenant_id=tenant_code,
                    setting_key=setting_key,
                    setting_value=setting_value,
                    setting_category=setting_category or "features",
                    description=description,
                )
            )
        existing.setting_value = setting_value
        if setting_category is not None:
            existing.setting_category = setting_category
        if description is not None:
            existing.description = description
        return await self.update(existing)

    async def invalidate_all(self) -> None:
        """Drop every cached settings snapshot."""
        if self._cache_available():
            await self.cache.delete_pattern(app_settings_pattern())

    async def _on_after_create(self, obj: AppSetting) -> None:
        await super()._on_after_create(obj)
        await self._invalidate_on_write()

    async def _on_after_update(self, obj: AppSetting) -> None:
        await super()._on_after_update(obj)
        await self._invalidate_on_write()

    async def _invalidate_on_write(self) -> None:
        # Dropped again once get_db_transactional has committed.
        await self.invalidate_all()
        run_after_commit(self.db, self.invalidate_all)
