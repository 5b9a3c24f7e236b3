"""Tenant repository with optional snapshot caching (numeric id or tenant code)."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.cache.cache_protocol import CacheProtocol
from app.infrastructure.cache.keys import tenant_key
from app.infrastructure.persistence.models.tenant import Tenant
from app.infrastructure.persistence.repositories.base import BaseRepository, to_snapshot


class TenantRepository(BaseRepository[Tenant]):
    """Tenant repository. Optional cache (inject cache_ttl). Snapshots are plain dicts."""

    def __init__(
        self,
        db: AsyncSession,
        cache_service: CacheProtocol | None = None,
        *,
        cache_ttl: int = 60,
    ) -> None:
        super().__init__(db, Tenant)
        self.cache = cache_service
        self.cache_ttl = cache_ttl

    def _cache_available(self) -> bool:
        return self.cache is not None and self.cache.is_available()

    async def get_by_tenant_code(self, code: str) -> Tenant | None:
        """Return the first tenant whose tenant_id (TNT-###) equals code."""
        result = await self.db.execute(
            select(Tenant).where(Tenant.tenant_id == code).order_by(Tenant.id).limit(1)
        )
        return result.scalar_one_or_none()

    async def get_snapshot(self, key: int | str) -> dict[str, Any] | None:
        """Return the tenant row as a dict, by numeric id or by tenant code.

        Served from cache when available; misses are not cached.
        """
        cache_key = tenant_key(key)
        if self._cache_available():
            cached = await self.cache.get(cache_key)
            if cached is not None:
                return cached
        if isinstance(key, int):
            tenant = await self.get_by_id(key)
        else:
            tenant = await self.get_by_tenant_code(key)
        if tenant is None:
            return None
        snapshot = to_snapshot(tenant)
        if self._cache_available():
            await self.cache.set(cache_key, snapshot, ttl=self.cache_ttl)
        return snapshot

    async def invalidate(self, key: int | str) -> None:
        """Drop the cached snapshot stored under key."""
        if self._cache_available():
            await self.cache.delete(tenant_key(key))

    async def _on_after_update(self, obj: Tenant) -> None:
        await super()._on_after_update(obj)
        await self.invalidate(obj.id)
        if obj.tenant_id:
            await self.invalidate(obj.tenant_id)
