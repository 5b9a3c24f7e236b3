"""Tests for cache key builders and CacheService behaviour against a mocked Redis client."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
import redis.asyncio as redis

from app.infrastructure.cache.keys import app_settings_key, app_settings_pattern, tenant_key
from app.infrastructure.cache.redis_cache import CacheService


def test_tenant_key_forms() -> None:
    assert tenant_key(1) == "tenant:id:1"
    assert tenant_key("TNT-002") == "tenant:code:TNT-002"


def test_app_settings_key_scopes() -> None:
    assert app_settings_key("TNT-002") == "appsettings:TNT-002"
    assert app_settings_key(None) == "appsettings:global"
    assert app_settings_pattern() == "appsettings:*"


def test_key_component_must_not_contain_separator() -> None:
    with pytest.raises(ValueError):
        tenant_key("evil:code")
    with pytest.raises(ValueError):
        app_settings_key("a:b")


@pytest.fixture
def redis_client() -> MagicMock:
    client = MagicMock()
    client.get = AsyncMock(return_value=None)
    client.setex = AsyncMock(return_value=True)
    client.delete = AsyncMock(return_value=1)
    client.unlink = AsyncMock(return_value=2)
    client.aclose = AsyncMock()
    return client


@pytest.fixture
def cache(redis_client: MagicMock, settings) -> CacheService:
    return CacheService(redis_client=redis_client, settings=settings)


async def test_get_decodes_json(cache: CacheService, redis_client: MagicMock) -> None:
    redis_client.get.return_value = json.dumps({"id": 1})
    assert await cache.get("tenant:id:1") == {"id": 1}


async def test_get_miss_returns_none(cache: CacheService) -> None:
    assert await cache.get("tenant:id:1") is None


async def test_set_uses_ttl(cache: CacheService, redis_client: MagicMock) -> None:
    assert await cache.set("appsettings:global", [{"setting_key": "x"}], ttl=30) is True
    redis_client.setex.assert_awaited_once_with(
        "appsettings:global", 30, json.dumps([{"setting_key": "x"}])
    )


async def test_redis_error_degrades_to_miss(cache: CacheService, redis_client: MagicMock) -> None:
    redis_client.get.side_effect = redis.ResponseError("WRONGTYPE")
    assert await cache.get("tenant:id:1") is None


async def test_delete_pattern_unlinks_matches(cache: CacheService, redis_client: MagicMock) -> None:
    async def scan_iter(match: str):
        for key in ("appsettings:global", "appsettings:TNT-002"):
            yield key

    redis_client.scan_iter = scan_iter
    assert await cache.delete_pattern("appsettings:*") == 2
    redis_client.unlink.assert_awaited_once_with("appsettings:global", "appsettings:TNT-002")


async def test_disabled_cache_is_unavailable(settings) -> None:
    cache = CacheService(settings=settings)
    await cache.connect()
    assert cache.is_available() is False
    assert await cache.get("k") is None
    assert await cache.set("k", 1) is False
    assert await cache.delete_pattern("k*") == 0


async def test_disconnect_closes_client(cache: CacheService, redis_client: MagicMock) -> None:
    await cache.disconnect()
    redis_client.aclose.assert_awaited_once()
    assert cache.is_available() is False
