"""Cache: Redis snapshot service and cache key builders."""

from app.infrastructure.cache.cache_protocol import CacheProtocol
from app.infrastructure.cache.keys import (
    app_settings_key,
    app_settings_pattern,
    tenant_key,
)
from app.infrastructure.cache.redis_cache import CacheService

__all__ = [
    "CacheProtocol",
    "CacheService",
    "app_settings_key",
    "app_settings_pattern",
    "tenant_key",
]
