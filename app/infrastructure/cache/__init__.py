"""Cache: Redis service, permission cache backends and key builders."""

from app.infrastructure.cache.cache_protocol import CacheVersion, PermissionCache
from app.infrastructure.cache.keys import (
    permission_epoch_key,
    permission_key,
    permission_pattern,
    permission_version_key,
)
from app.infrastructure.cache.permission_cache import (
    InMemoryPermissionCache,
    PermissionCacheInvalidator,
    RedisPermissionCache,
    build_permission_cache,
)
from app.infrastructure.cache.redis_cache import CacheService

__all__ = [
    "CacheService",
    "CacheVersion",
    "InMemoryPermissionCache",
    "PermissionCache",
    "PermissionCacheInvalidator",
    "RedisPermissionCache",
    "build_permission_cache",
    "permission_epoch_key",
    "permission_key",
    "permission_pattern",
    "permission_version_key",
]
