"""Permission cache implementations and the invalidation helper.

Built once in the application lifespan (build_permission_cache) and kept
on app.state; the resolver and the mutating services receive it through
dependencies instead of reaching for a module global.
"""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.domain.enums import Permission
from app.domain.permissions import parse_permissions
from app.infrastructure.cache.cache_protocol import CacheVersion, PermissionCache
from app.infrastructure.cache.keys import (
    permission_epoch_key,
    permission_key,
    permission_pattern,
    permission_version_key,
)
from app.infrastructure.cache.redis_cache import CacheService
from app.infrastructure.persistence.database import register_after_commit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Entry:
    permissions: frozenset[Permission]
    version: CacheVersion
    stored_at: float


class InMemoryPermissionCache:
    """Process-local cache: dict guarded by an asyncio.Lock, monotonic TTL."""

    def __init__(
        self,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._lock = asyncio.Lock()
        self._entries: dict[str, _Entry] = {}
        self._counters: dict[str, int] = {}
        self._epoch = 0

    def _current(self, user_id: str) -> CacheVersion:
        return (self._epoch, self._counters.get(user_id, 0))

    async def version(self, user_id: str) -> CacheVersion:
        async with self._lock:
            return self._current(user_id)

    async def get(self, user_id: str) -> frozenset[Permission] | None:
        async with self._lock:
            entry = self._entries.get(user_id)
            if entry is None:
                logger.debug("Permission cache MISS: %s", user_id)
                return None
            expired = self._clock() - entry.stored_at >= self._ttl
            if expired or entry.version != self._current(user_id):
                del self._entries[user_id]
                logger.debug("Permission cache STALE: %s", user_id)
                return None
            logger.debug("Permission cache HIT: %s", user_id)
            return entry.permissions

    async def set(
        self, user_id: str, permissions: frozenset[Permission], version: CacheVersion
    ) -> bool:
        async with self._lock:
            if version != self._current(user_id):
                logger.debug("Permission cache write dropped (stale version): %s", user_id)
                return False
            self._entries[user_id] = _Entry(frozenset(permissions), version, self._clock())
            return True

    async def invalidate(self, user_id: str) -> None:
        async with self._lock:
            self._entries.pop(user_id, None)
            self._counters[user_id] = self._counters.get(user_id, 0) + 1
        logger.info("Permission cache invalidated for user %s", user_id)

    async def invalidate_all(self) -> None:
        async with self._lock:
            self._entries.clear()
            self._epoch += 1
        logger.info("Permission cache invalidated for all users")


class RedisPermissionCache:
    """Shared cache on Redis for multi-process deployments.

    Values are {"version": [epoch, counter], "permissions": [...]} with the
    configured TTL. Version counters have no TTL.
    """

    def __init__(self, cache: CacheService, ttl_seconds: int) -> None:
        self._cache = cache
        self._ttl = ttl_seconds

    async def version(self, user_id: str) -> CacheVersion:
        epoch, counter = await self._cache.get_many(
            [permission_epoch_key(), permission_version_key(user_id)]
        )
        return (int(epoch or 0), int(counter or 0))

    async def get(self, user_id: str) -> frozenset[Permission] | None:
        payload = await self._cache.get(permission_key(user_id))
        if not isinstance(payload, dict):
            return None
        if tuple(payload.get("version", ())) != await self.version(user_id):
            return None
        return parse_permissions(payload.get("permissions", []))

    async def set(
        self, user_id: str, permissions: frozenset[Permission], version: CacheVersion
    ) -> bool:
        if await self.version(user_id) != version:
            logger.debug("Permission cache write dropped (stale version): %s", user_id)
            return False
        return await self._cache.set(
            permission_key(user_id),
            {
                "version": list(version),
                "permissions": sorted(p.value for p in permissions),
            },
            ttl=self._ttl,
        )

    async def invalidate(self, user_id: str) -> None:
        bumped = await self._cache.incr(permission_version_key(user_id))
        deleted = await self._cache.delete(permission_key(user_id))
        if bumped is None or not deleted:
            logger.warning(
                "Permission cache invalidation for user %s did not reach Redis; "
                "an entry cached before the outage may be served until its TTL",
                user_id,
            )
            return
        logger.info("Permission cache invalidated for user %s", user_id)

    async def invalidate_all(self) -> None:
        bumped = await self._cache.incr(permission_epoch_key())
        await self._cache.delete_pattern(permission_pattern())
        if bumped is None:
            logger.warning(
                "Permission cache epoch bump did not reach Redis; "
                "entries cached before the outage may be served until their TTL"
            )
            return
        logger.info("Permission cache invalidated for all users")


def build_permission_cache(
    settings: Settings, cache_service: CacheService | None = None
) -> PermissionCache:
    """Choose the cache backend: Redis when enabled and connected, else in-process."""
    if settings.redis_enabled and cache_service is not None and cache_service.is_available():
        return RedisPermissionCache(cache_service, settings.cache_ttl_permissions)
    return InMemoryPermissionCache(settings.cache_ttl_permissions)


class PermissionCacheInvalidator:
    """Invalidates now and again after the surrounding transaction commits.

    The second pass evicts anything a concurrent request computed from the
    pre-commit state between the first invalidation and the commit.
    """

    def __init__(self, cache: PermissionCache, session: AsyncSession | None = None) -> None:
        self._cache = cache
        self._session = session

    async def user(self, user_id: str) -> None:
        await self._cache.invalidate(user_id)
        if self._session is not None:
            register_after_commit(self._session, lambda: self._cache.invalidate(user_id))

    async def all(self) -> None:
        await self._cache.invalidate_all()
        if self._session is not None:
            register_after_commit(self._session, self._cache.invalidate_all)
