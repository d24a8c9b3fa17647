"""Permission cache protocol.

The resolver memoizes each user's effective permission set here. Entries
carry the version that was current when the computation started; a write
whose version is no longer current is dropped, and a read only hits when
the stored version is still current. Any invalidation bumps the version.
"""

from typing import Protocol

from app.domain.enums import Permission

CacheVersion = tuple[int, int]
"""(global epoch, per-user counter)."""


class PermissionCache(Protocol):
    """Owned, injectable cache of effective permission sets keyed by user id."""

    async def get(self, user_id: str) -> frozenset[Permission] | None:
        """Return the memoized set if present, unexpired and current; else None."""
        ...

    async def version(self, user_id: str) -> CacheVersion:
        """Return the current version for user_id (read before recomputing)."""
        ...

    async def set(
        self, user_id: str, permissions: frozenset[Permission], version: CacheVersion
    ) -> bool:
        """Store permissions computed under version. Returns False if version is stale."""
        ...

    async def invalidate(self, user_id: str) -> None:
        """Drop user_id's entry and bump its version."""
        ...

    async def invalidate_all(self) -> None:
        """Drop every entry and bump the global epoch."""
        ...
