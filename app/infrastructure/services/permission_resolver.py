"""Resolves a user's effective permission set (implements IPermissionResolver).

Effective set = primary-role defaults, plus the permissions of every role
visibly assigned to the user. Results are memoized in the injected
PermissionCache. When the stores cannot be read the resolver answers with
the primary-role defaults and does not cache that answer.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from app.domain.enums import Permission, PrimaryRole
from app.domain.exceptions import DependencyException
from app.domain.permissions import default_permissions, parse_permissions
from app.shared.utils.datetime import utc_now

if TYPE_CHECKING:
    from app.application.interfaces.repositories import IRoleAssignmentRepository
    from app.infrastructure.cache.cache_protocol import PermissionCache

logger = logging.getLogger(__name__)


class PermissionResolver:
    """Merges default and assigned permissions, memoized per user."""

    def __init__(
        self,
        assignments: IRoleAssignmentRepository,
        cache: PermissionCache,
    ) -> None:
        self._assignments = assignments
        self._cache = cache

    async def resolve(
        self, user_id: str, primary_role: PrimaryRole
    ) -> frozenset[Permission]:
        """Return the effective permission set of user_id."""
        cached = await self._cache.get(user_id)
        if cached is not None:
            return cached

        base = default_permissions(primary_role)
        version = await self._cache.version(user_id)
        try:
            granted = await self._assignments.granted_permission_lists(
                user_id, now=utc_now()
            )
        except (SQLAlchemyError, DependencyException):
            logger.warning(
                "Permission lookup failed for user %s; using %s defaults",
                user_id,
                primary_role.value,
                exc_info=True,
            )
            return base

        effective = set(base)
        for permissions in granted:
            effective |= parse_permissions(permissions)
        result = frozenset(effective)
        await self._cache.set(user_id, result, version)
        return result
