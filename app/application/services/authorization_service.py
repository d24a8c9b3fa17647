"""Authorization checks behind the request chain (role allow-list, tenant scope, permissions).

Each check is usable on its own; the API layer composes the ones a route
needs after identity has been established.
"""

from __future__ import annotations

from collections.abc import Iterable

from app.application.dtos.user import UserResult
from app.application.interfaces.services import IPermissionResolver
from app.domain.enums import Permission, PrimaryRole
from app.domain.exceptions import AuthorizationException, TenantAccessDeniedException


def check_primary_role(actor: UserResult, allowed: Iterable[PrimaryRole]) -> None:
    """Raise AuthorizationException unless actor's primary role is in allowed."""
    if actor.role not in set(allowed):
        raise AuthorizationException("Insufficient permissions for this action")


def check_tenant_scope(actor: UserResult, company_id: str | None) -> None:
    """Raise TenantAccessDeniedException when a tenant-scoped actor targets another company.

    Super-admins pass unconditionally. A request that implies no company
    passes; routes that require one must validate its presence themselves.
    """
    if actor.is_super_admin or company_id is None:
        return
    if actor.company_id != company_id:
        raise TenantAccessDeniedException()


class AuthorizationService:
    """Fine-grained permission checks against the resolver's effective set."""

    def __init__(self, permission_resolver: IPermissionResolver) -> None:
        self.permission_resolver = permission_resolver

    async def get_user_permissions(self, actor: UserResult) -> frozenset[Permission]:
        return await self.permission_resolver.resolve(actor.id, actor.role)

    async def missing_permissions(
        self, actor: UserResult, required: Iterable[Permission]
    ) -> list[Permission]:
        """Return the tokens of required that actor lacks, in declaration order."""
        effective = await self.get_user_permissions(actor)
        return [p for p in required if p not in effective]

    async def require_permissions(
        self, actor: UserResult, required: Iterable[Permission]
    ) -> None:
        """Raise AuthorizationException listing every missing token."""
        missing = await self.missing_permissions(actor, required)
        if missing:
            raise AuthorizationException(missing=[p.value for p in missing])
