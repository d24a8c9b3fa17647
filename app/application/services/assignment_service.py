"""Assignment store operations: grant, replace, revoke and list role assignments.

Revoking keeps the row (is_active false) for history. Every mutation evicts
the target user's cached permission set.
"""

from __future__ import annotations

import logging
from datetime import datetime

from app.application.dtos.assignment import AssignmentResult
from app.application.dtos.role import RoleResult
from app.application.dtos.user import UserResult
from app.application.interfaces.repositories import (
    IRoleAssignmentRepository,
    IRoleRepository,
    IUserRepository,
)
from app.application.interfaces.services import IPermissionInvalidator
from app.domain.exceptions import (
    AuthorizationException,
    DuplicateAssignmentException,
    ResourceNotFoundException,
    TenantAccessDeniedException,
    ValidationException,
)
from app.shared.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)


class AssignmentService:
    """Role assignments on behalf of an admin or super-admin actor."""

    def __init__(
        self,
        user_repo: IUserRepository,
        role_repo: IRoleRepository,
        assignment_repo: IRoleAssignmentRepository,
        invalidator: IPermissionInvalidator,
    ) -> None:
        self._user_repo = user_repo
        self._role_repo = role_repo
        self._assignment_repo = assignment_repo
        self._invalidator = invalidator

    async def _target_user(self, actor: UserResult, user_id: str, message: str) -> UserResult:
        user = await self._user_repo.get_by_id(user_id)
        if user is None:
            raise ResourceNotFoundException("user", user_id)
        if not actor.is_super_admin and user.company_id != actor.company_id:
            raise TenantAccessDeniedException(message)
        return user

    @staticmethod
    def _check_assignable(actor: UserResult, user: UserResult, role: RoleResult) -> None:
        if actor.is_super_admin:
            return
        if role.is_system:
            raise AuthorizationException(f"Cannot assign system role: {role.display_name}")
        if role.company_id != user.company_id or role.company_id != actor.company_id:
            raise TenantAccessDeniedException(
                f"Cannot assign role from other company: {role.display_name}"
            )

    async def assign(
        self,
        actor: UserResult,
        user_id: str,
        role_id: str,
        expires_at: datetime | None = None,
    ) -> AssignmentResult:
        """Grant role_id to user_id.

        An already-expired but still flagged row for the same pair is retired
        first so the one-active-row rule holds.

        Raises:
            ResourceNotFoundException: User or role missing.
            TenantAccessDeniedException: Cross-company user or role for a tenant admin.
            AuthorizationException: Tenant admin assigning a system role.
            DuplicateAssignmentException: The pair is already visibly assigned.
        """
        user = await self._target_user(
            actor, user_id, "Cannot assign roles to users from other companies"
        )
        role = await self._role_repo.get_by_id(role_id)
        if role is None:
            raise ResourceNotFoundException("role", role_id)
        self._check_assignable(actor, user, role)

        now = utc_now()
        if await self._assignment_repo.get_visible(user_id, role_id, now) is not None:
            raise DuplicateAssignmentException(user_id, role_id)
        await self._assignment_repo.deactivate_pair(user_id, role_id)
        created = await self._assignment_repo.create_assignment(
            user_id=user_id,
            role_id=role_id,
            assigned_by=actor.id,
            expires_at=ensure_utc(expires_at),
            assigned_at=now,
        )
        await self._invalidator.user(user_id)
        logger.info("Role %s assigned to user %s by %s", role_id, user_id, actor.id)
        return created

    async def assign_many(
        self,
        actor: UserResult,
        user_id: str,
        role_ids: list[str],
        expires_at: datetime | None = None,
    ) -> list[AssignmentResult]:
        """Replace every active assignment of user_id with role_ids.

        All checks run before anything is written; the caller's transaction
        makes the replacement atomic.
        """
        unique_ids = list(dict.fromkeys(role_ids))
        if not unique_ids:
            raise ValidationException("At least one role ID is required", field="role_ids")
        user = await self._target_user(
            actor, user_id, "Cannot assign roles to users from other companies"
        )
        roles = await self._role_repo.get_by_ids(unique_ids)
        found = {r.id for r in roles}
        missing = [rid for rid in unique_ids if rid not in found]
        if missing:
            raise ResourceNotFoundException("role", ", ".join(missing))
        for role in roles:
            self._check_assignable(actor, user, role)

        now = utc_now()
        retired = await self._assignment_repo.deactivate_all_for_user(user_id)
        created = [
            await self._assignment_repo.create_assignment(
                user_id=user_id,
                role_id=rid,
                assigned_by=actor.id,
                expires_at=ensure_utc(expires_at),
                assigned_at=now,
            )
            for rid in unique_ids
        ]
        await self._invalidator.user(user_id)
        logger.info(
            "Assignments of user %s replaced by %s (%d retired, %d granted)",
            user_id,
            actor.id,
            retired,
            len(created),
        )
        return created

    async def revoke(self, actor: UserResult, user_id: str, role_id: str) -> None:
        """Deactivate the visible assignment of role_id to user_id.

        Raises:
            ResourceNotFoundException: User missing or no visible assignment.
            TenantAccessDeniedException: Cross-company user for a tenant admin.
        """
        await self._target_user(
            actor, user_id, "Cannot manage role assignments for users from other companies"
        )
        if await self._assignment_repo.get_visible(user_id, role_id) is None:
            raise ResourceNotFoundException("role_assignment", f"{user_id}/{role_id}")
        await self._assignment_repo.deactivate_pair(user_id, role_id)
        await self._invalidator.user(user_id)
        logger.info("Role %s revoked from user %s by %s", role_id, user_id, actor.id)

    async def list_for_user(
        self, actor: UserResult, user_id: str, *, include_history: bool = False
    ) -> list[AssignmentResult]:
        """Visible assignments of user_id; with include_history, every row."""
        await self._target_user(
            actor, user_id, "Cannot view role assignments for users from other companies"
        )
        if include_history:
            return await self._assignment_repo.list_history_for(user_id)
        return await self._assignment_repo.list_active_for(user_id)
