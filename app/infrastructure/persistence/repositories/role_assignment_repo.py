"""RoleAssignment repository.

Every authorization read goes through visible_assignment(): an assignment
counts only while is_active is true and expires_at is absent or strictly
in the future. Inactive and expired rows stay in the table and are only
returned by list_history_for().
"""

from datetime import datetime
from typing import Any

from sqlalchemy import and_, delete, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.assignment import AssignmentResult
from app.domain.exceptions import DuplicateAssignmentException
from app.infrastructure.persistence.models.role import Role
from app.infrastructure.persistence.models.role_assignment import RoleAssignment
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.persistence.repositories.role_repo import _role_to_result
from app.shared.utils.datetime import ensure_utc, utc_now


def visible_assignment(now: datetime) -> Any:
    """SQL predicate for assignments that grant permissions at instant now."""
    return and_(
        RoleAssignment.is_active.is_(True),
        or_(RoleAssignment.expires_at.is_(None), RoleAssignment.expires_at > now),
    )


def _to_result(a: RoleAssignment, role: Role | None = None) -> AssignmentResult:
    return AssignmentResult(
        id=a.id,
        user_id=a.user_id,
        role_id=a.role_id,
        assigned_by=a.assigned_by,
        assigned_at=ensure_utc(a.assigned_at),
        expires_at=ensure_utc(a.expires_at),
        is_active=a.is_active,
        role=_role_to_result(role) if role is not None else None,
    )


class RoleAssignmentRepository(BaseRepository[RoleAssignment]):
    """User-role bindings."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, RoleAssignment)

    async def list_active_for(
        self, user_id: str, now: datetime | None = None
    ) -> list[AssignmentResult]:
        """Assignments of user_id that are visible at now, with their roles, newest first."""
        now = now or utc_now()
        result = await self._execute(
            select(RoleAssignment, Role)
            .join(Role, Role.id == RoleAssignment.role_id)
            .where(RoleAssignment.user_id == user_id, visible_assignment(now))
            .order_by(RoleAssignment.assigned_at.desc())
        )
        return [_to_result(a, r) for a, r in result.all()]

    async def list_history_for(self, user_id: str) -> list[AssignmentResult]:
        """Every assignment row of user_id, including revoked and expired ones."""
        result = await self._execute(
            select(RoleAssignment, Role)
            .join(Role, Role.id == RoleAssignment.role_id)
            .where(RoleAssignment.user_id == user_id)
            .order_by(RoleAssignment.assigned_at.desc())
        )
        return [_to_result(a, r) for a, r in result.all()]

    async def granted_permission_lists(
        self, user_id: str, now: datetime | None = None
    ) -> list[list[str]]:
        """Raw permission lists of every role visibly assigned to user_id."""
        now = now or utc_now()
        result = await self._execute(
            select(Role.permissions)
            .join(RoleAssignment, RoleAssignment.role_id == Role.id)
            .where(RoleAssignment.user_id == user_id, visible_assignment(now))
        )
        return [list(perms or []) for perms in result.scalars().all()]

    async def get_visible(
        self, user_id: str, role_id: str, now: datetime | None = None
    ) -> RoleAssignment | None:
        now = now or utc_now()
        result = await self._execute(
            select(RoleAssignment).where(
                RoleAssignment.user_id == user_id,
                RoleAssignment.role_id == role_id,
                visible_assignment(now),
            )
        )
        return result.scalar_one_or_none()

    async def deactivate_pair(self, user_id: str, role_id: str) -> int:
        """Mark every active row of (user_id, role_id) inactive, expired or not."""
        result = await self._execute(
            update(RoleAssignment)
            .where(
                RoleAssignment.user_id == user_id,
                RoleAssignment.role_id == role_id,
                RoleAssignment.is_active.is_(True),
            )
            .values(is_active=False, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        return int(result.rowcount or 0)

    async def deactivate_all_for_user(self, user_id: str) -> int:
        result = await self._execute(
            update(RoleAssignment)
            .where(
                RoleAssignment.user_id == user_id,
                RoleAssignment.is_active.is_(True),
            )
            .values(is_active=False, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        return int(result.rowcount or 0)

    async def create_assignment(
        self,
        *,
        user_id: str,
        role_id: str,
        assigned_by: str | None,
        expires_at: datetime | None,
        assigned_at: datetime | None = None,
    ) -> AssignmentResult:
        """Insert an active assignment. The active-pair unique index guards races."""
        assignment = RoleAssignment(
            user_id=user_id,
            role_id=role_id,
            assigned_by=assigned_by,
            assigned_at=assigned_at or utc_now(),
            expires_at=expires_at,
            is_active=True,
        )
        try:
            created = await self.add(assignment)
        except IntegrityError:
            raise DuplicateAssignmentException(user_id, role_id) from None
        return _to_result(created)

    async def count_visible_for_role(self, role_id: str, now: datetime | None = None) -> int:
        now = now or utc_now()
        return await self._count(
            select(RoleAssignment.id).where(
                RoleAssignment.role_id == role_id, visible_assignment(now)
            )
        )

    async def delete_for_role(self, role_id: str) -> int:
        """Remove every assignment row (any state) referencing role_id."""
        result = await self._execute(
            delete(RoleAssignment).where(RoleAssignment.role_id == role_id)
        )
        return int(result.rowcount or 0)

    async def delete_for_user(self, user_id: str) -> int:
        """Remove every assignment row (any state) of user_id."""
        result = await self._execute(
            delete(RoleAssignment).where(RoleAssignment.user_id == user_id)
        )
        return int(result.rowcount or 0)
