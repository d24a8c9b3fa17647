"""User lifecycle: soft deactivation and hard purge, plus profile reads."""

from __future__ import annotations

import logging

from app.application.dtos.user import UserResult
from app.application.interfaces.repositories import (
    IRoleAssignmentRepository,
    IUserRepository,
)
from app.application.interfaces.services import IPermissionInvalidator
from app.domain.enums import PrimaryRole, UserStatus
from app.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    TenantAccessDeniedException,
    ValidationException,
)

logger = logging.getLogger(__name__)


class UserService:
    """Deactivate (status flip, row and assignments kept) or purge (rows removed)."""

    def __init__(
        self,
        user_repo: IUserRepository,
        assignment_repo: IRoleAssignmentRepository,
        invalidator: IPermissionInvalidator,
    ) -> None:
        self._user_repo = user_repo
        self._assignment_repo = assignment_repo
        self._invalidator = invalidator

    async def get_user(self, user_id: str) -> UserResult:
        user = await self._user_repo.get_by_id(user_id)
        if user is None:
            raise ResourceNotFoundException("user", user_id)
        return user

    async def _managed_user(self, actor: UserResult, user_id: str) -> UserResult:
        """Load a user actor may deactivate or purge."""
        if user_id == actor.id:
            raise ValidationException("You cannot perform this action on your own account")
        user = await self.get_user(user_id)
        if actor.is_super_admin:
            return user
        if user.company_id != actor.company_id:
            raise TenantAccessDeniedException("Cannot manage users from other companies")
        if user.role == PrimaryRole.SUPER_ADMIN:
            raise AuthorizationException("Cannot manage a super admin account")
        return user

    async def deactivate(self, actor: UserResult, user_id: str) -> UserResult:
        """Set status INACTIVE. The account can no longer authenticate."""
        await self._managed_user(actor, user_id)
        updated = await self._user_repo.set_status(user_id, UserStatus.INACTIVE)
        if updated is None:
            raise ResourceNotFoundException("user", user_id)
        await self._invalidator.user(user_id)
        logger.info("User %s deactivated by %s", user_id, actor.id)
        return updated

    async def purge(self, actor: UserResult, user_id: str) -> int:
        """Remove the user's assignments then the user. Returns assignments removed."""
        await self._managed_user(actor, user_id)
        removed = await self._assignment_repo.delete_for_user(user_id)
        if not await self._user_repo.delete_user(user_id):
            raise ResourceNotFoundException("user", user_id)
        await self._invalidator.user(user_id)
        logger.info(
            "User %s purged by %s (%d assignment rows removed)", user_id, actor.id, removed
        )
        return removed
