"""Role store operations with tenant and system-role rules.

Tenant admins manage only their own company's custom roles and never put
reserved tokens into them. System roles are read-only for everyone. Role
edits and deletes evict every cached permission set because the affected
users are not tracked per role.
"""

from __future__ import annotations

import logging

from app.application.dtos.role import RoleCreate, RolePage, RolePatch, RoleResult
from app.application.dtos.user import UserResult
from app.application.interfaces.repositories import (
    ICompanyRepository,
    IRoleAssignmentRepository,
    IRoleRepository,
)
from app.application.interfaces.services import IPermissionInvalidator
from app.domain.enums import Permission, PrimaryRole
from app.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    RestrictedPermissionException,
    RoleAlreadyExistsException,
    RoleInUseException,
    SystemRoleProtectedException,
    TenantAccessDeniedException,
)
from app.domain.permissions import assignable_permissions, group_permissions, restricted_in

logger = logging.getLogger(__name__)


def _reject_restricted(actor: UserResult, permissions: frozenset[Permission]) -> None:
    if actor.is_super_admin:
        return
    restricted = restricted_in(permissions)
    if restricted:
        raise RestrictedPermissionException([p.value for p in restricted])


class RoleService:
    """Create, read, list, update and delete roles on behalf of an actor."""

    def __init__(
        self,
        role_repo: IRoleRepository,
        assignment_repo: IRoleAssignmentRepository,
        company_repo: ICompanyRepository,
        invalidator: IPermissionInvalidator,
    ) -> None:
        self._role_repo = role_repo
        self._assignment_repo = assignment_repo
        self._company_repo = company_repo
        self._invalidator = invalidator

    async def create_role(self, actor: UserResult, data: RoleCreate) -> RoleResult:
        """Create a role.

        Tenant admins create custom roles for their own company (company_id
        defaults to it). A super-admin creates a role for any company, or a
        global system role when no company is given.

        Raises:
            TenantAccessDeniedException: Admin targets another company.
            RestrictedPermissionException: Admin requests reserved tokens.
            ResourceNotFoundException: The target company does not exist.
            RoleAlreadyExistsException: (name, company) already taken.
        """
        company_id = data.company_id
        if actor.is_super_admin:
            is_system = company_id is None
        else:
            if company_id is None:
                company_id = actor.company_id
            elif company_id != actor.company_id:
                raise TenantAccessDeniedException("You can only create roles for your company")
            is_system = False
            _reject_restricted(actor, data.permissions)

        if company_id is not None and await self._company_repo.get_by_id(company_id) is None:
            raise ResourceNotFoundException("company", company_id)
        if await self._role_repo.get_by_name(data.name, company_id) is not None:
            raise RoleAlreadyExistsException(data.name, company_id)

        created = await self._role_repo.create_role(
            RoleCreate(
                name=data.name,
                display_name=data.display_name,
                description=data.description,
                permissions=data.permissions,
                company_id=company_id,
                is_system=is_system,
            ),
            created_by=actor.id,
        )
        logger.info(
            "Role %s (%s) created by %s for company %s",
            created.id,
            created.name,
            actor.id,
            company_id or "<global>",
        )
        return created

    async def get_role(self, actor: UserResult, role_id: str) -> RoleResult:
        """Return a role visible to actor (system roles and own-company roles for admins)."""
        role = await self._role_repo.get_by_id(role_id)
        if role is None or not self._is_visible(actor, role):
            raise ResourceNotFoundException("role", role_id)
        return role

    async def list_roles(
        self,
        actor: UserResult,
        *,
        company_id: str | None = None,
        system_only: bool = False,
        page: int = 1,
        limit: int = 20,
    ) -> RolePage:
        """List roles visible to actor.

        Admins always see system roles plus their own company's roles. A
        super-admin sees everything, or system roles plus one company's roles
        when company_id is given, or only system roles with system_only.
        """
        skip = (page - 1) * limit
        if actor.is_super_admin:
            items, total = await self._role_repo.list_roles(
                visible_company_id=company_id,
                system_only=system_only and company_id is None,
                skip=skip,
                limit=limit,
            )
        else:
            items, total = await self._role_repo.list_roles(
                visible_company_id=actor.company_id, skip=skip, limit=limit
            )
        return RolePage(items=items, total=total, page=page, limit=limit)

    async def update_role(
        self, actor: UserResult, role_id: str, patch: RolePatch
    ) -> RoleResult:
        """Apply patch to a custom role.

        Raises:
            ResourceNotFoundException: No such role.
            SystemRoleProtectedException: Role is a system role.
            TenantAccessDeniedException: Admin targets another company's role.
            RestrictedPermissionException: Admin requests reserved tokens.
        """
        role = await self._role_repo.get_entity(role_id)
        if role is None:
            raise ResourceNotFoundException("role", role_id)
        if role.is_system:
            raise SystemRoleProtectedException(role_id, "updated")
        self._check_owner(actor, role.company_id, "Cannot update roles from other companies")
        if patch.permissions is not None:
            _reject_restricted(actor, patch.permissions)

        updated = await self._role_repo.update_role(role, patch)
        if patch.permissions is not None:
            await self._invalidator.all()
        logger.info("Role %s updated by %s", role_id, actor.id)
        return updated

    async def delete_role(
        self, actor: UserResult, role_id: str, *, force: bool = False
    ) -> int:
        """Delete a custom role. Returns the number of assignment rows removed.

        With active assignments the delete is refused unless force is set.
        Either way every assignment row referencing the role goes with it,
        inactive and expired history included (the foreign key cascades). The
        count is returned and the route records it on the audit row.

        Raises:
            ResourceNotFoundException: No such role.
            SystemRoleProtectedException: Role is a system role.
            TenantAccessDeniedException: Admin targets another company's role.
            RoleInUseException: Active assignments exist and force is not set.
        """
        role = await self._role_repo.get_entity(role_id)
        if role is None:
            raise ResourceNotFoundException("role", role_id)
        if role.is_system:
            raise SystemRoleProtectedException(role_id, "deleted")
        self._check_owner(actor, role.company_id, "Cannot delete roles from other companies")

        active = await self._assignment_repo.count_visible_for_role(role_id)
        if active and not force:
            raise RoleInUseException(role_id, active)
        removed = await self._assignment_repo.delete_for_role(role_id)
        await self._role_repo.remove(role)
        await self._invalidator.all()
        logger.info(
            "Role %s deleted by %s (%d assignment rows removed, %d of them history)",
            role_id,
            actor.id,
            removed,
            removed - active,
        )
        return removed

    def permission_catalog(self, actor: UserResult) -> dict[str, object]:
        """Tokens actor may put into a role, flat and grouped by category."""
        permissions = assignable_permissions(actor.role)
        return {"all": permissions, "grouped": group_permissions(permissions)}

    @staticmethod
    def _is_visible(actor: UserResult, role: RoleResult) -> bool:
        if actor.is_super_admin:
            return True
        return role.is_system or role.company_id == actor.company_id

    @staticmethod
    def _check_owner(actor: UserResult, company_id: str | None, message: str) -> None:
        if actor.is_super_admin:
            return
        if actor.role != PrimaryRole.ADMIN:
            raise AuthorizationException("Insufficient permissions for this action")
        if company_id != actor.company_id:
            raise TenantAccessDeniedException(message)
