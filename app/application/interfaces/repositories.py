"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.application.dtos.assignment import AssignmentResult
    from app.application.dtos.audit_log import (
        AuditLogEntryCreate,
        AuditLogFilter,
        AuditLogResult,
    )
    from app.application.dtos.company import CompanyResult
    from app.application.dtos.role import RoleCreate, RolePatch, RoleResult
    from app.application.dtos.user import UserResult
    from app.domain.enums import PrimaryRole, UserStatus


class IRoleRepository(Protocol):
    """Protocol for the role store."""

    async def get_by_id(self, role_id: str) -> RoleResult | None:
        """Return role by id."""

    async def get_entity(self, entity_id: str) -> Any:
        """Return the ORM row for update/delete."""

    async def get_by_ids(self, role_ids: list[str]) -> list[RoleResult]:
        """Return the roles that exist among role_ids."""

    async def get_by_name(self, name: str, company_id: str | None) -> RoleResult | None:
        """Return role named name in scope company_id (None = global)."""

    async def list_roles(
        self,
        *,
        visible_company_id: str | None = None,
        system_only: bool = False,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[RoleResult], int]:
        """Return one page of roles and the total count."""

    async def create_role(self, data: RoleCreate, created_by: str | None) -> RoleResult:
        """Insert a role."""

    async def update_role(self, role: Any, patch: RolePatch) -> RoleResult:
        """Apply patch to the ORM row."""

    async def upsert_system_role(self, data: RoleCreate) -> RoleResult:
        """Create or overwrite a global system role by name."""

    async def remove(self, obj: Any) -> None:
        """Delete the ORM row."""


class IRoleAssignmentRepository(Protocol):
    """Protocol for the assignment store. Authorization reads apply the visibility predicate."""

    async def list_active_for(
        self, user_id: str, now: datetime | None = None
    ) -> list[AssignmentResult]:
        """Visible assignments of user_id with roles."""

    async def list_history_for(self, user_id: str) -> list[AssignmentResult]:
        """All assignment rows of user_id."""

    async def granted_permission_lists(
        self, user_id: str, now: datetime | None = None
    ) -> list[list[str]]:
        """Permission lists of every visibly assigned role."""

    async def get_visible(
        self, user_id: str, role_id: str, now: datetime | None = None
    ) -> Any:
        """Visible assignment row for the pair, or None."""

    async def deactivate_pair(self, user_id: str, role_id: str) -> int:
        """Deactivate active rows of the pair."""

    async def deactivate_all_for_user(self, user_id: str) -> int:
        """Deactivate all active rows of user_id."""

    async def create_assignment(
        self,
        *,
        user_id: str,
        role_id: str,
        assigned_by: str | None,
        expires_at: datetime | None,
        assigned_at: datetime | None = None,
    ) -> AssignmentResult:
        """Insert an active assignment."""

    async def count_visible_for_role(self, role_id: str, now: datetime | None = None) -> int:
        """Number of visible assignments referencing role_id."""

    async def delete_for_role(self, role_id: str) -> int:
        """Remove all rows referencing role_id."""

    async def delete_for_user(self, user_id: str) -> int:
        """Remove all rows of user_id."""


class IUserRepository(Protocol):
    """Protocol for user repository."""

    async def get_by_id(self, user_id: str) -> UserResult | None:
        """Return user by id."""

    async def get_entity_by_email(self, email: str) -> Any:
        """Return ORM row (with password hash) for login."""

    async def email_exists(self, email: str) -> bool:
        """Return True when email is registered."""

    async def create_user(
        self,
        *,
        email: str,
        name: str,
        hashed_password: str,
        role: PrimaryRole,
        company_id: str | None,
    ) -> UserResult:
        """Insert a user."""

    async def touch_last_active(self, user_id: str, when: datetime) -> None:
        """Record activity time."""

    async def set_status(self, user_id: str, status: UserStatus) -> UserResult | None:
        """Change account status."""

    async def delete_user(self, user_id: str) -> bool:
        """Hard-delete the user row."""


class ICompanyRepository(Protocol):
    """Protocol for company repository."""

    async def get_by_id(self, company_id: str) -> CompanyResult | None:
        """Return company by id."""

    async def create_company(self, company: Any) -> CompanyResult:
        """Insert a company row."""


class IAuditLogRepository(Protocol):
    """Protocol for the append-only audit log."""

    async def create(self, entry: AuditLogEntryCreate) -> AuditLogResult:
        """Append one entry."""

    async def list(
        self, filters: AuditLogFilter, *, skip: int = 0, limit: int = 20
    ) -> tuple[list[AuditLogResult], int]:
        """Return one page of matching entries and the total."""

    async def purge_older_than(self, cutoff: datetime) -> int:
        """Bulk-delete entries older than cutoff."""
