"""Role repository. Read methods return RoleResult (DTO); entity getters return ORM for writes."""

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.role import RoleCreate, RolePatch, RoleResult
from app.domain.permissions import parse_permissions
from app.infrastructure.persistence.models.role import Role
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.utils.datetime import ensure_utc


def _role_to_result(r: Role) -> RoleResult:
    """Map ORM Role to application RoleResult."""
    return RoleResult(
        id=r.id,
        name=r.name,
        display_name=r.display_name,
        description=r.description,
        permissions=parse_permissions(r.permissions or []),
        is_system=r.is_system,
        company_id=r.company_id,
        created_by=r.created_by,
        created_at=ensure_utc(r.created_at),
        updated_at=ensure_utc(r.updated_at),
    )


def _serialize_permissions(permissions) -> list[str]:
    return sorted(p.value for p in permissions)


class RoleRepository(BaseRepository[Role]):
    """Role persistence. Use get_entity for update/delete."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Role)

    async def get_by_id(self, role_id: str) -> RoleResult | None:
        role = await self.get_entity(role_id)
        return _role_to_result(role) if role else None

    async def get_by_ids(self, role_ids: list[str]) -> list[RoleResult]:
        if not role_ids:
            return []
        rows = await self._scalars(select(Role).where(Role.id.in_(role_ids)))
        return [_role_to_result(r) for r in rows]

    async def get_by_name(self, name: str, company_id: str | None) -> RoleResult | None:
        """Return the role named name in scope company_id (None = global scope)."""
        scope = Role.company_id.is_(None) if company_id is None else Role.company_id == company_id
        result = await self._execute(select(Role).where(Role.name == name, scope))
        row = result.scalar_one_or_none()
        return _role_to_result(row) if row else None

    async def list_roles(
        self,
        *,
        visible_company_id: str | None = None,
        system_only: bool = False,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[RoleResult], int]:
        """List roles, system roles first then by display name.

        visible_company_id narrows to system roles plus that company's roles;
        system_only narrows to system roles. Neither set returns every role.
        """
        q = select(Role)
        if system_only:
            q = q.where(Role.is_system.is_(True))
        elif visible_company_id is not None:
            q = q.where(
                or_(Role.is_system.is_(True), Role.company_id == visible_company_id)
            )
        total = await self._count(q)
        rows = await self._scalars(
            q.order_by(Role.is_system.desc(), Role.display_name.asc())
            .offset(skip)
            .limit(limit)
        )
        return [_role_to_result(r) for r in rows], total

    async def create_role(self, data: RoleCreate, created_by: str | None) -> RoleResult:
        role = Role(
            name=data.name,
            display_name=data.display_name,
            description=data.description,
            permissions=_serialize_permissions(data.permissions),
            is_system=data.is_system,
            company_id=data.company_id,
            created_by=created_by,
        )
        created = await self.add(role)
        return _role_to_result(created)

    async def update_role(self, role: Role, patch: RolePatch) -> RoleResult:
        if patch.display_name is not None:
            role.display_name = patch.display_name
        if patch.description is not None:
            role.description = patch.description
        if patch.permissions is not None:
            role.permissions = _serialize_permissions(patch.permissions)
        saved = await self.save(role)
        return _role_to_result(saved)

    async def upsert_system_role(self, data: RoleCreate) -> RoleResult:
        """Create or overwrite a global system role by name (seeding)."""
        result = await self._execute(
            select(Role).where(Role.name == data.name, Role.company_id.is_(None))
        )
        role = result.scalar_one_or_none()
        if role is None:
            return await self.create_role(data, created_by=None)
        role.display_name = data.display_name
        role.description = data.description
        role.permissions = _serialize_permissions(data.permissions)
        role.is_system = True
        saved = await self.save(role)
        return _role_to_result(saved)
