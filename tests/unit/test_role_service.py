"""Unit tests for RoleService (mocked stores and invalidator)."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.application.dtos.role import RoleCreate, RolePatch, RoleResult
from app.application.dtos.user import UserResult
from app.application.services import RoleService
from app.domain.enums import Permission, PrimaryRole, UserStatus
from app.domain.exceptions import (
    ResourceNotFoundException,
    RestrictedPermissionException,
    RoleAlreadyExistsException,
    RoleInUseException,
    SystemRoleProtectedException,
    TenantAccessDeniedException,
)


def _actor(role: PrimaryRole = PrimaryRole.ADMIN, company_id: str | None = "c1") -> UserResult:
    return UserResult(
        id=f"{role.value.lower()}-1",
        email=f"{role.value.lower()}@example.com",
        name="Actor",
        role=role,
        company_id=company_id,
        status=UserStatus.ACTIVE,
    )


def _role(
    role_id: str = "r1",
    company_id: str | None = "c1",
    *,
    is_system: bool = False,
    permissions: frozenset[Permission] = frozenset({Permission.REPORT_VIEW}),
) -> RoleResult:
    return RoleResult(
        id=role_id,
        name="FLEET_AUDITOR",
        display_name="Fleet Auditor",
        description="Reads reports",
        permissions=permissions,
        is_system=is_system,
        company_id=company_id,
        created_by=None,
    )


def _create(
    permissions: set[Permission] | None = None, company_id: str | None = None
) -> RoleCreate:
    return RoleCreate(
        name="FLEET_AUDITOR",
        display_name="Fleet Auditor",
        description="Reads reports",
        permissions=frozenset(permissions or {Permission.REPORT_VIEW}),
        company_id=company_id,
    )


@pytest.fixture
def stores() -> SimpleNamespace:
    role_repo = AsyncMock()
    role_repo.get_by_name.return_value = None
    role_repo.create_role.side_effect = lambda data, created_by: _role(
        "new", data.company_id, is_system=data.is_system, permissions=data.permissions
    )
    company_repo = AsyncMock()
    company_repo.get_by_id.return_value = MagicMock()
    return SimpleNamespace(
        role_repo=role_repo,
        assignment_repo=AsyncMock(),
        company_repo=company_repo,
        invalidator=AsyncMock(),
    )


@pytest.fixture
def service(stores: SimpleNamespace) -> RoleService:
    return RoleService(
        stores.role_repo, stores.assignment_repo, stores.company_repo, stores.invalidator
    )


async def test_admin_role_defaults_to_own_company(service, stores) -> None:
    created = await service.create_role(_actor(), _create())
    data = stores.role_repo.create_role.await_args.args[0]
    assert data.company_id == "c1"
    assert data.is_system is False
    assert created.company_id == "c1"
    assert stores.role_repo.create_role.await_args.kwargs["created_by"] == "admin-1"


async def test_admin_cannot_grant_reserved_tokens(service, stores) -> None:
    """Nothing is written when an admin asks for SYSTEM_SETTINGS."""
    with pytest.raises(RestrictedPermissionException) as exc_info:
        await service.create_role(
            _actor(), _create({Permission.REPORT_VIEW, Permission.SYSTEM_SETTINGS})
        )
    assert exc_info.value.details["restricted"] == ["SYSTEM_SETTINGS"]
    stores.role_repo.create_role.assert_not_awaited()


async def test_admin_cannot_create_for_other_company(service, stores) -> None:
    with pytest.raises(TenantAccessDeniedException):
        await service.create_role(_actor(), _create(company_id="c2"))
    stores.role_repo.create_role.assert_not_awaited()


async def test_super_admin_without_company_creates_system_role(service, stores) -> None:
    actor = _actor(PrimaryRole.SUPER_ADMIN, None)
    created = await service.create_role(actor, _create({Permission.SYSTEM_SETTINGS}))
    assert created.is_system is True
    assert created.company_id is None
    stores.company_repo.get_by_id.assert_not_awaited()


async def test_super_admin_may_use_reserved_tokens_for_a_company(service) -> None:
    actor = _actor(PrimaryRole.SUPER_ADMIN, None)
    created = await service.create_role(
        actor, _create({Permission.COMPANY_DELETE}, company_id="c2")
    )
    assert created.is_system is False
    assert Permission.COMPANY_DELETE in created.permissions


async def test_unknown_company_is_not_found(service, stores) -> None:
    stores.company_repo.get_by_id.return_value = None
    with pytest.raises(ResourceNotFoundException):
        await service.create_role(_actor(PrimaryRole.SUPER_ADMIN, None), _create(company_id="cx"))


async def test_duplicate_name_in_scope(service, stores) -> None:
    stores.role_repo.get_by_name.return_value = _role()
    with pytest.raises(RoleAlreadyExistsException):
        await service.create_role(_actor(), _create())


@pytest.mark.parametrize("actor_role", [PrimaryRole.ADMIN, PrimaryRole.SUPER_ADMIN])
async def test_system_roles_are_read_only(service, stores, actor_role) -> None:
    stores.role_repo.get_entity.return_value = SimpleNamespace(is_system=True, company_id=None)
    actor = _actor(actor_role, None if actor_role == PrimaryRole.SUPER_ADMIN else "c1")
    with pytest.raises(SystemRoleProtectedException):
        await service.update_role(actor, "sys", RolePatch(display_name="Renamed"))
    with pytest.raises(SystemRoleProtectedException):
        await service.delete_role(actor, "sys", force=True)
    stores.role_repo.update_role.assert_not_awaited()
    stores.role_repo.remove.assert_not_awaited()


async def test_admin_cannot_update_other_company_role(service, stores) -> None:
    stores.role_repo.get_entity.return_value = SimpleNamespace(is_system=False, company_id="c2")
    with pytest.raises(TenantAccessDeniedException):
        await service.update_role(_actor(), "r2", RolePatch(display_name="Mine now"))


async def test_permission_change_evicts_every_cached_set(service, stores) -> None:
    stores.role_repo.get_entity.return_value = SimpleNamespace(is_system=False, company_id="c1")
    await service.update_role(
        _actor(), "r1", RolePatch(permissions=frozenset({Permission.REPORT_EXPORT}))
    )
    stores.invalidator.all.assert_awaited_once()


async def test_label_change_keeps_cache(service, stores) -> None:
    stores.role_repo.get_entity.return_value = SimpleNamespace(is_system=False, company_id="c1")
    await service.update_role(_actor(), "r1", RolePatch(description="New text"))
    stores.invalidator.all.assert_not_awaited()


async def test_admin_update_with_reserved_tokens_rejected(service, stores) -> None:
    stores.role_repo.get_entity.return_value = SimpleNamespace(is_system=False, company_id="c1")
    with pytest.raises(RestrictedPermissionException):
        await service.update_role(
            _actor(), "r1", RolePatch(permissions=frozenset({Permission.ROLE_MANAGEMENT}))
        )


async def test_delete_in_use_requires_force(service, stores) -> None:
    row = SimpleNamespace(is_system=False, company_id="c1")
    stores.role_repo.get_entity.return_value = row
    stores.assignment_repo.count_visible_for_role.return_value = 2
    stores.assignment_repo.delete_for_role.return_value = 3

    with pytest.raises(RoleInUseException):
        await service.delete_role(_actor(), "r1")
    stores.role_repo.remove.assert_not_awaited()

    removed = await service.delete_role(_actor(), "r1", force=True)
    assert removed == 3
    stores.role_repo.remove.assert_awaited_once_with(row)
    stores.invalidator.all.assert_awaited_once()


async def test_get_role_hides_other_company_roles(service, stores) -> None:
    stores.role_repo.get_by_id.return_value = _role(company_id="c2")
    with pytest.raises(ResourceNotFoundException):
        await service.get_role(_actor(), "r1")
    assert (await service.get_role(_actor(PrimaryRole.SUPER_ADMIN, None), "r1")).id == "r1"


async def test_get_role_shows_system_roles_to_admins(service, stores) -> None:
    stores.role_repo.get_by_id.return_value = _role("sys", None, is_system=True)
    assert (await service.get_role(_actor(), "sys")).is_system is True


async def test_list_roles_scopes_admin_to_own_company(service, stores) -> None:
    stores.role_repo.list_roles.return_value = ([_role()], 1)
    page = await service.list_roles(_actor(), company_id="c2", page=3, limit=10)
    stores.role_repo.list_roles.assert_awaited_once_with(
        visible_company_id="c1", skip=20, limit=10
    )
    assert page.total == 1
    assert page.page == 3


def test_permission_catalog_by_actor(service) -> None:
    admin_catalog = service.permission_catalog(_actor())
    assert Permission.SYSTEM_SETTINGS not in admin_catalog["all"]
    super_catalog = service.permission_catalog(_actor(PrimaryRole.SUPER_ADMIN, None))
    assert len(super_catalog["all"]) == 30
