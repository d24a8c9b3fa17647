"""Tests for the static permission tables and the seeded system roles."""

from unittest.mock import AsyncMock

from app.application.services import SYSTEM_ROLES, seed_system_roles
from app.domain.enums import Permission, PrimaryRole
from app.domain.permissions import (
    ADMIN_RESTRICTED_PERMISSIONS,
    DEFAULT_ROLE_PERMISSIONS,
    assignable_permissions,
    default_permissions,
    group_permissions,
    parse_permissions,
    restricted_in,
)


def test_permission_catalog_has_thirty_tokens() -> None:
    assert len(list(Permission)) == 30
    assert len(set(Permission.values())) == 30


def test_super_admin_defaults_to_every_permission() -> None:
    assert default_permissions(PrimaryRole.SUPER_ADMIN) == frozenset(Permission)


def test_every_primary_role_has_defaults() -> None:
    assert set(DEFAULT_ROLE_PERMISSIONS) == set(PrimaryRole)


def test_admin_defaults_exclude_reserved_tokens() -> None:
    """Tenant admins never hold a reserved token by default."""
    admin = default_permissions(PrimaryRole.ADMIN)
    assert not admin & ADMIN_RESTRICTED_PERMISSIONS
    assert Permission.AUDIT_LOG_VIEW in admin
    assert Permission.USER_ASSIGN_ROLE not in admin


def test_driver_defaults() -> None:
    assert default_permissions(PrimaryRole.DRIVER) == frozenset(
        {
            Permission.EXPENSE_CREATE,
            Permission.EXPENSE_READ,
            Permission.EXPENSE_UPDATE,
            Permission.EXPENSE_DELETE,
            Permission.VEHICLE_READ,
        }
    )


def test_viewer_is_read_only() -> None:
    viewer = default_permissions(PrimaryRole.VIEWER)
    assert all(p.value.endswith(("_READ", "_VIEW")) for p in viewer)


def test_restricted_in_returns_sorted_reserved_subset() -> None:
    requested = [Permission.SYSTEM_SETTINGS, Permission.EXPENSE_READ, Permission.COMPANY_CREATE]
    assert restricted_in(requested) == [Permission.COMPANY_CREATE, Permission.SYSTEM_SETTINGS]
    assert restricted_in([Permission.EXPENSE_READ]) == []


def test_assignable_permissions_by_actor() -> None:
    assert assignable_permissions(PrimaryRole.SUPER_ADMIN) == list(Permission)
    admin = assignable_permissions(PrimaryRole.ADMIN)
    assert len(admin) == 26
    assert not set(admin) & ADMIN_RESTRICTED_PERMISSIONS


def test_group_permissions_covers_every_token_once() -> None:
    grouped = group_permissions(Permission)
    flattened = [p for tokens in grouped.values() for p in tokens]
    assert sorted(flattened) == sorted(Permission)
    assert Permission.DASHBOARD_VIEW in grouped["report"]
    assert Permission.AUDIT_LOG_VIEW in grouped["system"]


def test_parse_permissions_skips_unknown_tokens() -> None:
    parsed = parse_permissions(["EXPENSE_READ", "TELEPORT_VEHICLE", "REPORT_VIEW"])
    assert parsed == frozenset({Permission.EXPENSE_READ, Permission.REPORT_VIEW})


def test_system_roles_are_global_and_protected() -> None:
    names = [r.name for r in SYSTEM_ROLES]
    assert names == [
        "SYSTEM_SUPER_ADMIN",
        "SYSTEM_ADMIN",
        "SYSTEM_MANAGER",
        "SYSTEM_VIEWER",
        "SYSTEM_DRIVER",
    ]
    assert all(r.is_system and r.company_id is None for r in SYSTEM_ROLES)


def test_system_admin_role_adds_role_management() -> None:
    system_admin = next(r for r in SYSTEM_ROLES if r.name == "SYSTEM_ADMIN")
    assert system_admin.permissions == default_permissions(PrimaryRole.ADMIN) | {
        Permission.USER_ASSIGN_ROLE,
        Permission.ROLE_MANAGEMENT,
    }


async def test_seed_system_roles_upserts_each_role() -> None:
    repo = AsyncMock()
    repo.upsert_system_role.side_effect = lambda data: data
    seeded = await seed_system_roles(repo)
    assert repo.upsert_system_role.await_count == len(SYSTEM_ROLES)
    assert [r.name for r in seeded] == [r.name for r in SYSTEM_ROLES]
