"""Unit tests for AssignmentService (mocked stores and invalidator)."""

from datetime import UTC, datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, call

import pytest

from app.application.dtos.role import RoleResult
from app.application.dtos.user import UserResult
from app.application.services import AssignmentService
from app.domain.enums import Permission, PrimaryRole, UserStatus
from app.domain.exceptions import (
    AuthorizationException,
    DuplicateAssignmentException,
    ResourceNotFoundException,
    TenantAccessDeniedException,
)


def _user(user_id: str, role: PrimaryRole, company_id: str | None) -> UserResult:
    return UserResult(
        id=user_id,
        email=f"{user_id}@example.com",
        name=user_id,
        role=role,
        company_id=company_id,
        status=UserStatus.ACTIVE,
    )


def _role(role_id: str, company_id: str | None, *, is_system: bool = False) -> RoleResult:
    return RoleResult(
        id=role_id,
        name=role_id.upper(),
        display_name=role_id.title(),
        description="",
        permissions=frozenset({Permission.REPORT_VIEW}),
        is_system=is_system,
        company_id=company_id,
        created_by=None,
    )


ADMIN = _user("admin", PrimaryRole.ADMIN, "c1")
SUPER = _user("root", PrimaryRole.SUPER_ADMIN, None)
DRIVER = _user("driver", PrimaryRole.DRIVER, "c1")
OTHER_DRIVER = _user("other", PrimaryRole.DRIVER, "c2")


@pytest.fixture
def stores() -> SimpleNamespace:
    users = {u.id: u for u in (ADMIN, SUPER, DRIVER, OTHER_DRIVER)}
    roles = {
        r.id: r
        for r in (
            _role("auditor", "c1"),
            _role("planner", "c1"),
            _role("foreign", "c2"),
            _role("system_viewer", None, is_system=True),
        )
    }
    user_repo = AsyncMock()
    user_repo.get_by_id.side_effect = lambda user_id: users.get(user_id)
    role_repo = AsyncMock()
    role_repo.get_by_id.side_effect = lambda role_id: roles.get(role_id)
    role_repo.get_by_ids.side_effect = lambda ids: [roles[i] for i in ids if i in roles]
    assignment_repo = AsyncMock()
    assignment_repo.get_visible.return_value = None
    assignment_repo.create_assignment.side_effect = lambda **kw: MagicMock(**kw)
    return SimpleNamespace(
        user_repo=user_repo,
        role_repo=role_repo,
        assignment_repo=assignment_repo,
        invalidator=AsyncMock(),
    )


@pytest.fixture
def service(stores: SimpleNamespace) -> AssignmentService:
    return AssignmentService(
        stores.user_repo, stores.role_repo, stores.assignment_repo, stores.invalidator
    )


async def test_assign_creates_row_and_evicts_user(service, stores) -> None:
    await service.assign(ADMIN, "driver", "auditor")
    kwargs = stores.assignment_repo.create_assignment.await_args.kwargs
    assert kwargs["user_id"] == "driver"
    assert kwargs["role_id"] == "auditor"
    assert kwargs["assigned_by"] == "admin"
    assert kwargs["expires_at"] is None
    stores.assignment_repo.deactivate_pair.assert_awaited_once_with("driver", "auditor")
    stores.invalidator.user.assert_awaited_once_with("driver")


async def test_assign_normalizes_naive_expiry_to_utc(service, stores) -> None:
    await service.assign(ADMIN, "driver", "auditor", datetime(2030, 1, 1, 12, 0))
    expires_at = stores.assignment_repo.create_assignment.await_args.kwargs["expires_at"]
    assert expires_at == datetime(2030, 1, 1, 12, 0, tzinfo=UTC)


async def test_admin_cannot_assign_system_role(service, stores) -> None:
    with pytest.raises(AuthorizationException):
        await service.assign(ADMIN, "driver", "system_viewer")
    stores.assignment_repo.create_assignment.assert_not_awaited()


async def test_super_admin_may_assign_system_role(service, stores) -> None:
    await service.assign(SUPER, "other", "system_viewer")
    stores.assignment_repo.create_assignment.assert_awaited_once()


async def test_admin_cannot_assign_to_other_company_user(service) -> None:
    with pytest.raises(TenantAccessDeniedException):
        await service.assign(ADMIN, "other", "auditor")


async def test_admin_cannot_assign_other_company_role(service) -> None:
    with pytest.raises(TenantAccessDeniedException):
        await service.assign(ADMIN, "driver", "foreign")


async def test_assign_unknown_user_or_role(service) -> None:
    with pytest.raises(ResourceNotFoundException):
        await service.assign(ADMIN, "ghost", "auditor")
    with pytest.raises(ResourceNotFoundException):
        await service.assign(ADMIN, "driver", "ghost")


async def test_assign_duplicate_visible_pair(service, stores) -> None:
    stores.assignment_repo.get_visible.return_value = MagicMock()
    with pytest.raises(DuplicateAssignmentException):
        await service.assign(ADMIN, "driver", "auditor")
    stores.invalidator.user.assert_not_awaited()


async def test_assign_many_replaces_active_assignments(service, stores) -> None:
    """Prior rows are retired first; duplicates in the request collapse."""
    created = await service.assign_many(ADMIN, "driver", ["auditor", "planner", "auditor"])
    assert len(created) == 2
    stores.assignment_repo.deactivate_all_for_user.assert_awaited_once_with("driver")
    role_ids = [c.kwargs["role_id"] for c in stores.assignment_repo.create_assignment.await_args_list]
    assert role_ids == ["auditor", "planner"]
    stores.invalidator.user.assert_awaited_once_with("driver")


async def test_assign_many_checks_everything_before_writing(service, stores) -> None:
    with pytest.raises(ResourceNotFoundException):
        await service.assign_many(ADMIN, "driver", ["auditor", "ghost"])
    with pytest.raises(AuthorizationException):
        await service.assign_many(ADMIN, "driver", ["auditor", "system_viewer"])
    stores.assignment_repo.deactivate_all_for_user.assert_not_awaited()
    stores.assignment_repo.create_assignment.assert_not_awaited()


async def test_revoke_deactivates_visible_assignment(service, stores) -> None:
    stores.assignment_repo.get_visible.return_value = MagicMock()
    await service.revoke(ADMIN, "driver", "auditor")
    stores.assignment_repo.deactivate_pair.assert_awaited_once_with("driver", "auditor")
    stores.invalidator.user.assert_awaited_once_with("driver")


async def test_revoke_without_assignment_is_not_found(service, stores) -> None:
    with pytest.raises(ResourceNotFoundException):
        await service.revoke(ADMIN, "driver", "auditor")
    stores.assignment_repo.deactivate_pair.assert_not_awaited()


async def test_list_for_user_history_flag(service, stores) -> None:
    await service.list_for_user(ADMIN, "driver")
    await service.list_for_user(ADMIN, "driver", include_history=True)
    assert stores.assignment_repo.method_calls[-2:] == [
        call.list_active_for("driver"),
        call.list_history_for("driver"),
    ]


async def test_list_for_other_company_user_denied(service) -> None:
    with pytest.raises(TenantAccessDeniedException):
        await service.list_for_user(ADMIN, "other")
