"""Roles API: role store, permission catalog and role assignments.

Every route runs identity verification and the SUPER_ADMIN/ADMIN allow-list;
company ownership, system-role protection and the reserved-permission
blocklist are enforced by RoleService and AssignmentService. Fixed paths are
declared before /{role_id} so they are not captured by it.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import (
    ADMIN_ROLES,
    audit,
    get_assignment_service,
    get_role_service,
    require_roles,
)
from app.application.dtos.role import RoleCreate, RolePatch
from app.application.dtos.user import UserResult
from app.application.services import AssignmentService, RoleService
from app.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from app.core.limiter import limit_writes
from app.schemas.common import ApiResponse, Page, ok
from app.schemas.role import (
    AssignmentResponse,
    AssignRoleRequest,
    AssignRolesRequest,
    PermissionCatalogResponse,
    RoleCreateRequest,
    RoleDeleteResponse,
    RoleResponse,
    RoleUpdateRequest,
)
from app.shared.enums import AuditAction, AuditModule

router = APIRouter()

AdminUser = Annotated[UserResult, Depends(require_roles(*ADMIN_ROLES))]
RoleServiceDep = Annotated[RoleService, Depends(get_role_service)]
AssignmentServiceDep = Annotated[AssignmentService, Depends(get_assignment_service)]


@router.get("", response_model=ApiResponse[Page[RoleResponse]])
async def list_roles(
    current_user: AdminUser,
    role_service: RoleServiceDep,
    company_id: str | None = Query(
        default=None, description="Super-admin only: one company's roles"
    ),
    system_only: bool = Query(default=False),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
):
    """List roles visible to the caller (system roles plus own company for admins)."""
    result = await role_service.list_roles(
        current_user,
        company_id=company_id,
        system_only=system_only,
        page=page,
        limit=limit,
    )
    data = Page[RoleResponse](
        items=[RoleResponse.model_validate(r) for r in result.items],
        total=result.total,
        page=result.page,
        limit=result.limit,
    )
    return ok(data, "Roles retrieved")


@router.post(
    "",
    response_model=ApiResponse[RoleResponse],
    status_code=201,
    dependencies=[
        Depends(audit(AuditAction.CREATE, AuditModule.ROLE, body_keys=("name", "company_id")))
    ],
)
@limit_writes
async def create_role(
    request: Request,
    body: RoleCreateRequest,
    current_user: AdminUser,
    role_service: RoleServiceDep,
):
    """Create a company role (or, for a super-admin without company_id, a system role)."""
    created = await role_service.create_role(
        current_user,
        RoleCreate(
            name=body.name,
            display_name=body.display_name,
            description=body.description,
            permissions=frozenset(body.permissions),
            company_id=body.company_id,
        ),
    )
    request.state.audit_spec = request.state.audit_spec.with_reference(role_id=created.id)
    return ok(RoleResponse.model_validate(created), "Role created successfully")


@router.get("/permissions", response_model=ApiResponse[PermissionCatalogResponse])
async def list_permissions(current_user: AdminUser, role_service: RoleServiceDep):
    """Permission tokens the caller may grant, flat and grouped by category."""
    catalog = role_service.permission_catalog(current_user)
    return ok(PermissionCatalogResponse.model_validate(catalog), "Permissions retrieved")


@router.get("/user/{user_id}", response_model=ApiResponse[list[AssignmentResponse]])
async def list_user_assignments(
    user_id: str,
    current_user: AdminUser,
    assignment_service: AssignmentServiceDep,
    include_history: bool = Query(
        default=False, description="Include inactive and expired rows"
    ),
):
    """Active role assignments of a user (full history with include_history)."""
    items = await assignment_service.list_for_user(
        current_user, user_id, include_history=include_history
    )
    return ok([AssignmentResponse.model_validate(a) for a in items], "User roles retrieved")


@router.post(
    "/assign",
    response_model=ApiResponse[AssignmentResponse],
    status_code=201,
    dependencies=[
        Depends(audit(AuditAction.ASSIGN, AuditModule.ROLE, body_keys=("user_id", "role_id")))
    ],
)
@limit_writes
async def assign_role(
    request: Request,
    body: AssignRoleRequest,
    current_user: AdminUser,
    assignment_service: AssignmentServiceDep,
):
    """Grant one role to one user."""
    created = await assignment_service.assign(
        current_user, body.user_id, body.role_id, body.expires_at
    )
    return ok(AssignmentResponse.model_validate(created), "Role assigned successfully")


@router.post(
    "/assign-multiple",
    response_model=ApiResponse[list[AssignmentResponse]],
    status_code=201,
    dependencies=[
        Depends(audit(AuditAction.ASSIGN, AuditModule.ROLE, body_keys=("user_id", "role_ids")))
    ],
)
@limit_writes
async def assign_roles(
    request: Request,
    body: AssignRolesRequest,
    current_user: AdminUser,
    assignment_service: AssignmentServiceDep,
):
    """Replace every active assignment of a user with the given roles."""
    created = await assignment_service.assign_many(
        current_user, body.user_id, body.role_ids, body.expires_at
    )
    return ok(
        [AssignmentResponse.model_validate(a) for a in created],
        "Roles assigned successfully",
    )


@router.delete(
    "/assign/{user_id}/{role_id}",
    response_model=ApiResponse[None],
    dependencies=[Depends(audit(AuditAction.REVOKE, AuditModule.ROLE))],
)
@limit_writes
async def revoke_role(
    request: Request,
    user_id: str,
    role_id: str,
    current_user: AdminUser,
    assignment_service: AssignmentServiceDep,
):
    """Revoke one assignment. The row is kept, inactive, for history."""
    await assignment_service.revoke(current_user, user_id, role_id)
    return ok(None, "Role revoked successfully")


@router.get("/{role_id}", response_model=ApiResponse[RoleResponse])
async def get_role(role_id: str, current_user: AdminUser, role_service: RoleServiceDep):
    """Get a role by id (404 when it is not visible to the caller)."""
    role = await role_service.get_role(current_user, role_id)
    return ok(RoleResponse.model_validate(role), "Role retrieved")


@router.put(
    "/{role_id}",
    response_model=ApiResponse[RoleResponse],
    dependencies=[Depends(audit(AuditAction.UPDATE, AuditModule.ROLE))],
)
@limit_writes
async def update_role(
    request: Request,
    role_id: str,
    body: RoleUpdateRequest,
    current_user: AdminUser,
    role_service: RoleServiceDep,
):
    """Update a company role. System roles cannot be updated."""
    updated = await role_service.update_role(
        current_user,
        role_id,
        RolePatch(
            display_name=body.display_name,
            description=body.description,
            permissions=frozenset(body.permissions) if body.permissions is not None else None,
        ),
    )
    return ok(RoleResponse.model_validate(updated), "Role updated successfully")


@router.delete(
    "/{role_id}",
    response_model=ApiResponse[RoleDeleteResponse],
    dependencies=[Depends(audit(AuditAction.DELETE, AuditModule.ROLE))],
)
@limit_writes
async def delete_role(
    request: Request,
    role_id: str,
    current_user: AdminUser,
    role_service: RoleServiceDep,
    force: bool = Query(default=False, description="Also remove the role's assignments"),
):
    """Delete a company role. Refused while assigned unless force is set."""
    removed = await role_service.delete_role(current_user, role_id, force=force)
    request.state.audit_spec = request.state.audit_spec.with_reference(
        assignments_removed=removed
    )
    return ok(
        RoleDeleteResponse(role_id=role_id, assignments_removed=removed),
        "Role deleted successfully",
    )
