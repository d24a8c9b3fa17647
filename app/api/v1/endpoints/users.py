"""Users API: soft deactivation and purge.

Deactivation flips status and keeps every row; purge removes the user's
role assignments and then the user. Audit rows keep their copy of the
actor's email and role after a purge.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import ADMIN_ROLES, audit, get_user_service, require_roles
from app.application.dtos.user import UserResult
from app.application.services import UserService
from app.core.limiter import limit_writes
from app.schemas.common import ApiResponse, ok
from app.schemas.user import UserPurgeResponse, UserResponse
from app.shared.enums import AuditAction, AuditModule

router = APIRouter()

AdminUser = Annotated[UserResult, Depends(require_roles(*ADMIN_ROLES))]


@router.patch(
    "/{user_id}/deactivate",
    response_model=ApiResponse[UserResponse],
    dependencies=[
        Depends(audit(AuditAction.UPDATE, AuditModule.USER, details="User deactivated"))
    ],
)
@limit_writes
async def deactivate_user(
    request: Request,
    user_id: str,
    current_user: AdminUser,
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Deactivate a user; their cached permissions are evicted."""
    user = await user_service.deactivate(current_user, user_id)
    return ok(UserResponse.model_validate(user), "User deactivated successfully")


@router.delete(
    "/{user_id}",
    response_model=ApiResponse[UserPurgeResponse],
    dependencies=[
        Depends(audit(AuditAction.DELETE, AuditModule.USER, details="User purged"))
    ],
)
@limit_writes
async def purge_user(
    request: Request,
    user_id: str,
    current_user: AdminUser,
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Remove a user and all of their role assignments."""
    removed = await user_service.purge(current_user, user_id)
    return ok(
        UserPurgeResponse(user_id=user_id, assignments_removed=removed),
        "User deleted successfully",
    )
