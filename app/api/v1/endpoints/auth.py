"""Auth API: login and current account."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import CurrentUser, audit, get_auth_service
from app.application.services import AuthService
from app.core.limiter import limit_auth
from app.schemas.auth import LoginRequest, TokenResponse
from app.schemas.common import ApiResponse, ok
from app.schemas.user import UserResponse
from app.shared.enums import AuditAction, AuditModule

router = APIRouter()


@router.post(
    "/login",
    response_model=ApiResponse[TokenResponse],
    dependencies=[Depends(audit(AuditAction.LOGIN, AuditModule.AUTH, body_keys=("email",)))],
)
@limit_auth
async def login(
    request: Request,
    body: LoginRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Authenticate with email and password; return a bearer token.

    Unknown email, wrong password and inactive account all answer 401 with
    the same message.
    """
    result = await auth_service.login(body.email, body.password)
    request.state.current_user = result.user
    token = TokenResponse(
        access_token=result.access_token,
        expires_in=result.expires_in,
        user=UserResponse.model_validate(result.user),
    )
    return ok(token, "Login successful")


@router.get("/me", response_model=ApiResponse[UserResponse])
async def get_me(current_user: CurrentUser):
    """Return the authenticated account."""
    return ok(UserResponse.model_validate(current_user), "Current user retrieved")
