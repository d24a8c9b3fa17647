"""Pydantic request/response schemas for the API."""

from app.schemas.audit_log import AuditLogEntryResponse
from app.schemas.auth import LoginRequest, TokenResponse
from app.schemas.common import ApiResponse, ErrorResponse, Page, ok
from app.schemas.company import (
    CompanyCreateRequest,
    CompanyCreateResponse,
    CompanyResponse,
)
from app.schemas.health import HealthResponse
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
from app.schemas.user import UserPurgeResponse, UserResponse

__all__ = [
    "ApiResponse",
    "AssignRoleRequest",
    "AssignRolesRequest",
    "AssignmentResponse",
    "AuditLogEntryResponse",
    "CompanyCreateRequest",
    "CompanyCreateResponse",
    "CompanyResponse",
    "ErrorResponse",
    "HealthResponse",
    "LoginRequest",
    "Page",
    "PermissionCatalogResponse",
    "RoleCreateRequest",
    "RoleDeleteResponse",
    "RoleResponse",
    "RoleUpdateRequest",
    "TokenResponse",
    "UserPurgeResponse",
    "UserResponse",
    "ok",
]
