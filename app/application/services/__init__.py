"""Application services."""

from app.application.services.assignment_service import AssignmentService
from app.application.services.auth_service import AuthService, LoginResult
from app.application.services.authorization_service import (
    AuthorizationService,
    check_primary_role,
    check_tenant_scope,
)
from app.application.services.company_creation_service import CompanyCreationService
from app.application.services.role_service import RoleService
from app.application.services.system_roles import SYSTEM_ROLES, seed_system_roles
from app.application.services.user_service import UserService

__all__ = [
    "AssignmentService",
    "AuthService",
    "AuthorizationService",
    "CompanyCreationService",
    "LoginResult",
    "RoleService",
    "SYSTEM_ROLES",
    "UserService",
    "check_primary_role",
    "check_tenant_scope",
    "seed_system_roles",
]
