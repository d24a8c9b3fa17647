"""Application layer: DTOs, interfaces, services.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (repositories, cache, recorder).
"""

from app.application.interfaces import (
    IAuditLogRepository,
    IAuditRecorder,
    ICompanyRepository,
    IPermissionInvalidator,
    IPermissionResolver,
    IRoleAssignmentRepository,
    IRoleRepository,
    IUserRepository,
)
from app.application.services import (
    AssignmentService,
    AuthorizationService,
    AuthService,
    CompanyCreationService,
    RoleService,
    UserService,
)

__all__ = [
    "AssignmentService",
    "AuthService",
    "AuthorizationService",
    "CompanyCreationService",
    "IAuditLogRepository",
    "IAuditRecorder",
    "ICompanyRepository",
    "IPermissionInvalidator",
    "IPermissionResolver",
    "IRoleAssignmentRepository",
    "IRoleRepository",
    "IUserRepository",
    "RoleService",
    "UserService",
]
