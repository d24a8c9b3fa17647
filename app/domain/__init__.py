"""Domain layer: enums, static permission tables, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.enums import (
    CompanyPlan,
    CompanyStatus,
    Permission,
    PrimaryRole,
    UserStatus,
)
from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    DependencyException,
    DuplicateAssignmentException,
    FleetflowException,
    ResourceNotFoundException,
    RestrictedPermissionException,
    RoleAlreadyExistsException,
    RoleInUseException,
    SystemRoleProtectedException,
    TenantAccessDeniedException,
    UserAlreadyExistsException,
    ValidationException,
)
from app.domain.permissions import (
    ADMIN_RESTRICTED_PERMISSIONS,
    DEFAULT_ROLE_PERMISSIONS,
    default_permissions,
)

__all__ = [
    # Enums
    "CompanyPlan",
    "CompanyStatus",
    "Permission",
    "PrimaryRole",
    "UserStatus",
    # Permission tables
    "ADMIN_RESTRICTED_PERMISSIONS",
    "DEFAULT_ROLE_PERMISSIONS",
    "default_permissions",
    # Exceptions
    "AuthenticationException",
    "AuthorizationException",
    "DependencyException",
    "DuplicateAssignmentException",
    "FleetflowException",
    "ResourceNotFoundException",
    "RestrictedPermissionException",
    "RoleAlreadyExistsException",
    "RoleInUseException",
    "SystemRoleProtectedException",
    "TenantAccessDeniedException",
    "UserAlreadyExistsException",
    "ValidationException",
]
