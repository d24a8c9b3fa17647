"""Domain exceptions for the Fleetflow application.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class FleetflowException(Exception):
    """Base exception for all Fleetflow application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(FleetflowException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(FleetflowException):
    """Raised when authentication fails (missing, invalid or expired credential)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(FleetflowException):
    """Raised when the caller's primary role or effective permissions are insufficient."""

    def __init__(
        self,
        message: str = "Insufficient permissions",
        missing: list[str] | None = None,
    ) -> None:
        """Initialize with message and the permission tokens the caller lacks.

        Args:
            message: Human-readable message; replaced when missing is given.
            missing: Tokens required by the route but absent from the caller's set.
        """
        details: dict[str, Any] = {}
        if missing:
            message = f"Missing required permissions: {', '.join(missing)}"
            details["missing"] = missing
        super().__init__(message, "PERMISSION_DENIED", details)


class TenantAccessDeniedException(FleetflowException):
    """Raised when a tenant-scoped caller targets a resource of another company."""

    def __init__(self, message: str = "Access denied to this company") -> None:
        super().__init__(message, "TENANT_ACCESS_DENIED")


class SystemRoleProtectedException(FleetflowException):
    """Raised on any attempt to update or delete a system role."""

    def __init__(self, role_id: str, operation: str) -> None:
        super().__init__(
            f"System roles cannot be {operation}",
            "SYSTEM_ROLE_PROTECTED",
            {"role_id": role_id, "operation": operation},
        )


class RoleAlreadyExistsException(FleetflowException):
    """Raised when a role name already exists within the same scope."""

    def __init__(self, name: str, company_id: str | None) -> None:
        super().__init__(
            "Role name already exists",
            "ROLE_ALREADY_EXISTS",
            {"name": name, "company_id": company_id},
        )


class RoleInUseException(FleetflowException):
    """Raised when deleting a role with active assignments without force."""

    def __init__(self, role_id: str, assignment_count: int) -> None:
        super().__init__(
            f"Cannot delete role that is assigned to {assignment_count} user(s). "
            "Add ?force=true to delete anyway and remove all assignments.",
            "ROLE_IN_USE",
            {"role_id": role_id, "assignment_count": assignment_count},
        )


class DuplicateAssignmentException(FleetflowException):
    """Raised when an active assignment for the same (user, role) already exists."""

    def __init__(self, user_id: str, role_id: str) -> None:
        super().__init__(
            "User already has this role assigned",
            "DUPLICATE_ASSIGNMENT",
            {"user_id": user_id, "role_id": role_id},
        )


class UserAlreadyExistsException(FleetflowException):
    """Raised when creating a user whose email is already registered."""

    def __init__(self) -> None:
        super().__init__("Email is already registered", "USER_ALREADY_EXISTS", {})


class ResourceNotFoundException(FleetflowException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'role', 'user').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class DependencyException(FleetflowException):
    """Raised when a backing store (database, cache) cannot be reached.

    The message is internal; handlers never expose it to callers.
    """

    def __init__(self, dependency: str, message: str = "Dependency unavailable") -> None:
        super().__init__(message, "DEPENDENCY_FAILURE", {"dependency": dependency})


class RestrictedPermissionException(AuthorizationException):
    """Raised when a tenant admin tries to put reserved tokens into a role."""

    def __init__(self, restricted: list[str]) -> None:
        super().__init__("You cannot assign system-level permissions")
        self.details["restricted"] = restricted
