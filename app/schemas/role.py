"""Role and role assignment API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.constants import ROLE_NAME_PATTERN
from app.domain.enums import Permission


def _sorted_permissions(value: object) -> object:
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=lambda p: p.value if isinstance(p, Permission) else str(p))
    return value


class RoleCreateRequest(BaseModel):
    """Request body for creating a role.

    company_id is optional: tenant admins default to their own company; a
    super-admin omitting it creates a global system role.
    """

    name: str = Field(..., min_length=1, max_length=100, pattern=ROLE_NAME_PATTERN)
    display_name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=500)
    permissions: list[Permission] = Field(..., min_length=1)
    company_id: str | None = None


class RoleUpdateRequest(BaseModel):
    """Request body for updating a role (partial). name is immutable."""

    display_name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, min_length=1, max_length=500)
    permissions: list[Permission] | None = Field(default=None, min_length=1)


class RoleResponse(BaseModel):
    """Role list/detail response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    display_name: str
    description: str
    permissions: list[Permission]
    is_system: bool
    company_id: str | None
    created_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("permissions", mode="before")
    @classmethod
    def sort_permissions(cls, v: object) -> object:
        """Stable output order for set-valued permissions."""
        return _sorted_permissions(v)


class PermissionCatalogResponse(BaseModel):
    """Tokens the caller may put into a role, flat and grouped by category."""

    all: list[Permission]
    grouped: dict[str, list[Permission]]


class AssignRoleRequest(BaseModel):
    """Request body for POST /roles/assign."""

    user_id: str = Field(..., min_length=1)
    role_id: str = Field(..., min_length=1)
    expires_at: datetime | None = None


class AssignRolesRequest(BaseModel):
    """Request body for POST /roles/assign-multiple (replaces the user's assignments)."""

    user_id: str = Field(..., min_length=1)
    role_ids: list[str] = Field(..., min_length=1)
    expires_at: datetime | None = None


class AssignmentResponse(BaseModel):
    """One role assignment; role is included on list reads."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    role_id: str
    assigned_by: str | None
    assigned_at: datetime
    expires_at: datetime | None
    is_active: bool
    role: RoleResponse | None = None


class RoleDeleteResponse(BaseModel):
    role_id: str
    assignments_removed: int
