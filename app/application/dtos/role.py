"""DTOs for role use cases (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime

from app.domain.enums import Permission


@dataclass(frozen=True)
class RoleResult:
    """Role read-model. company_id None means a global (system) role."""

    id: str
    name: str
    display_name: str
    description: str
    permissions: frozenset[Permission]
    is_system: bool
    company_id: str | None
    created_by: str | None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class RoleCreate:
    """Input for creating a role."""

    name: str
    display_name: str
    description: str
    permissions: frozenset[Permission]
    company_id: str | None = None
    is_system: bool = False


@dataclass(frozen=True)
class RolePatch:
    """Partial update of a role. None fields are left unchanged; name is immutable."""

    display_name: str | None = None
    description: str | None = None
    permissions: frozenset[Permission] | None = None


@dataclass(frozen=True)
class RolePage:
    """One page of roles plus the total number of visible roles."""

    items: list[RoleResult]
    total: int
    page: int
    limit: int
