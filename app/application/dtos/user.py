"""DTOs for user use cases (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime

from app.domain.enums import PrimaryRole, UserStatus


@dataclass(frozen=True)
class UserResult:
    """User read-model. No password."""

    id: str
    email: str
    name: str
    role: PrimaryRole
    company_id: str | None
    status: UserStatus
    last_active: datetime | None = None
    created_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE

    @property
    def is_super_admin(self) -> bool:
        return self.role == PrimaryRole.SUPER_ADMIN


@dataclass(frozen=True)
class UserCreate:
    """Input for creating a user. password is plain text; hashed by the service."""

    email: str
    name: str
    password: str
    role: PrimaryRole
    company_id: str | None
