"""DTOs for role assignments."""

from dataclasses import dataclass
from datetime import datetime

from app.application.dtos.role import RoleResult


@dataclass(frozen=True)
class AssignmentResult:
    """One user-role binding. role is populated on list reads."""

    id: str
    user_id: str
    role_id: str
    assigned_by: str | None
    assigned_at: datetime
    expires_at: datetime | None
    is_active: bool
    role: RoleResult | None = None
