"""User API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from app.domain.enums import PrimaryRole, UserStatus


class UserResponse(BaseModel):
    """User response (no password)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str
    role: PrimaryRole
    company_id: str | None
    status: UserStatus
    last_active: datetime | None = None
    created_at: datetime | None = None


class UserPurgeResponse(BaseModel):
    """Result of DELETE /users/{user_id}."""

    user_id: str
    assignments_removed: int
