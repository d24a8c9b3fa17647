"""Company (tenant) API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, SecretStr, field_validator

from app.domain.enums import CompanyPlan, CompanyStatus
from app.schemas.user import UserResponse


class CompanyCreateRequest(BaseModel):
    """Request body for creating a company together with its first admin.

    The admin password is never echoed back.
    """

    name: str = Field(..., min_length=1, max_length=200)
    plan: CompanyPlan = CompanyPlan.STARTER
    driver_limit: int | None = Field(default=None, ge=1)
    admin_email: EmailStr
    admin_name: str = Field(..., min_length=1, max_length=100)
    admin_password: SecretStr

    @field_validator("admin_password")
    @classmethod
    def validate_admin_password_length(cls, v: SecretStr) -> SecretStr:
        if len(v.get_secret_value()) < 8:
            raise ValueError("admin_password must be at least 8 characters")
        return v

    @field_validator("name", "admin_name", mode="before")
    @classmethod
    def strip_names(cls, v: object) -> object:
        return v.strip() if isinstance(v, str) else v


class CompanyResponse(BaseModel):
    """Company in get/create responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    plan: CompanyPlan
    status: CompanyStatus
    driver_limit: int
    renewal_date: datetime | None = None
    created_at: datetime | None = None


class CompanyCreateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    company: CompanyResponse
    admin: UserResponse
