"""DTOs for company (tenant) use cases."""

from dataclasses import dataclass
from datetime import datetime

from app.application.dtos.user import UserResult
from app.domain.enums import CompanyPlan, CompanyStatus


@dataclass(frozen=True)
class CompanyResult:
    """Company read-model."""

    id: str
    name: str
    plan: CompanyPlan
    status: CompanyStatus
    driver_limit: int
    renewal_date: datetime | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class CompanyCreationResult:
    """Result of creating a company together with its first admin."""

    company: CompanyResult
    admin: UserResult
