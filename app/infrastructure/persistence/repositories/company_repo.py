"""Company repository."""

from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.company import CompanyResult
from app.domain.enums import CompanyPlan, CompanyStatus
from app.infrastructure.persistence.models.company import Company
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.utils.datetime import ensure_utc


def _company_to_result(c: Company) -> CompanyResult:
    return CompanyResult(
        id=c.id,
        name=c.name,
        plan=CompanyPlan(c.plan),
        status=CompanyStatus(c.status),
        driver_limit=c.driver_limit,
        renewal_date=ensure_utc(c.renewal_date),
        created_at=ensure_utc(c.created_at),
    )


class CompanyRepository(BaseRepository[Company]):
    """Company persistence. Reads return CompanyResult."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Company)

    async def get_by_id(self, company_id: str) -> CompanyResult | None:
        company = await self.get_entity(company_id)
        return _company_to_result(company) if company else None

    async def create_company(self, company: Company) -> CompanyResult:
        """Insert a company row (flush only; the caller owns the transaction)."""
        created = await self.add(company)
        return _company_to_result(created)
