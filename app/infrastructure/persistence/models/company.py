"""Company ORM model. Tenant root: every resource except the super-admin belongs to one."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.enums import CompanyPlan, CompanyStatus
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


def _in_values(column: str, values: list[str]) -> str:
    return "{} IN ({})".format(column, ", ".join(f"'{v}'" for v in values))


class Company(CuidMixin, TimestampMixin, Base):
    """Company (tenant). Table: company."""

    __tablename__ = "company"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    plan: Mapped[str] = mapped_column(
        String, nullable=False, default=CompanyPlan.STARTER.value
    )
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=CompanyStatus.ACTIVE.value, index=True
    )
    driver_limit: Mapped[int] = mapped_column(Integer, nullable=False, default=50)
    renewal_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        CheckConstraint(_in_values("plan", CompanyPlan.values()), name="company_plan_check"),
        CheckConstraint(
            _in_values("status", CompanyStatus.values()), name="company_status_check"
        ),
    )
