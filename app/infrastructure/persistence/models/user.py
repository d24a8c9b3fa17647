"""User ORM model. Table: app_user. Email is globally unique (login key)."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.enums import PrimaryRole, UserStatus
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CompanyScopedModel


class User(CompanyScopedModel, Base):
    """Account with a primary role. company_id is NULL only for SUPER_ADMIN."""

    __tablename__ = "app_user"

    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    hashed_password: Mapped[str] = mapped_column(String, nullable=False)
    role: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=UserStatus.ACTIVE.value
    )
    last_active: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        CheckConstraint(
            "role IN ({})".format(", ".join(f"'{v}'" for v in PrimaryRole.values())),
            name="app_user_role_check",
        ),
        CheckConstraint(
            "(role = 'SUPER_ADMIN') OR (company_id IS NOT NULL)",
            name="app_user_company_required_check",
        ),
    )
