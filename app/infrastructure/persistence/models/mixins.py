"""SQLAlchemy mixins for common model patterns.

Provides: CuidMixin, TimestampMixin, CompanyScopedMixin and the combined
CompanyScopedModel used by tenant-owned tables.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func

from app.shared.utils.datetime import utc_now
from app.shared.utils.generators import generate_cuid


class CuidMixin:
    """Mixin for models using CUID as primary key. Provides id with default generate_cuid."""

    @declared_attr
    def id(cls) -> Mapped[str]:
        return mapped_column(String, primary_key=True, default=generate_cuid)


class TimestampMixin:
    """Mixin for created_at and updated_at (timezone-aware, set in Python and by server)."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            default=utc_now,
            server_default=func.now(),
            nullable=False,
        )

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            default=utc_now,
            server_default=func.now(),
            onupdate=utc_now,
            nullable=False,
        )


class CompanyScopedMixin:
    """Mixin for rows owned by a company. company_id NULL means global (system) row."""

    @declared_attr
    def company_id(cls) -> Mapped[str | None]:
        return mapped_column(
            String,
            ForeignKey("company.id", ondelete="CASCADE"),
            nullable=True,
            index=True,
        )


class CompanyScopedModel(CuidMixin, CompanyScopedMixin, TimestampMixin):
    """Combined mixin: CUID + nullable company_id + created_at/updated_at."""

    __abstract__ = True
