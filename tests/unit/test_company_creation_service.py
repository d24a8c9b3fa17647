"""CompanyCreationService: company plus first admin, all or nothing (SQLite test database)."""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select

from app.application.services import CompanyCreationService
from app.domain.enums import CompanyPlan, CompanyStatus, PrimaryRole
from app.domain.exceptions import UserAlreadyExistsException
from app.infrastructure.persistence.models import Company, User
from app.infrastructure.persistence.repositories import CompanyRepository, UserRepository
from app.shared.utils.datetime import utc_now

pytestmark = pytest.mark.requires_db


async def _fake_hash(password: str) -> str:
    return f"hashed:{password}"


def _service(session, user_repo=None) -> CompanyCreationService:
    return CompanyCreationService(
        company_repo=CompanyRepository(session),
        user_repo=user_repo or UserRepository(session),
        password_hasher=_fake_hash,
        company_factory=Company,
        default_driver_limit=25,
    )


async def _count(session, model) -> int:
    return int(await session.scalar(select(func.count()).select_from(model)))


async def test_creates_company_and_admin(db_session) -> None:
    async with db_session.begin():
        result = await _service(db_session).create_company(
            name="Cascade Logistics",
            admin_email="Owner@Cascade.test",
            admin_name="Owner",
            admin_password="s3cret-pass",
            plan=CompanyPlan.ENTERPRISE,
        )
    assert result.company.name == "Cascade Logistics"
    assert result.company.plan == CompanyPlan.ENTERPRISE
    assert result.company.status == CompanyStatus.ACTIVE
    assert result.company.driver_limit == 25
    assert result.company.renewal_date is not None
    assert result.company.renewal_date > utc_now() + timedelta(days=364)
    assert result.admin.role == PrimaryRole.ADMIN
    assert result.admin.company_id == result.company.id
    assert result.admin.email == "owner@cascade.test"

    row = await UserRepository(db_session).get_entity_by_email("owner@cascade.test")
    assert row.hashed_password == "hashed:s3cret-pass"


async def test_failure_after_company_insert_leaves_nothing(db_session) -> None:
    """The admin insert failing rolls the company back with it."""
    user_repo = UserRepository(db_session)
    user_repo.create_user = AsyncMock(side_effect=RuntimeError("disk full"))
    with pytest.raises(RuntimeError):
        async with db_session.begin():
            await _service(db_session, user_repo).create_company(
                name="Doomed Fleet",
                admin_email="owner@doomed.test",
                admin_name="Owner",
                admin_password="s3cret-pass",
            )
    assert await _count(db_session, Company) == 0
    assert await _count(db_session, User) == 0


async def test_registered_email_is_rejected_before_any_write(db_session, tenants) -> None:
    with pytest.raises(UserAlreadyExistsException):
        async with db_session.begin():
            await _service(db_session).create_company(
                name="Copycat Fleet",
                admin_email="admin@acme.test",
                admin_name="Owner",
                admin_password="s3cret-pass",
            )
    assert await _count(db_session, Company) == 2
