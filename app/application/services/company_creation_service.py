"""Company creation: new company + its first ADMIN user in one transaction."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from datetime import timedelta
from typing import Any

from app.application.dtos.company import CompanyCreationResult
from app.application.interfaces.repositories import ICompanyRepository, IUserRepository
from app.domain.enums import CompanyPlan, CompanyStatus, PrimaryRole
from app.domain.exceptions import UserAlreadyExistsException
from app.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)

PasswordHasher = Callable[[str], Awaitable[str]]
CompanyFactory = Callable[..., Any]


class CompanyCreationService:
    """Creates a company and its first administrator.

    The caller runs this inside a single DB transaction (the transactional
    session dependency, or session.begin() in scripts) so that a failure
    after the company insert leaves neither row behind.
    """

    def __init__(
        self,
        company_repo: ICompanyRepository,
        user_repo: IUserRepository,
        password_hasher: PasswordHasher,
        company_factory: CompanyFactory,
        default_driver_limit: int = 50,
    ) -> None:
        self.company_repo = company_repo
        self.user_repo = user_repo
        self.password_hasher = password_hasher
        self.company_factory = company_factory
        self.default_driver_limit = default_driver_limit

    async def create_company(
        self,
        *,
        name: str,
        admin_email: str,
        admin_name: str,
        admin_password: str,
        plan: CompanyPlan = CompanyPlan.STARTER,
        driver_limit: int | None = None,
    ) -> CompanyCreationResult:
        """Create company then its ADMIN user.

        Raises:
            UserAlreadyExistsException: admin_email is already registered
                (checked before anything is written).
        """
        if await self.user_repo.email_exists(admin_email):
            raise UserAlreadyExistsException()

        company = await self.company_repo.create_company(
            self.company_factory(
                name=name,
                plan=plan.value,
                status=CompanyStatus.ACTIVE.value,
                driver_limit=(
                    driver_limit if driver_limit is not None else self.default_driver_limit
                ),
                renewal_date=utc_now() + timedelta(days=365),
            )
        )
        hashed = await self.password_hasher(admin_password)
        admin = await self.user_repo.create_user(
            email=admin_email,
            name=admin_name,
            hashed_password=hashed,
            role=PrimaryRole.ADMIN,
            company_id=company.id,
        )
        logger.info("Company %s created with admin %s", company.id, admin.id)
        return CompanyCreationResult(company=company, admin=admin)
