"""Pytest configuration and fixtures for fleetflow.

Tests run against a throwaway SQLite file database (aiosqlite). The schema
is rebuilt from the ORM metadata for every test that asks for `database`.
Environment is set before any app.* import so Settings picks it up.
"""

import os
import tempfile
from collections.abc import AsyncIterator, Awaitable, Callable, Iterable
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

_TEST_DB = Path(tempfile.mkdtemp(prefix="fleetflow-tests-")) / "test.db"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DB}"
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["REDIS_ENABLED"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from app.core.config import get_settings  # noqa: E402

get_settings.cache_clear()

from app.application.dtos.company import CompanyResult  # noqa: E402
from app.application.dtos.role import RoleCreate, RoleResult  # noqa: E402
from app.application.dtos.user import UserResult  # noqa: E402
from app.application.services import seed_system_roles  # noqa: E402
from app.domain.enums import Permission, PrimaryRole  # noqa: E402
from app.infrastructure.cache import InMemoryPermissionCache  # noqa: E402
from app.infrastructure.persistence.database import (  # noqa: E402
    Base,
    dispose_engine,
    get_engine,
    get_session_factory,
)
from app.infrastructure.persistence.models import Company  # noqa: E402
from app.infrastructure.persistence.repositories import (  # noqa: E402
    CompanyRepository,
    RoleAssignmentRepository,
    RoleRepository,
    UserRepository,
)
from app.infrastructure.security import create_user_token, hash_password  # noqa: E402
from app.infrastructure.services import AuditRecorder  # noqa: E402
from app.main import app  # noqa: E402

TEST_PASSWORD = "Password123!"


@lru_cache
def password_hash() -> str:
    """bcrypt is slow on purpose; hash the shared test password once."""
    return hash_password(TEST_PASSWORD)


@dataclass(frozen=True)
class Account:
    """A seeded user plus a bearer token issued for it."""

    user: UserResult
    token: str

    @property
    def id(self) -> str:
        return self.user.id

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


@dataclass(frozen=True)
class Tenants:
    """Two companies with a spread of accounts, plus the super-admin."""

    company_a: CompanyResult
    company_b: CompanyResult
    super_admin: Account
    admin_a: Account
    admin_b: Account
    manager_a: Account
    driver_a: Account
    driver_b: Account


@pytest.fixture
async def database() -> AsyncIterator[None]:
    """Fresh schema for the test; engine disposed afterwards."""
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    await dispose_engine()


@pytest.fixture
async def db_session(database: None) -> AsyncIterator[AsyncSession]:
    """Plain session on the test database. The test owns commits."""
    async with get_session_factory()() as session:
        yield session


@pytest.fixture
def permission_cache() -> InMemoryPermissionCache:
    return InMemoryPermissionCache(ttl_seconds=300)


@pytest.fixture
async def client(
    database: None, permission_cache: InMemoryPermissionCache
) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the FastAPI app (ASGI).

    ASGITransport does not run the lifespan, so the state it would build is
    set here directly.
    """
    app.state.cache = None
    app.state.permission_cache = permission_cache
    app.state.audit_recorder = AuditRecorder()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    await app.state.audit_recorder.drain()


async def _create_account(
    session: AsyncSession,
    email: str,
    role: PrimaryRole,
    company_id: str | None,
) -> Account:
    user = await UserRepository(session).create_user(
        email=email,
        name=email.split("@")[0].replace(".", " ").title(),
        hashed_password=password_hash(),
        role=role,
        company_id=company_id,
    )
    token, _ = create_user_token(user.id, user.email, user.role, user.company_id)
    return Account(user=user, token=token)


@pytest.fixture
def make_account(database: None) -> Callable[..., Awaitable[Account]]:
    """Factory: create one committed account and return it with a token."""

    async def _make(
        email: str, role: PrimaryRole = PrimaryRole.DRIVER, company_id: str | None = None
    ) -> Account:
        async with get_session_factory()() as session:
            async with session.begin():
                return await _create_account(session, email, role, company_id)

    return _make


@pytest.fixture
async def tenants(database: None) -> Tenants:
    """Company A and company B with admins, a manager and drivers."""
    async with get_session_factory()() as session:
        async with session.begin():
            companies = CompanyRepository(session)
            company_a = await companies.create_company(
                Company(name="Acme Haulage", plan="PROFESSIONAL", status="ACTIVE", driver_limit=50)
            )
            company_b = await companies.create_company(
                Company(name="Borealis Freight", plan="STARTER", status="ACTIVE", driver_limit=10)
            )
            return Tenants(
                company_a=company_a,
                company_b=company_b,
                super_admin=await _create_account(
                    session, "root@fleetflow.test", PrimaryRole.SUPER_ADMIN, None
                ),
                admin_a=await _create_account(
                    session, "admin@acme.test", PrimaryRole.ADMIN, company_a.id
                ),
                admin_b=await _create_account(
                    session, "admin@borealis.test", PrimaryRole.ADMIN, company_b.id
                ),
                manager_a=await _create_account(
                    session, "manager@acme.test", PrimaryRole.MANAGER, company_a.id
                ),
                driver_a=await _create_account(
                    session, "driver@acme.test", PrimaryRole.DRIVER, company_a.id
                ),
                driver_b=await _create_account(
                    session, "driver@borealis.test", PrimaryRole.DRIVER, company_b.id
                ),
            )


@pytest.fixture
def make_role(database: None) -> Callable[..., Awaitable[RoleResult]]:
    """Factory: insert a role directly (bypasses the API rules)."""

    async def _make(
        name: str,
        permissions: Iterable[Permission | str],
        company_id: str | None = None,
        *,
        is_system: bool = False,
    ) -> RoleResult:
        async with get_session_factory()() as session:
            async with session.begin():
                return await RoleRepository(session).create_role(
                    RoleCreate(
                        name=name,
                        display_name=name.replace("_", " ").title(),
                        description=f"{name} role",
                        permissions=frozenset(Permission(p) for p in permissions),
                        company_id=company_id,
                        is_system=is_system,
                    ),
                    created_by=None,
                )

    return _make


@pytest.fixture
async def system_roles(database: None) -> dict[str, RoleResult]:
    """Seeded system roles keyed by name."""
    async with get_session_factory()() as session:
        async with session.begin():
            seeded = await seed_system_roles(RoleRepository(session))
    return {r.name: r for r in seeded}


@pytest.fixture
def assignment_rows(database: None) -> Callable[..., Awaitable[list]]:
    """Factory: every assignment row of a user (any state), read from the store."""

    async def _rows(user_id: str) -> list:
        async with get_session_factory()() as session:
            return await RoleAssignmentRepository(session).list_history_for(user_id)

    return _rows
