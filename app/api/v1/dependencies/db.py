"""Repository and cache dependencies (composition root).

Read paths share the request's get_db session; write paths share the
request's get_db_transactional session so every repository a route touches
commits or rolls back together.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.cache import PermissionCache, PermissionCacheInvalidator
from app.infrastructure.persistence.database import get_db, get_db_transactional
from app.infrastructure.persistence.repositories import (
    AuditLogRepository,
    CompanyRepository,
    RoleAssignmentRepository,
    RoleRepository,
    UserRepository,
)


# Function scope: commit (or rollback) and the post-commit hooks finish before
# the response is sent, so a client never sees success for an uncommitted write.
WriteSession = Annotated[
    AsyncSession, Depends(get_db_transactional, scope="function")
]


def get_permission_cache(request: Request) -> PermissionCache:
    """Permission cache built in the lifespan (app.state.permission_cache)."""
    return request.app.state.permission_cache


async def get_user_repo_for_write(
    db: WriteSession,
) -> UserRepository:
    """User repository for writes (transactional)."""
    return UserRepository(db)


async def get_company_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CompanyRepository:
    return CompanyRepository(db)


async def get_company_repo_for_write(
    db: WriteSession,
) -> CompanyRepository:
    return CompanyRepository(db)


async def get_role_repo_for_write(
    db: WriteSession,
) -> RoleRepository:
    """Role repository for create/update/delete."""
    return RoleRepository(db)


async def get_assignment_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> RoleAssignmentRepository:
    """Assignment repository for reads, including the permission resolver's lookups."""
    return RoleAssignmentRepository(db)


async def get_assignment_repo_for_write(
    db: WriteSession,
) -> RoleAssignmentRepository:
    return RoleAssignmentRepository(db)


async def get_audit_log_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AuditLogRepository:
    """Audit log repository for listing. Writes go through the AuditRecorder."""
    return AuditLogRepository(db)


async def get_permission_invalidator(
    cache: Annotated[PermissionCache, Depends(get_permission_cache)],
    db: WriteSession,
) -> PermissionCacheInvalidator:
    """Invalidator bound to the write session, so evictions repeat after commit."""
    return PermissionCacheInvalidator(cache, db)
