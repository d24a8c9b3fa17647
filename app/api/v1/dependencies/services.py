"""Application service dependencies (composition root).

Services are built per request from the repositories in db.py. Write-path
services share one transactional session; the authorization service reads
through the request's read session.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from app.application.services import (
    AssignmentService,
    AuthorizationService,
    AuthService,
    CompanyCreationService,
    RoleService,
    UserService,
)
from app.core.config import get_settings
from app.infrastructure.cache import PermissionCache, PermissionCacheInvalidator
from app.infrastructure.persistence.models import Company
from app.infrastructure.persistence.repositories import (
    CompanyRepository,
    RoleAssignmentRepository,
    RoleRepository,
    UserRepository,
)
from app.infrastructure.security import (
    create_user_token,
    hash_password_async,
    verify_password_async,
)
from app.infrastructure.services import PermissionResolver

from . import db as db_deps


async def get_permission_resolver(
    assignments: Annotated[RoleAssignmentRepository, Depends(db_deps.get_assignment_repo)],
    cache: Annotated[PermissionCache, Depends(db_deps.get_permission_cache)],
) -> PermissionResolver:
    return PermissionResolver(assignments, cache)


async def get_authorization_service(
    resolver: Annotated[PermissionResolver, Depends(get_permission_resolver)],
) -> AuthorizationService:
    """Fine-grained permission checks for stage four of the request chain."""
    return AuthorizationService(permission_resolver=resolver)


async def get_role_service(
    role_repo: Annotated[RoleRepository, Depends(db_deps.get_role_repo_for_write)],
    assignment_repo: Annotated[
        RoleAssignmentRepository, Depends(db_deps.get_assignment_repo_for_write)
    ],
    company_repo: Annotated[CompanyRepository, Depends(db_deps.get_company_repo_for_write)],
    invalidator: Annotated[
        PermissionCacheInvalidator, Depends(db_deps.get_permission_invalidator)
    ],
) -> RoleService:
    """Role store operations. Reads also run here so visibility rules live in one place."""
    return RoleService(role_repo, assignment_repo, company_repo, invalidator)


async def get_assignment_service(
    user_repo: Annotated[UserRepository, Depends(db_deps.get_user_repo_for_write)],
    role_repo: Annotated[RoleRepository, Depends(db_deps.get_role_repo_for_write)],
    assignment_repo: Annotated[
        RoleAssignmentRepository, Depends(db_deps.get_assignment_repo_for_write)
    ],
    invalidator: Annotated[
        PermissionCacheInvalidator, Depends(db_deps.get_permission_invalidator)
    ],
) -> AssignmentService:
    return AssignmentService(user_repo, role_repo, assignment_repo, invalidator)


async def get_user_service(
    user_repo: Annotated[UserRepository, Depends(db_deps.get_user_repo_for_write)],
    assignment_repo: Annotated[
        RoleAssignmentRepository, Depends(db_deps.get_assignment_repo_for_write)
    ],
    invalidator: Annotated[
        PermissionCacheInvalidator, Depends(db_deps.get_permission_invalidator)
    ],
) -> UserService:
    return UserService(user_repo, assignment_repo, invalidator)


async def get_company_creation_service(
    company_repo: Annotated[CompanyRepository, Depends(db_deps.get_company_repo_for_write)],
    user_repo: Annotated[UserRepository, Depends(db_deps.get_user_repo_for_write)],
) -> CompanyCreationService:
    """Company + first admin, both written on the same transactional session."""
    return CompanyCreationService(
        company_repo=company_repo,
        user_repo=user_repo,
        password_hasher=hash_password_async,
        company_factory=Company,
        default_driver_limit=get_settings().default_driver_limit,
    )


async def get_auth_service(
    user_repo: Annotated[UserRepository, Depends(db_deps.get_user_repo_for_write)],
) -> AuthService:
    """Login runs on the write session because it stamps last_active."""
    return AuthService(
        user_repo=user_repo,
        password_verifier=verify_password_async,
        token_issuer=create_user_token,
    )
