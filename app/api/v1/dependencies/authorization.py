"""Authorization stages two to four, each usable on its own.

Stage 2: primary-role allow-list   -> check_primary_role / require_roles(...)
Stage 3: tenant scope              -> check_tenant_scope
Stage 4: fine-grained permissions  -> AuthorizationService.require_permissions

authorize(...) composes them in that order behind a single dependency;
require_roles(...) is the stage-2-only shortcut the admin routes use. Both
depend on get_current_user, so identity is always verified first.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Annotated, Any

from fastapi import Depends, Request

from app.application.dtos.user import UserResult
from app.application.services import (
    AuthorizationService,
    check_primary_role,
    check_tenant_scope,
)
from app.domain.enums import Permission, PrimaryRole

from .auth import get_current_user
from .services import get_authorization_service

COMPANY_ID_KEYS = ("company_id", "companyId")

ADMIN_ROLES = (PrimaryRole.SUPER_ADMIN, PrimaryRole.ADMIN)


async def requested_company_id(request: Request) -> str | None:
    """Company implied by the request: path params, then query, then JSON body."""
    for source in (request.path_params, request.query_params):
        for key in COMPANY_ID_KEYS:
            value = source.get(key)
            if value:
                return str(value)

    if request.method not in ("POST", "PUT", "PATCH"):
        return None
    if "application/json" not in request.headers.get("content-type", ""):
        return None
    try:
        body: Any = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    if isinstance(body, dict):
        for key in COMPANY_ID_KEYS:
            value = body.get(key)
            if value:
                return str(value)
    return None


def require_roles(*roles: PrimaryRole):
    """Dependency factory: reject callers whose primary role is not listed."""
    allowed = frozenset(roles)

    async def _require_roles(
        current_user: Annotated[UserResult, Depends(get_current_user)],
    ) -> UserResult:
        check_primary_role(current_user, allowed)
        return current_user

    return _require_roles


def authorize(
    roles: Iterable[PrimaryRole] | None = None,
    *,
    company_scoped: bool = False,
    permissions: Iterable[Permission] = (),
):
    """Compose stages 2-4 in order; stages left unset are skipped.

    Example:
        current_user: Annotated[
            UserResult,
            Depends(authorize(company_scoped=True, permissions=[Permission.REPORT_VIEW])),
        ]
    """
    allowed = frozenset(roles) if roles is not None else None
    required = tuple(permissions)

    async def _authorize(
        request: Request,
        current_user: Annotated[UserResult, Depends(get_current_user)],
        auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    ) -> UserResult:
        if allowed is not None:
            check_primary_role(current_user, allowed)
        if company_scoped:
            check_tenant_scope(current_user, await requested_company_id(request))
        if required:
            await auth_svc.require_permissions(current_user, required)
        return current_user

    return _authorize
