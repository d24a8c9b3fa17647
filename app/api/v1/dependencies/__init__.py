"""API v1 dependencies (composition root).

Endpoints import from here; no repository or service is constructed inside
a route handler.
"""

from .audit import audit
from .auth import CurrentUser, get_current_user
from .authorization import (
    ADMIN_ROLES,
    authorize,
    require_roles,
    requested_company_id,
)
from .db import (
    get_assignment_repo,
    get_audit_log_repo,
    get_company_repo,
    get_permission_cache,
    get_permission_invalidator,
)
from .services import (
    get_assignment_service,
    get_auth_service,
    get_authorization_service,
    get_company_creation_service,
    get_permission_resolver,
    get_role_service,
    get_user_service,
)

__all__ = [
    "ADMIN_ROLES",
    "CurrentUser",
    "audit",
    "authorize",
    "get_assignment_repo",
    "get_assignment_service",
    "get_audit_log_repo",
    "get_auth_service",
    "get_authorization_service",
    "get_company_creation_service",
    "get_company_repo",
    "get_current_user",
    "get_permission_cache",
    "get_permission_invalidator",
    "get_permission_resolver",
    "get_role_service",
    "get_user_service",
    "require_roles",
    "requested_company_id",
]
