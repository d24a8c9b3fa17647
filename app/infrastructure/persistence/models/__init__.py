"""Persistence models: ORM entities (mixins live in models.mixins).

Importing this package registers every table on Base.metadata (Alembic
autogenerate and test schema creation rely on it).
"""

from app.infrastructure.persistence.models.audit_log import AuditLog
from app.infrastructure.persistence.models.company import Company
from app.infrastructure.persistence.models.role import Role
from app.infrastructure.persistence.models.role_assignment import RoleAssignment
from app.infrastructure.persistence.models.user import User

__all__ = [
    "AuditLog",
    "Company",
    "User",
    "Role",
    "RoleAssignment",
]
