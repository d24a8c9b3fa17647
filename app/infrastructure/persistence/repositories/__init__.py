"""Persistence repositories (SQLAlchemy implementations of the application ports)."""

from app.infrastructure.persistence.repositories.audit_log_repo import AuditLogRepository
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.persistence.repositories.company_repo import CompanyRepository
from app.infrastructure.persistence.repositories.role_assignment_repo import (
    RoleAssignmentRepository,
    visible_assignment,
)
from app.infrastructure.persistence.repositories.role_repo import RoleRepository
from app.infrastructure.persistence.repositories.user_repo import UserRepository

__all__ = [
    "AuditLogRepository",
    "BaseRepository",
    "CompanyRepository",
    "RoleAssignmentRepository",
    "RoleRepository",
    "UserRepository",
    "visible_assignment",
]
