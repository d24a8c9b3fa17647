"""Application DTOs (no ORM dependency)."""

from app.application.dtos.assignment import AssignmentResult
from app.application.dtos.audit_log import (
    AuditLogEntryCreate,
    AuditLogFilter,
    AuditLogResult,
)
from app.application.dtos.company import CompanyCreationResult, CompanyResult
from app.application.dtos.role import RoleCreate, RolePage, RolePatch, RoleResult
from app.application.dtos.user import UserCreate, UserResult

__all__ = [
    "AssignmentResult",
    "AuditLogEntryCreate",
    "AuditLogFilter",
    "AuditLogResult",
    "CompanyCreationResult",
    "CompanyResult",
    "RoleCreate",
    "RolePage",
    "RolePatch",
    "RoleResult",
    "UserCreate",
    "UserResult",
]
