"""Infrastructure implementations of application service interfaces."""

from app.infrastructure.services.audit_recorder import AuditRecorder
from app.infrastructure.services.permission_resolver import PermissionResolver

__all__ = [
    "AuditRecorder",
    "PermissionResolver",
]
