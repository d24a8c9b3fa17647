"""HTTP middleware: request ID and audit log.

Applied in main app; order matters (last added = outermost).
"""

from app.middleware.audit_log import AuditLogMiddleware, AuditSpec
from app.middleware.request_id import RequestIDMiddleware

__all__ = [
    "AuditLogMiddleware",
    "AuditSpec",
    "RequestIDMiddleware",
]
