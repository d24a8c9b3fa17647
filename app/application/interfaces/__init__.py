"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure.
"""

from app.application.interfaces.repositories import (
    IAuditLogRepository,
    ICompanyRepository,
    IRoleAssignmentRepository,
    IRoleRepository,
    IUserRepository,
)
from app.application.interfaces.services import (
    IAuditRecorder,
    IPermissionInvalidator,
    IPermissionResolver,
)

__all__ = [
    "IAuditLogRepository",
    "IAuditRecorder",
    "ICompanyRepository",
    "IPermissionInvalidator",
    "IPermissionResolver",
    "IRoleAssignmentRepository",
    "IRoleRepository",
    "IUserRepository",
]
