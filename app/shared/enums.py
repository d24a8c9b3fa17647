"""Shared enumerations for the Fleetflow application.

Audit enums used by application and infrastructure. Authorization enums
(PrimaryRole, Permission) live in app.domain.enums.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class AuditAction(_ValuesMixin, str, Enum):
    """Action verbs recorded in the audit log."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    EXPORT = "EXPORT"
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    ASSIGN = "ASSIGN"
    REVOKE = "REVOKE"


class AuditModule(_ValuesMixin, str, Enum):
    """Functional area an audited action belongs to."""

    USER = "USER"
    COMPANY = "COMPANY"
    EXPENSE = "EXPENSE"
    REPORT = "REPORT"
    AUTH = "AUTH"
    VEHICLE = "VEHICLE"
    ROLE = "ROLE"


class AuditStatus(_ValuesMixin, str, Enum):
    """Outcome of an audited request."""

    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
