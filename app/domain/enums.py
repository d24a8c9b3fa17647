"""Domain enumerations for the Fleetflow application.

Enums represent fixed sets of domain values: primary roles, permission
tokens, user and company status. Permission is a closed enumeration;
unknown tokens fail at parse time (pydantic) or at Permission(value).
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings.

        Returns:
            List of enum value strings (e.g. for validation or serialization).
        """
        return [member.value for member in cls]  # type: ignore[attr-defined]


class PrimaryRole(_ValuesMixin, str, Enum):
    """Fixed role stored directly on a user account.

    SUPER_ADMIN is tenant-less; every other primary role belongs to a company.
    """

    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    VIEWER = "VIEWER"
    DRIVER = "DRIVER"


class Permission(_ValuesMixin, str, Enum):
    """Atomic capability token."""

    COMPANY_CREATE = "COMPANY_CREATE"
    COMPANY_READ = "COMPANY_READ"
    COMPANY_UPDATE = "COMPANY_UPDATE"
    COMPANY_DELETE = "COMPANY_DELETE"

    USER_CREATE = "USER_CREATE"
    USER_READ = "USER_READ"
    USER_UPDATE = "USER_UPDATE"
    USER_DELETE = "USER_DELETE"
    USER_ASSIGN_ROLE = "USER_ASSIGN_ROLE"

    DRIVER_CREATE = "DRIVER_CREATE"
    DRIVER_READ = "DRIVER_READ"
    DRIVER_UPDATE = "DRIVER_UPDATE"
    DRIVER_DELETE = "DRIVER_DELETE"

    VEHICLE_CREATE = "VEHICLE_CREATE"
    VEHICLE_READ = "VEHICLE_READ"
    VEHICLE_UPDATE = "VEHICLE_UPDATE"
    VEHICLE_DELETE = "VEHICLE_DELETE"
    VEHICLE_ASSIGN = "VEHICLE_ASSIGN"

    EXPENSE_CREATE = "EXPENSE_CREATE"
    EXPENSE_READ = "EXPENSE_READ"
    EXPENSE_UPDATE = "EXPENSE_UPDATE"
    EXPENSE_DELETE = "EXPENSE_DELETE"
    EXPENSE_APPROVE = "EXPENSE_APPROVE"
    EXPENSE_EXPORT = "EXPENSE_EXPORT"

    REPORT_VIEW = "REPORT_VIEW"
    REPORT_EXPORT = "REPORT_EXPORT"
    DASHBOARD_VIEW = "DASHBOARD_VIEW"

    SYSTEM_SETTINGS = "SYSTEM_SETTINGS"
    AUDIT_LOG_VIEW = "AUDIT_LOG_VIEW"
    ROLE_MANAGEMENT = "ROLE_MANAGEMENT"


class UserStatus(_ValuesMixin, str, Enum):
    """User account status. Only ACTIVE accounts pass authentication."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"


class CompanyStatus(_ValuesMixin, str, Enum):
    """Company (tenant) lifecycle status."""

    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    CANCELLED = "CANCELLED"


class CompanyPlan(_ValuesMixin, str, Enum):
    """Subscription plan of a company."""

    STARTER = "STARTER"
    PROFESSIONAL = "PROFESSIONAL"
    ENTERPRISE = "ENTERPRISE"
