"""Static permission tables: primary-role defaults and the admin blocklist.

DEFAULT_ROLE_PERMISSIONS is the base of every effective permission set;
custom role assignments only ever add to it.
"""

from collections.abc import Iterable

from app.domain.enums import Permission, PrimaryRole

P = Permission

DEFAULT_ROLE_PERMISSIONS: dict[PrimaryRole, frozenset[Permission]] = {
    PrimaryRole.SUPER_ADMIN: frozenset(Permission),
    PrimaryRole.ADMIN: frozenset(
        {
            P.COMPANY_READ,
            P.COMPANY_UPDATE,
            P.USER_CREATE,
            P.USER_READ,
            P.USER_UPDATE,
            P.USER_DELETE,
            P.DRIVER_CREATE,
            P.DRIVER_READ,
            P.DRIVER_UPDATE,
            P.DRIVER_DELETE,
            P.VEHICLE_CREATE,
            P.VEHICLE_READ,
            P.VEHICLE_UPDATE,
            P.VEHICLE_DELETE,
            P.VEHICLE_ASSIGN,
            P.EXPENSE_CREATE,
            P.EXPENSE_READ,
            P.EXPENSE_UPDATE,
            P.EXPENSE_DELETE,
            P.EXPENSE_APPROVE,
            P.EXPENSE_EXPORT,
            P.REPORT_VIEW,
            P.REPORT_EXPORT,
            P.DASHBOARD_VIEW,
            P.AUDIT_LOG_VIEW,
        }
    ),
    PrimaryRole.MANAGER: frozenset(
        {
            P.DRIVER_READ,
            P.DRIVER_UPDATE,
            P.VEHICLE_READ,
            P.VEHICLE_UPDATE,
            P.VEHICLE_ASSIGN,
            P.EXPENSE_READ,
            P.EXPENSE_APPROVE,
            P.EXPENSE_EXPORT,
            P.REPORT_VIEW,
            P.REPORT_EXPORT,
            P.DASHBOARD_VIEW,
        }
    ),
    PrimaryRole.VIEWER: frozenset(
        {
            P.DRIVER_READ,
            P.VEHICLE_READ,
            P.EXPENSE_READ,
            P.REPORT_VIEW,
            P.DASHBOARD_VIEW,
        }
    ),
    PrimaryRole.DRIVER: frozenset(
        {
            P.EXPENSE_CREATE,
            P.EXPENSE_READ,
            P.EXPENSE_UPDATE,
            P.EXPENSE_DELETE,
            P.VEHICLE_READ,
        }
    ),
}

# Tenant-management and system-settings tokens reserved for the super-admin.
ADMIN_RESTRICTED_PERMISSIONS: frozenset[Permission] = frozenset(
    {
        P.SYSTEM_SETTINGS,
        P.COMPANY_CREATE,
        P.COMPANY_DELETE,
        P.ROLE_MANAGEMENT,
    }
)


def default_permissions(role: PrimaryRole) -> frozenset[Permission]:
    """Return the built-in permission set of a primary role (empty for unknown)."""
    return DEFAULT_ROLE_PERMISSIONS.get(role, frozenset())


def restricted_in(permissions: Iterable[Permission]) -> list[Permission]:
    """Return the tokens of permissions that a tenant admin may not grant, sorted."""
    return sorted(set(permissions) & ADMIN_RESTRICTED_PERMISSIONS, key=lambda p: p.value)


def assignable_permissions(role: PrimaryRole) -> list[Permission]:
    """Permission tokens an actor with this primary role may put into a role.

    Super-admins may use every token; tenant admins get the blocklist removed.
    """
    if role == PrimaryRole.SUPER_ADMIN:
        return list(Permission)
    return [p for p in Permission if p not in ADMIN_RESTRICTED_PERMISSIONS]


def group_permissions(permissions: Iterable[Permission]) -> dict[str, list[Permission]]:
    """Group tokens by category for role-editing screens."""
    perms = list(permissions)
    return {
        "company": [p for p in perms if p.value.startswith("COMPANY_")],
        "user": [p for p in perms if p.value.startswith("USER_")],
        "driver": [p for p in perms if p.value.startswith("DRIVER_")],
        "vehicle": [p for p in perms if p.value.startswith("VEHICLE_")],
        "expense": [p for p in perms if p.value.startswith("EXPENSE_")],
        "report": [
            p
            for p in perms
            if p.value.startswith("REPORT_") or p == P.DASHBOARD_VIEW
        ],
        "system": [
            p
            for p in perms
            if p.value.startswith("SYSTEM_")
            or p in (P.AUDIT_LOG_VIEW, P.ROLE_MANAGEMENT)
        ],
    }


def parse_permissions(values: Iterable[str]) -> frozenset[Permission]:
    """Convert stored token strings into Permission members.

    Unknown tokens (e.g. left in the store by an older release) are skipped
    so they can never grant anything.
    """
    parsed: set[Permission] = set()
    for value in values:
        try:
            parsed.add(Permission(value))
        except ValueError:
            continue
    return frozenset(parsed)
