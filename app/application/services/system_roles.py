"""Built-in (system) roles seeded at deployment.

One global role per primary role, carrying that role's default permission
set; SYSTEM_ADMIN additionally carries role assignment and role management.
System roles are read-only through the API and are only (re)written here.
"""

from __future__ import annotations

import logging

from app.application.dtos.role import RoleCreate, RoleResult
from app.application.interfaces.repositories import IRoleRepository
from app.domain.enums import Permission, PrimaryRole
from app.domain.permissions import default_permissions

logger = logging.getLogger(__name__)

SYSTEM_ROLES: tuple[RoleCreate, ...] = (
    RoleCreate(
        name="SYSTEM_SUPER_ADMIN",
        display_name="Super Admin",
        description="Full access to every company and system setting",
        permissions=default_permissions(PrimaryRole.SUPER_ADMIN),
        is_system=True,
    ),
    RoleCreate(
        name="SYSTEM_ADMIN",
        display_name="Company Admin",
        description="Manages users, drivers, vehicles, expenses and roles of one company",
        permissions=default_permissions(PrimaryRole.ADMIN)
        | {Permission.USER_ASSIGN_ROLE, Permission.ROLE_MANAGEMENT},
        is_system=True,
    ),
    RoleCreate(
        name="SYSTEM_MANAGER",
        display_name="Fleet Manager",
        description="Manages drivers and vehicles and approves expenses",
        permissions=default_permissions(PrimaryRole.MANAGER),
        is_system=True,
    ),
    RoleCreate(
        name="SYSTEM_VIEWER",
        display_name="Viewer",
        description="Read-only access to fleet data and reports",
        permissions=default_permissions(PrimaryRole.VIEWER),
        is_system=True,
    ),
    RoleCreate(
        name="SYSTEM_DRIVER",
        display_name="Driver",
        description="Submits and manages own expenses",
        permissions=default_permissions(PrimaryRole.DRIVER),
        is_system=True,
    ),
)


async def seed_system_roles(role_repo: IRoleRepository) -> list[RoleResult]:
    """Create or overwrite every system role. Idempotent."""
    seeded = [await role_repo.upsert_system_role(data) for data in SYSTEM_ROLES]
    logger.info("Seeded %d system roles", len(seeded))
    return seeded
