"""Seed (create or overwrite) the five global system roles.

Usage:
    uv run python -m scripts.seed_roles
Idempotent: safe to run on every deployment. All imports use app.*.
"""

import asyncio

from app.application.services import seed_system_roles
from app.core.config import get_settings
from app.infrastructure.persistence.database import dispose_engine, get_session_factory
from app.infrastructure.persistence.repositories import RoleRepository
from app.shared.telemetry import setup_logging


async def main() -> None:
    """Upsert SYSTEM_SUPER_ADMIN, SYSTEM_ADMIN, SYSTEM_MANAGER, SYSTEM_VIEWER, SYSTEM_DRIVER."""
    get_settings()
    setup_logging()
    try:
        async with get_session_factory()() as session:
            async with session.begin():
                roles = await seed_system_roles(RoleRepository(session))
        for role in roles:
            print(f"{role.name}: {len(role.permissions)} permissions ({role.id})")
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
