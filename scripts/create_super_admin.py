"""Create the tenant-less super-admin account.

Usage:
    uv run python -m scripts.create_super_admin <email> <name> [password]
If password is omitted, a random one is printed.
All imports use app.*.
"""

import asyncio
import secrets
import sys

from app.core.config import get_settings
from app.domain.enums import PrimaryRole
from app.infrastructure.persistence.database import dispose_engine, get_session_factory
from app.infrastructure.persistence.repositories import UserRepository
from app.infrastructure.security import hash_password_async


async def main() -> None:
    """Create a SUPER_ADMIN user with no company."""
    if len(sys.argv) < 3:
        print(
            "Usage: uv run python -m scripts.create_super_admin <email> <name> [password]",
            file=sys.stderr,
        )
        sys.exit(1)
    email = sys.argv[1]
    name = sys.argv[2]
    password = sys.argv[3] if len(sys.argv) > 3 else secrets.token_urlsafe(12)
    if len(password) < 8:
        print("Password must be at least 8 characters", file=sys.stderr)
        sys.exit(1)

    get_settings()
    try:
        async with get_session_factory()() as session:
            async with session.begin():
                user_repo = UserRepository(session)
                if await user_repo.email_exists(email):
                    print(f"Email already registered: {email}", file=sys.stderr)
                    sys.exit(1)
                user = await user_repo.create_user(
                    email=email,
                    name=name,
                    hashed_password=await hash_password_async(password),
                    role=PrimaryRole.SUPER_ADMIN,
                    company_id=None,
                )
        print(f"Created super admin: {user.id} ({user.email})")
        if len(sys.argv) <= 3:
            print(f"Password: {password}")
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
