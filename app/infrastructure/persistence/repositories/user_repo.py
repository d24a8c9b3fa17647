"""User repository. Reads return UserResult; login lookups return the ORM row."""

from datetime import datetime

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.user import UserResult
from app.domain.enums import PrimaryRole, UserStatus
from app.infrastructure.persistence.models.user import User
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.utils.datetime import ensure_utc


def _user_to_result(u: User) -> UserResult:
    return UserResult(
        id=u.id,
        email=u.email,
        name=u.name,
        role=PrimaryRole(u.role),
        company_id=u.company_id,
        status=UserStatus(u.status),
        last_active=ensure_utc(u.last_active),
        created_at=ensure_utc(u.created_at),
    )


class UserRepository(BaseRepository[User]):
    """User persistence."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, User)

    async def get_by_id(self, user_id: str) -> UserResult | None:
        user = await self.get_entity(user_id)
        return _user_to_result(user) if user else None

    async def get_entity_by_email(self, email: str) -> User | None:
        """Return the ORM row (with password hash) for login."""
        result = await self._execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def email_exists(self, email: str) -> bool:
        return await self.get_entity_by_email(email) is not None

    async def create_user(
        self,
        *,
        email: str,
        name: str,
        hashed_password: str,
        role: PrimaryRole,
        company_id: str | None,
    ) -> UserResult:
        """Insert a user (flush only; the caller owns the transaction)."""
        user = User(
            email=email.lower(),
            name=name,
            hashed_password=hashed_password,
            role=role.value,
            company_id=company_id,
            status=UserStatus.ACTIVE.value,
        )
        created = await self.add(user)
        return _user_to_result(created)

    async def touch_last_active(self, user_id: str, when: datetime) -> None:
        await self._execute(
            update(User).where(User.id == user_id).values(last_active=when)
        )

    async def set_status(self, user_id: str, status: UserStatus) -> UserResult | None:
        user = await self.get_entity(user_id)
        if user is None:
            return None
        user.status = status.value
        saved = await self.save(user)
        return _user_to_result(saved)

    async def delete_user(self, user_id: str) -> bool:
        """Hard-delete the user row. Returns False when no row matched."""
        result = await self._execute(delete(User).where(User.id == user_id))
        return bool(result.rowcount)
