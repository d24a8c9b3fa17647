"""Base repository: generic lookups and persistence helpers."""

from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.exceptions import DependencyException
from app.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with get_entity, add, save, remove and count.

    Connectivity failures (lost connection, timeouts) surface as
    DependencyException; integrity errors propagate so callers can map them
    to conflicts.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def _execute(self, stmt: Any) -> Any:
        """Execute a statement, translating connectivity errors."""
        try:
            return await self.db.execute(stmt)
        except (OperationalError, InterfaceError) as exc:
            raise DependencyException("database", str(exc)) from exc
        except DBAPIError as exc:
            if exc.connection_invalidated:
                raise DependencyException("database", str(exc)) from exc
            raise

    async def _flush(self) -> None:
        try:
            await self.db.flush()
        except (OperationalError, InterfaceError) as exc:
            raise DependencyException("database", str(exc)) from exc

    async def get_entity(self, entity_id: str) -> ModelType | None:
        """Return a single ORM record by primary key, or None."""
        model: Any = self.model
        result = await self._execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def _scalars(self, stmt: Select[Any]) -> Sequence[Any]:
        result = await self._execute(stmt)
        return result.scalars().all()

    async def _count(self, stmt: Select[Any]) -> int:
        """Count rows of a select (wrapped as a subquery)."""
        result = await self._execute(
            select(func.count()).select_from(stmt.order_by(None).subquery())
        )
        return int(result.scalar_one())

    async def add(self, obj: ModelType) -> ModelType:
        """Persist a new record and reload server-side defaults."""
        self.db.add(obj)
        await self._flush()
        await self.db.refresh(obj)
        return obj

    async def save(self, obj: ModelType) -> ModelType:
        """Flush changes to an attached record and reload it."""
        await self._flush()
        await self.db.refresh(obj)
        return obj

    async def remove(self, obj: ModelType) -> None:
        """Delete the record."""
        await self.db.delete(obj)
        await self._flush()
