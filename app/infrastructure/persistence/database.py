"""Persistence: async engine, session factory, and Base for SQLAlchemy ORM.

Schema is managed by Alembic migrations in production (PostgreSQL via
asyncpg). Local runs and tests use SQLite via aiosqlite.

Engine and session factory are created lazily on first use (get_db /
get_db_transactional) so import does not trigger Settings validation.

Write sessions support post-commit hooks: callbacks registered with
register_after_commit() run only once the transaction has committed. The
permission cache uses them to repeat invalidations after the new state is
visible to other sessions.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from app.core.config import get_settings

logger = logging.getLogger(__name__)

AfterCommitCallback = Callable[[], Awaitable[None]]

_AFTER_COMMIT_KEY = "after_commit"

# Set by _ensure_engine() on first use; avoids get_settings() at import time.
engine: Any = None
AsyncSessionLocal: async_sessionmaker[AsyncSession] | None = None


def _ensure_engine() -> None:
    """Create engine and AsyncSessionLocal on first use."""
    global engine, AsyncSessionLocal
    if AsyncSessionLocal is not None:
        return
    settings = get_settings()
    if settings.is_sqlite:
        engine = create_async_engine(
            settings.database_url,
            echo=settings.database_echo,
            poolclass=NullPool,
        )
    else:
        pool_size = settings.db_pool_size if settings.db_pool_size is not None else 20
        max_overflow = (
            settings.db_max_overflow if settings.db_max_overflow is not None else 30
        )
        command_timeout = (
            settings.db_command_timeout
            if settings.db_command_timeout is not None
            else 60
        )
        engine = create_async_engine(
            settings.database_url,
            echo=settings.database_echo,
            pool_pre_ping=True,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_recycle=3600,
            connect_args={"command_timeout": command_timeout},
        )
    AsyncSessionLocal = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
        autocommit=False,
    )


def get_engine() -> Any:
    """Return the async engine, creating it on first use."""
    _ensure_engine()
    return engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the session factory, creating it on first use.

    Used by components that outlive a request (audit recorder, scripts).
    """
    _ensure_engine()
    assert AsyncSessionLocal is not None
    return AsyncSessionLocal


async def dispose_engine() -> None:
    """Dispose the engine and reset the lazy globals (shutdown, tests)."""
    global engine, AsyncSessionLocal
    if engine is not None:
        await engine.dispose()
    engine = None
    AsyncSessionLocal = None


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy declarative models."""


def register_after_commit(session: AsyncSession, callback: AfterCommitCallback) -> None:
    """Run callback after the session's transaction commits.

    Callbacks are dropped on rollback. Sessions that are not opened through
    get_db_transactional never run them.
    """
    session.info.setdefault(_AFTER_COMMIT_KEY, []).append(callback)


async def run_after_commit(session: AsyncSession) -> None:
    """Run and clear the post-commit callbacks registered on session.

    A failing callback is logged and does not stop the others; the
    transaction is already committed at this point.
    """
    callbacks: list[AfterCommitCallback] = session.info.pop(_AFTER_COMMIT_KEY, [])
    for callback in callbacks:
        try:
            await callback()
        except Exception:
            logger.warning("Post-commit callback failed", exc_info=True)


def discard_after_commit(session: AsyncSession) -> None:
    """Drop pending post-commit callbacks (after a rollback)."""
    session.info.pop(_AFTER_COMMIT_KEY, None)


async def get_db():
    """Database session dependency for read operations.

    Does not commit; use get_db_transactional for writes.
    Yields a session and closes it on exit.
    """
    _ensure_engine()
    assert AsyncSessionLocal is not None
    async with AsyncSessionLocal() as session:
        yield session


async def get_db_transactional():
    """Database session dependency for write operations.

    Begins a transaction, commits on success, rolls back on exception.
    Post-commit callbacks run after a successful commit.
    Use for POST, PUT, PATCH, DELETE endpoints, declared with
    scope="function" so the commit happens before the response is sent.
    """
    _ensure_engine()
    assert AsyncSessionLocal is not None
    async with AsyncSessionLocal() as session:
        try:
            async with session.begin():
                yield session
        except BaseException:
            discard_after_commit(session)
            raise
        await run_after_commit(session)
