"""Best-effort audit writer.

Each write uses its own session and transaction, separate from the request
that produced it, so an audit failure can neither fail nor roll back the
audited operation. Failures are logged and dropped.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.application.dtos.audit_log import AuditLogEntryCreate
from app.infrastructure.persistence.database import get_session_factory
from app.infrastructure.persistence.repositories.audit_log_repo import AuditLogRepository

logger = logging.getLogger(__name__)

SessionFactoryProvider = Callable[[], async_sessionmaker[AsyncSession]]


class AuditRecorder:
    """Persists AuditLogEntryCreate rows outside the request transaction."""

    def __init__(self, session_factory: SessionFactoryProvider = get_session_factory) -> None:
        self._session_factory = session_factory
        self._pending: set[asyncio.Task[None]] = set()

    async def write(self, entry: AuditLogEntryCreate) -> None:
        """Persist entry. Never raises."""
        try:
            factory = self._session_factory()
            async with factory() as session:
                async with session.begin():
                    await AuditLogRepository(session).create(entry)
        except Exception:
            logger.warning(
                "Failed to write audit log (%s %s, user=%s)",
                entry.action,
                entry.module,
                entry.user_id,
                exc_info=True,
            )

    def schedule(self, entry: AuditLogEntryCreate) -> None:
        """Write entry on a background task (used when no response object exists)."""
        task = asyncio.create_task(self.write(entry))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Await every scheduled write (shutdown)."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
