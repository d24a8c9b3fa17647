"""Audit log repository. Append-only; retention purge is a bulk delete."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import and_, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.audit_log import (
    AuditLogEntryCreate,
    AuditLogFilter,
    AuditLogResult,
)
from app.infrastructure.persistence.models.audit_log import AuditLog
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.utils.datetime import ensure_utc


def _orm_to_result(row: AuditLog) -> AuditLogResult:
    """Map ORM to application DTO."""
    return AuditLogResult(
        id=row.id,
        timestamp=ensure_utc(row.timestamp),
        user_id=row.user_id,
        user_email=row.user_email,
        user_role=row.user_role,
        company_id=row.company_id,
        action=row.action,
        module=row.module,
        reference_ids=dict(row.reference_ids or {}),
        details=row.details,
        ip_address=row.ip_address,
        user_agent=row.user_agent,
        request_id=row.request_id,
        status=row.status,
        error_message=row.error_message,
    )


class AuditLogRepository(BaseRepository[AuditLog]):
    """Append-only audit log repository. No per-row update/delete."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, AuditLog)

    async def create(self, entry: AuditLogEntryCreate) -> AuditLogResult:
        """Append one audit log entry; return created record."""
        row = AuditLog(
            user_id=entry.user_id,
            user_email=entry.user_email,
            user_role=entry.user_role,
            company_id=entry.company_id,
            action=entry.action,
            module=entry.module,
            reference_ids=dict(entry.reference_ids),
            details=entry.details,
            ip_address=entry.ip_address,
            user_agent=entry.user_agent,
            request_id=entry.request_id,
            status=entry.status,
            error_message=entry.error_message,
        )
        created = await self.add(row)
        return _orm_to_result(created)

    async def list(
        self,
        filters: AuditLogFilter,
        *,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[AuditLogResult], int]:
        """List entries matching filters (newest first) and the total match count."""
        conditions = []
        if filters.company_id is not None:
            conditions.append(AuditLog.company_id == filters.company_id)
        if filters.module is not None:
            conditions.append(AuditLog.module == filters.module)
        if filters.action is not None:
            conditions.append(AuditLog.action == filters.action)
        if filters.status is not None:
            conditions.append(AuditLog.status == filters.status)
        if filters.user_id is not None:
            conditions.append(AuditLog.user_id == filters.user_id)

        stmt = select(AuditLog)
        if conditions:
            stmt = stmt.where(and_(*conditions))
        total = await self._count(stmt)
        rows = await self._scalars(
            stmt.order_by(AuditLog.timestamp.desc()).offset(skip).limit(limit)
        )
        return [_orm_to_result(r) for r in rows], total

    async def purge_older_than(self, cutoff: datetime) -> int:
        """Bulk-delete entries with timestamp before cutoff. Returns rows removed."""
        result = await self._execute(delete(AuditLog).where(AuditLog.timestamp < cutoff))
        return int(result.rowcount or 0)
