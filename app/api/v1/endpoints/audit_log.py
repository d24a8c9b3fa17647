"""Audit log API: list audit entries (who did what, to which company, when)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.api.v1.dependencies import authorize, get_audit_log_repo
from app.application.dtos.audit_log import AuditLogFilter
from app.application.dtos.user import UserResult
from app.domain.enums import Permission
from app.infrastructure.persistence.repositories import AuditLogRepository
from app.schemas.audit_log import AuditLogEntryResponse
from app.schemas.common import ApiResponse, Page, ok
from app.shared.enums import AuditAction, AuditModule, AuditStatus

router = APIRouter()


@router.get("", response_model=ApiResponse[Page[AuditLogEntryResponse]])
async def list_audit_logs(
    current_user: Annotated[
        UserResult,
        Depends(authorize(company_scoped=True, permissions=[Permission.AUDIT_LOG_VIEW])),
    ],
    audit_repo: Annotated[AuditLogRepository, Depends(get_audit_log_repo)],
    company_id: str | None = Query(None, description="Super-admin only: one company"),
    module: AuditModule | None = Query(None),
    action: AuditAction | None = Query(None),
    status: AuditStatus | None = Query(None),
    user_id: str | None = Query(None, description="Filter by acting user id"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
):
    """List audit entries, newest first. Tenant admins only see their own company."""
    filters = AuditLogFilter(
        company_id=company_id if current_user.is_super_admin else current_user.company_id,
        module=module.value if module else None,
        action=action.value if action else None,
        status=status.value if status else None,
        user_id=user_id,
    )
    items, total = await audit_repo.list(filters, skip=(page - 1) * limit, limit=limit)
    data = Page[AuditLogEntryResponse](
        items=[AuditLogEntryResponse.model_validate(e) for e in items],
        total=total,
        page=page,
        limit=limit,
    )
    return ok(data, "Audit logs retrieved")
