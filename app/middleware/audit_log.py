"""Audit log middleware.

Routes declare intent with the audit() dependency, which stores an AuditSpec
on request.state. After the handler finishes, this middleware turns the AuditSpec
plus the final status into an audit entry and attaches the write as a
response background task, so it runs after the body has been sent. When the
handler raised instead of responding, the write is scheduled on the
recorder and the exception propagates unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field, replace
from typing import Any

from starlette.background import BackgroundTask, BackgroundTasks
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.application.dtos.audit_log import AuditLogEntryCreate
from app.shared.enums import AuditAction, AuditModule, AuditStatus
from app.shared.request_audit import get_audit_request_context

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuditSpec:
    """What a route wants recorded about the current request."""

    action: AuditAction
    module: AuditModule
    reference_ids: dict[str, Any] = field(default_factory=dict)
    details: str | None = None

    def with_reference(self, **reference_ids: Any) -> "AuditSpec":
        """Copy with extra reference ids (e.g. the id of a row the handler created)."""
        return replace(self, reference_ids={**self.reference_ids, **reference_ids})


def build_audit_entry(
    request: Request, spec: AuditSpec, status_code: int | None
) -> AuditLogEntryCreate:
    """Combine spec, the authenticated account (if any) and request provenance."""
    user = getattr(request.state, "current_user", None)
    request_id, ip_address, user_agent = get_audit_request_context(request)
    failed = status_code is None or status_code >= 400
    return AuditLogEntryCreate(
        action=spec.action.value,
        module=spec.module.value,
        status=(AuditStatus.FAILED if failed else AuditStatus.SUCCESS).value,
        user_id=user.id if user else None,
        user_email=user.email if user else None,
        user_role=user.role.value if user else None,
        company_id=(user.company_id if user else None) or spec.reference_ids.get("company_id"),
        reference_ids=dict(spec.reference_ids),
        details=spec.details,
        ip_address=ip_address,
        user_agent=user_agent,
        request_id=request_id,
        error_message=(
            None
            if not failed
            else f"HTTP {status_code}" if status_code is not None else "Unhandled error"
        ),
    )


def _chain(response: Response, task: BackgroundTask) -> None:
    existing = response.background
    if existing is None:
        response.background = task
        return
    tasks = BackgroundTasks()
    tasks.add_task(existing)
    tasks.add_task(task.func, *task.args, **task.kwargs)
    response.background = tasks


class AuditLogMiddleware(BaseHTTPMiddleware):
    """Record audited requests after the response is finalized."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        try:
            response = await call_next(request)
        except Exception:
            spec = getattr(request.state, "audit_spec", None)
            recorder = getattr(request.app.state, "audit_recorder", None)
            if spec is not None and recorder is not None:
                recorder.schedule(build_audit_entry(request, spec, None))
            raise

        spec = getattr(request.state, "audit_spec", None)
        recorder = getattr(request.app.state, "audit_recorder", None)
        if spec is None or recorder is None:
            return response
        entry = build_audit_entry(request, spec, response.status_code)
        _chain(response, BackgroundTask(recorder.write, entry))
        return response
