"""Audit declaration dependency.

Routes declare what to record with audit(...) in their dependencies list;
AuditLogMiddleware writes the row once the response is finalized. Declared
ahead of the authorization dependencies, so rejected requests are recorded
as FAILED too.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

from fastapi import Request

from app.middleware.audit_log import AuditSpec
from app.shared.enums import AuditAction, AuditModule

PATH_REFERENCE_KEYS = ("id", "role_id", "user_id", "company_id")


async def _json_body(request: Request) -> dict[str, Any]:
    if "application/json" not in request.headers.get("content-type", ""):
        return {}
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {}
    return body if isinstance(body, dict) else {}


def audit(
    action: AuditAction,
    module: AuditModule,
    *,
    reference_ids: dict[str, Any] | None = None,
    body_keys: Iterable[str] = (),
    details: str | None = None,
):
    """Dependency factory: store an AuditSpec for this request on request.state.

    Reference ids are the static reference_ids, the path params named in
    PATH_REFERENCE_KEYS and the JSON body fields named in body_keys.
    """
    static_refs = dict(reference_ids or {})
    keys = tuple(body_keys)

    async def _audit(request: Request) -> None:
        refs = dict(static_refs)
        for key in PATH_REFERENCE_KEYS:
            if key in request.path_params:
                refs[key] = request.path_params[key]
        if keys:
            body = await _json_body(request)
            for key in keys:
                if body.get(key) is not None:
                    refs[key] = body[key]
        request.state.audit_spec = AuditSpec(
            action=action, module=module, reference_ids=refs, details=details
        )

    return _audit
