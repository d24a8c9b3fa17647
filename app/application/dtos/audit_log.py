"""DTOs for the audit log (security-relevant action record)."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class AuditLogEntryCreate:
    """Input for appending one audit log record. Append-only; no update."""

    action: str
    module: str
    status: str
    user_id: str | None = None
    user_email: str | None = None
    user_role: str | None = None
    company_id: str | None = None
    reference_ids: dict[str, Any] = field(default_factory=dict)
    details: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    request_id: str | None = None
    error_message: str | None = None


@dataclass(frozen=True)
class AuditLogResult:
    """Single audit log entry (read-model for list)."""

    id: str
    timestamp: datetime
    user_id: str | None
    user_email: str | None
    user_role: str | None
    company_id: str | None
    action: str
    module: str
    reference_ids: dict[str, Any]
    details: str | None
    ip_address: str | None
    user_agent: str | None
    request_id: str | None
    status: str
    error_message: str | None


@dataclass(frozen=True)
class AuditLogFilter:
    """Filters for listing audit log entries. company_id None means all companies."""

    company_id: str | None = None
    module: str | None = None
    action: str | None = None
    status: str | None = None
    user_id: str | None = None
