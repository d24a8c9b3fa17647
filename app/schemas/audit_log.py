"""Request/response schemas for audit log API."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class AuditLogEntryResponse(BaseModel):
    """Single audit log entry (read)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    timestamp: datetime
    user_id: str | None
    user_email: str | None = None
    user_role: str | None = None
    company_id: str | None
    action: str
    module: str
    reference_ids: dict[str, Any]
    details: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    request_id: str | None = None
    status: str
    error_message: str | None = None
