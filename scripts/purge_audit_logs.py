"""Delete audit log entries older than the retention window.

Usage:
    uv run python -m scripts.purge_audit_logs [retention_days]
Defaults to AUDIT_LOG_RETENTION_DAYS (730). Run from cron.
All imports use app.*.
"""

import asyncio
import sys
from datetime import timedelta

from app.core.config import get_settings
from app.infrastructure.persistence.database import dispose_engine, get_session_factory
from app.infrastructure.persistence.repositories import AuditLogRepository
from app.shared.utils.datetime import utc_now


async def main() -> None:
    """Bulk-delete audit rows with timestamp before now - retention."""
    settings = get_settings()
    days = int(sys.argv[1]) if len(sys.argv) > 1 else settings.audit_log_retention_days
    if days <= 0:
        print("Retention must be a positive number of days", file=sys.stderr)
        sys.exit(1)
    cutoff = utc_now() - timedelta(days=days)
    try:
        async with get_session_factory()() as session:
            async with session.begin():
                removed = await AuditLogRepository(session).purge_older_than(cutoff)
        print(f"Purged {removed} audit log entries older than {cutoff.isoformat()}")
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
