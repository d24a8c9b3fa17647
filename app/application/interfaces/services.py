"""Service interfaces (ports) for the application layer."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.application.dtos.audit_log import AuditLogEntryCreate
    from app.domain.enums import Permission, PrimaryRole


class IPermissionResolver(Protocol):
    """Protocol for resolving a user's effective permission set."""

    async def resolve(
        self, user_id: str, primary_role: PrimaryRole
    ) -> frozenset[Permission]:
        """Return defaults of primary_role plus permissions of visible assignments."""


class IPermissionInvalidator(Protocol):
    """Protocol for evicting cached permission sets after a mutation."""

    async def user(self, user_id: str) -> None:
        """Evict one user's cached set."""

    async def all(self) -> None:
        """Evict every cached set."""


class IAuditRecorder(Protocol):
    """Protocol for best-effort audit writes."""

    async def write(self, entry: AuditLogEntryCreate) -> None:
        """Persist entry; never raises."""

    def schedule(self, entry: AuditLogEntryCreate) -> None:
        """Persist entry in the background."""
