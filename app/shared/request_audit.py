"""Request provenance helpers for audit entries (client IP, user agent, request id)."""

from starlette.requests import Request


def get_client_ip(request: Request) -> str | None:
    """First X-Forwarded-For hop when present, else the socket peer."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.client.host if request.client else None


def get_audit_request_context(request: Request) -> tuple[str | None, str | None, str | None]:
    """Return (request_id, ip_address, user_agent) for the current request."""
    request_id = getattr(request.state, "request_id", None)
    return request_id, get_client_ip(request), request.headers.get("User-Agent")
