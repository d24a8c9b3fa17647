"""Bearer token issue and verification.

Claims: sub (user id), email, role (primary role), company_id (absent for
the super-admin), exp. Signed with settings.secret_key / settings.algorithm.
"""

from datetime import timedelta
from typing import Any, cast

from jose import JWTError, jwt

from app.core.config import get_settings
from app.domain.enums import PrimaryRole
from app.shared.utils.datetime import utc_now


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed JWT with the given claims plus exp.

    Args:
        data: Claims to encode (sub, email, role, company_id).
        expires_delta: Optional TTL; else settings.access_token_expire_minutes.

    Returns:
        Encoded JWT string.
    """
    settings = get_settings()
    to_encode = data.copy()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    to_encode["exp"] = utc_now() + expires_delta
    encoded = jwt.encode(
        to_encode,
        settings.secret_key.get_secret_value(),
        algorithm=settings.algorithm,
    )
    return cast(str, encoded)


def create_user_token(
    user_id: str, email: str, role: PrimaryRole, company_id: str | None
) -> tuple[str, int]:
    """Issue a token for an account. Drivers get the longer mobile-session TTL.

    Returns:
        (token, lifetime in seconds).
    """
    settings = get_settings()
    minutes = (
        settings.driver_access_token_expire_minutes
        if role == PrimaryRole.DRIVER
        else settings.access_token_expire_minutes
    )
    claims: dict[str, Any] = {"sub": user_id, "email": email, "role": role.value}
    if company_id is not None:
        claims["company_id"] = company_id
    return create_access_token(claims, timedelta(minutes=minutes)), minutes * 60


def verify_token(token: str) -> dict[str, Any]:
    """Verify and decode a JWT. Returns the payload.

    Raises:
        ValueError: If token is invalid, expired, or missing sub/exp.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    if not payload.get("sub"):
        raise ValueError("Token missing required claim: sub")
    return payload
