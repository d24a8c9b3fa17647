"""Security: JWT and password hashing."""

from app.infrastructure.security.jwt import (
    create_access_token,
    create_user_token,
    verify_token,
)
from app.infrastructure.security.password import (
    hash_password,
    hash_password_async,
    verify_password,
    verify_password_async,
)

__all__ = [
    "create_access_token",
    "create_user_token",
    "hash_password",
    "hash_password_async",
    "verify_password",
    "verify_password_async",
    "verify_token",
]
