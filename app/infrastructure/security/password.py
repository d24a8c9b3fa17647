"""Password hashing for account credentials.

bcrypt over a base64 SHA-256 digest of the password, so inputs longer than
bcrypt's 72-byte limit still count in full. Hashing is CPU-bound; async
callers use the *_async variants, which run in a worker thread.
"""

import asyncio
import base64
import hashlib

import bcrypt


def _digest(password: str) -> bytes:
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())


def hash_password(password: str) -> str:
    """Return the bcrypt hash of password as text."""
    return bcrypt.hashpw(_digest(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Return True if plain_password matches hashed_password (False on a malformed hash)."""
    try:
        return bool(bcrypt.checkpw(_digest(plain_password), hashed_password.encode("utf-8")))
    except (ValueError, TypeError):
        return False


async def hash_password_async(password: str) -> str:
    return await asyncio.to_thread(hash_password, password)


async def verify_password_async(plain_password: str, hashed_password: str) -> bool:
    return await asyncio.to_thread(verify_password, plain_password, hashed_password)
