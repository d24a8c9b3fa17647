"""Cache key builders. Single place for key format.

Key components (user_id) must not contain CACHE_KEY_SEP to avoid ambiguous
or colliding keys.
"""

from app.core.constants import (
    CACHE_KEY_PERMISSION_EPOCH,
    CACHE_KEY_SEP,
    CACHE_PREFIX_PERMISSION,
    CACHE_PREFIX_PERMISSION_VERSION,
)


def _validate_key_component(value: str, name: str) -> None:
    """Raise ValueError if value is empty or contains the cache key separator."""
    if not value:
        raise ValueError(f"Cache key component {name!r} must not be empty")
    if CACHE_KEY_SEP in value:
        raise ValueError(
            f"Cache key component {name!r} must not contain separator {CACHE_KEY_SEP!r}"
        )


def permission_key(user_id: str) -> str:
    """Cache key for a user's effective permission set."""
    _validate_key_component(user_id, "user_id")
    return f"{CACHE_PREFIX_PERMISSION}{CACHE_KEY_SEP}{user_id}"


def permission_version_key(user_id: str) -> str:
    """Cache key for a user's invalidation counter."""
    _validate_key_component(user_id, "user_id")
    return f"{CACHE_PREFIX_PERMISSION_VERSION}{CACHE_KEY_SEP}{user_id}"


def permission_pattern() -> str:
    """SCAN pattern matching every cached permission set."""
    return f"{CACHE_PREFIX_PERMISSION}{CACHE_KEY_SEP}*"


def permission_epoch_key() -> str:
    """Cache key for the global invalidation counter."""
    return CACHE_KEY_PERMISSION_EPOCH
