"""Core constants: cache key prefixes and shared literal values.

Single source of truth for cache key structure (DRY). Used by
app.infrastructure.cache.keys.
"""

# Cache key prefixes (used with :<user_id>)
CACHE_PREFIX_PERMISSION = "permission"
CACHE_PREFIX_PERMISSION_VERSION = "permission-version"
CACHE_KEY_PERMISSION_EPOCH = "permission-epoch"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"

# Role names: uppercase letters and underscores only
ROLE_NAME_PATTERN = r"^[A-Z_]+$"

# Pagination
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
