"""
Cache-Related Exceptions

All exceptions raised by the remote store clients. The cache facade catches
every one of them at its call sites; they never reach facade callers.
"""

from storefront_cache.core.exceptions.base import StorefrontCacheError


class CacheError(StorefrontCacheError):
    """Base exception for cache-related errors."""
    pass


class CacheConnectionError(CacheError):
    """
    Raised when the remote store cannot be reached.

    Common causes:
    - Network error or DNS failure
    - Request timeout
    - Non-2xx HTTP status from the REST endpoint
    - Authentication failure (bad token)
    """
    pass


class CacheKeyError(CacheError):
    """
    Raised when the remote store rejects a command.

    Common causes:
    - `{"error": ...}` payload from the REST endpoint
    - Redis error reply (wrong type, unknown command)
    - Malformed response body
    """
    pass
