"""
Core Module

Foundational components: configuration, logging and exceptions.
"""

from .exceptions import (
    CacheConnectionError,
    CacheError,
    CacheKeyError,
    ConfigurationError,
    StorefrontCacheError,
)
from .logging import (
    clear_request_context,
    get_logger,
    log_stage,
    set_request_context,
    setup_logging,
)

__all__ = [
    "StorefrontCacheError",
    "ConfigurationError",
    "CacheError",
    "CacheConnectionError",
    "CacheKeyError",
    "get_logger",
    "log_stage",
    "setup_logging",
    "set_request_context",
    "clear_request_context",
]
