"""
Cache Module

Provides two-tier caching (L1 in-memory + L2 remote store).
"""

from .cache_manager import (
    CacheManager,
    close_cache,
    get_cache_manager,
    init_cache,
)
from .key_builder import CacheKeys
from .memory_tier import MemoryTier
from .remote_client import RemoteClient, connect_remote
from .ttl_policy import TTLPolicy, TTLTier

__all__ = [
    "CacheManager",
    "get_cache_manager",
    "init_cache",
    "close_cache",
    "CacheKeys",
    "MemoryTier",
    "RemoteClient",
    "connect_remote",
    "TTLPolicy",
    "TTLTier",
]
