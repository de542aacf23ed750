from .admin import (
    CacheStatsResponse,
    InvalidationRequest,
    InvalidationResponse,
    KeyDeleteResponse,
)

__all__ = [
    "CacheStatsResponse",
    "InvalidationRequest",
    "InvalidationResponse",
    "KeyDeleteResponse",
]
