"""
Admin API Models

Request and response bodies for the cache administration endpoints.
"""

from pydantic import BaseModel, Field

from storefront_cache.core.config.constants import InvalidationMode


class CacheStatsResponse(BaseModel):
    """Cache snapshot plus hit/miss counters."""

    entry_count: int = Field(..., ge=0, description="Entries held in the memory tier")
    remote_connected: bool = Field(
        ..., description="Whether a remote client handle exists (not a live probe)"
    )
    l1_hits: int = Field(default=0, ge=0)
    l2_hits: int = Field(default=0, ge=0)
    misses: int = Field(default=0, ge=0)
    total_requests: int = Field(default=0, ge=0)
    hit_rate: float = Field(default=0.0, ge=0.0, le=1.0)
    l1_hit_rate: float = Field(default=0.0, ge=0.0, le=1.0)
    remote_errors: int = Field(default=0, ge=0)
    invalidations: int = Field(default=0, ge=0)
    pending_remote_writes: int = Field(default=0, ge=0)


class InvalidationRequest(BaseModel):
    """
    Bulk invalidation request.

    The pattern is matched literally: as a key prefix, or anywhere in the key.
    """

    pattern: str = Field(..., min_length=1, description="Literal key fragment")
    mode: InvalidationMode = Field(
        default=InvalidationMode.PREFIX, description="'prefix' or 'substring'"
    )


class InvalidationResponse(BaseModel):
    status: str = "invalidated"
    pattern: str
    mode: InvalidationMode
    entry_count: int = Field(..., ge=0, description="Memory-tier entries remaining")


class KeyDeleteResponse(BaseModel):
    status: str = "deleted"
    key: str
