"""
TTL Policy

Closed table of cache durations. Every remote write uses one of these values,
never an ad hoc TTL.

    memory_residency  how long a value lives in L1 once populated (~1 min)
    remote_default    L2 TTL for plain set() calls (~10 min)
    short             volatile data, e.g. order lists (~5 min)
    medium            most API responses and product lists (~30 min)
    long              rarely-changing data, e.g. resolved permissions (~2 h)
"""

from dataclasses import dataclass
from enum import Enum

from storefront_cache.core.config.constants import (
    LONG_TTL,
    MEDIUM_TTL,
    MEMORY_RESIDENCY_TTL,
    REMOTE_DEFAULT_TTL,
    SHORT_TTL,
    TTL_TIER_LONG,
    TTL_TIER_MEDIUM,
    TTL_TIER_SHORT,
)
from storefront_cache.core.config.settings import Settings, get_settings
from storefront_cache.core.logging.logger import get_logger

logger = get_logger(__name__)


class TTLTier(str, Enum):
    """Tiers a caller may select for an explicit-TTL write."""

    SHORT = TTL_TIER_SHORT
    MEDIUM = TTL_TIER_MEDIUM
    LONG = TTL_TIER_LONG


@dataclass(frozen=True)
class TTLPolicy:
    """Durations in seconds."""

    memory_residency: int = MEMORY_RESIDENCY_TTL
    remote_default: int = REMOTE_DEFAULT_TTL
    short: int = SHORT_TTL
    medium: int = MEDIUM_TTL
    long: int = LONG_TTL

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "TTLPolicy":
        """Build the policy from cache settings."""
        cache = (settings or get_settings()).cache
        return cls(
            memory_residency=cache.CACHE_MEMORY_TTL,
            remote_default=cache.CACHE_REMOTE_TTL,
            short=cache.CACHE_TTL_SHORT,
            medium=cache.CACHE_TTL_MEDIUM,
            long=cache.CACHE_TTL_LONG,
        )

    def resolve(self, tier: TTLTier | str | None) -> int:
        """
        Resolve a tier name to its remote TTL.

        Unknown names (and None) fall back to the medium tier; this never
        raises.

        Args:
            tier: "short", "medium", "long" or a TTLTier

        Returns:
            TTL in seconds
        """
        try:
            resolved = TTLTier(tier)
        except (ValueError, TypeError):
            logger.debug("Unknown TTL tier, using medium", tier=tier)
            resolved = TTLTier.MEDIUM

        if resolved is TTLTier.SHORT:
            return self.short
        if resolved is TTLTier.LONG:
            return self.long
        return self.medium
