"""
System Constants and Enumerations

This module defines the constants shared by the storefront cache layer:
key namespaces, TTL tier names, remote-store command names and the stage
identifiers used in structured log lines.

Architectural Decision: Centralized constants for maintainability
- Single source of truth for key namespaces used by dozens of call sites
- Type-safe enums for tiers and stages
- Easy to update and track changes
"""

from enum import Enum

# ============================================================================
# Stage Identifiers (for structured logging)
# ============================================================================


class Stage(str, Enum):
    """
    Cache processing stages used to tag log lines.

    Format: {PREFIX}.{SEQUENCE}_{DESCRIPTIVE_NAME}

    Examples:
        log_stage(logger, Stage.L1_LOOKUP, "L1 cache hit", cache_key=key)
    """

    INITIALIZATION = "C.0_INITIALIZATION"
    L1_LOOKUP = "C.1_L1_LOOKUP"
    L2_LOOKUP = "C.2_L2_LOOKUP"
    WRITE = "C.3_WRITE"
    DELETE = "C.4_DELETE"
    INVALIDATION = "C.5_INVALIDATION"
    LOAD = "C.6_READ_THROUGH_LOAD"
    SWEEP = "C.7_L1_SWEEP"
    SHUTDOWN = "C.8_SHUTDOWN"

    REMOTE_CONNECT = "R.0_REMOTE_CONNECT"
    REMOTE_COMMAND = "R.1_REMOTE_COMMAND"


# ============================================================================
# Cache Tiers
# ============================================================================


class CacheTier(str, Enum):
    """
    Two-tier caching levels.

    L1: Process-local memory (instant, no network)
    L2: Remote key-value store (shared across instances)
    """

    L1 = "l1"
    L2 = "l2"


class InvalidationMode(str, Enum):
    """
    How an invalidation fragment is matched against keys.

    PREFIX: keys beginning with the fragment (tenant-scoped bulk invalidation)
    SUBSTRING: keys containing the fragment anywhere
    """

    PREFIX = "prefix"
    SUBSTRING = "substring"


# ============================================================================
# TTL Tier Names
# ============================================================================

TTL_TIER_SHORT = "short"  # volatile data such as order lists
TTL_TIER_MEDIUM = "medium"  # most API responses and product lists
TTL_TIER_LONG = "long"  # rarely-changing data such as resolved permissions

# Default durations (seconds)
MEMORY_RESIDENCY_TTL = 60
REMOTE_DEFAULT_TTL = 10 * 60
SHORT_TTL = 5 * 60
MEDIUM_TTL = 30 * 60
LONG_TTL = 2 * 60 * 60

L1_SWEEP_INTERVAL = 30

# ============================================================================
# Cache Key Namespaces
# ============================================================================

KEY_SEPARATOR = ":"

NS_BOOTSTRAP = "bootstrap"
NS_TENANT = "tenant"
NS_USER = "user"
NS_API = "api"
NS_CHAT = "chat"
NS_SYSTEM = "system"
NS_STATS = "stats"

# ============================================================================
# Remote Store Commands
# ============================================================================

CMD_GET = "GET"
CMD_SET = "SET"
CMD_DEL = "DEL"
CMD_KEYS = "KEYS"

REDIS_URL_SCHEMES = ("redis", "rediss")

# ============================================================================
# HTTP Headers
# ============================================================================

HEADER_REQUEST_ID = "X-Request-ID"
HEADER_TENANT_ID = "X-Tenant-ID"
