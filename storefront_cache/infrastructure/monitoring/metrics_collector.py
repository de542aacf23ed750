#!/usr/bin/env python3
"""
Metrics Collector with Prometheus Integration

Prometheus metrics for the two-tier cache:
- Hits by tier (L1 memory, L2 remote)
- Misses
- Remote-store failures by operation
- Invalidations by mode
- L1 entry count

Architectural Decision: prometheus-client for industry-standard metrics
- Compatible with Grafana dashboards
- Scraped from GET /admin/metrics
"""

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    Counter,
    Gauge,
    Info,
    generate_latest,
)

from storefront_cache.core.config.settings import get_settings
from storefront_cache.core.logging.logger import get_logger

logger = get_logger(__name__)


# ============================================================================
# Metric Definitions
# ============================================================================

CACHE_HITS = Counter(
    'storefront_cache_hits_total',
    'Total cache hits',
    ['tier']  # l1 or l2
)

CACHE_MISSES = Counter(
    'storefront_cache_misses_total',
    'Total lookups that found nothing in either tier'
)

CACHE_WRITES = Counter(
    'storefront_cache_writes_total',
    'Total cache writes',
    ['ttl_seconds']
)

REMOTE_ERRORS = Counter(
    'storefront_cache_remote_errors_total',
    'Remote store failures absorbed by the cache',
    ['operation', 'error_type']
)

INVALIDATIONS = Counter(
    'storefront_cache_invalidations_total',
    'Invalidation requests',
    ['mode']  # prefix or substring
)

INVALIDATED_KEYS = Counter(
    'storefront_cache_invalidated_keys_total',
    'Keys removed by invalidation',
    ['tier']
)

L1_ENTRIES = Gauge(
    'storefront_cache_l1_entries',
    'Entries currently held in the memory tier'
)

APP_INFO = Info(
    'storefront_cache_app',
    'Application information'
)


class MetricsCollector:
    """
    Centralized metrics collector.

    STAGE-M: Metrics collection

    Usage:
        metrics = get_metrics_collector()
        metrics.record_cache_hit("l1")
        output = metrics.get_prometheus_metrics()
    """

    def __init__(self):
        self.settings = get_settings()

        APP_INFO.info({
            'version': self.settings.app.APP_VERSION,
            'environment': self.settings.app.ENVIRONMENT,
            'app_name': self.settings.app.APP_NAME
        })

        logger.info("Metrics collector initialized", stage="M.0")

    # =========================================================================
    # Cache Metrics
    # =========================================================================

    def record_cache_hit(self, tier: str) -> None:
        """Record cache hit."""
        CACHE_HITS.labels(tier=tier).inc()

    def record_cache_miss(self) -> None:
        """Record cache miss."""
        CACHE_MISSES.inc()

    def record_cache_write(self, ttl_seconds: int) -> None:
        CACHE_WRITES.labels(ttl_seconds=str(ttl_seconds)).inc()

    def record_remote_error(self, operation: str, error_type: str) -> None:
        """Record a remote failure the cache degraded around."""
        REMOTE_ERRORS.labels(operation=operation, error_type=error_type).inc()

    def record_invalidation(self, mode: str, local_removed: int, remote_removed: int) -> None:
        INVALIDATIONS.labels(mode=mode).inc()
        if local_removed:
            INVALIDATED_KEYS.labels(tier="l1").inc(local_removed)
        if remote_removed:
            INVALIDATED_KEYS.labels(tier="l2").inc(remote_removed)

    def set_l1_entries(self, count: int) -> None:
        L1_ENTRIES.set(count)

    # =========================================================================
    # Export
    # =========================================================================

    def get_prometheus_metrics(self) -> bytes:
        """
        Get Prometheus metrics output.

        Returns:
            bytes: Prometheus text format metrics
        """
        return generate_latest(REGISTRY)

    def get_content_type(self) -> str:
        """Get Prometheus content type."""
        return CONTENT_TYPE_LATEST


# Global metrics collector
_metrics: MetricsCollector | None = None


def get_metrics_collector() -> MetricsCollector:
    """Get global metrics collector."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics


def get_prometheus_metrics() -> bytes:
    """Prometheus exposition for the process-wide registry."""
    return get_metrics_collector().get_prometheus_metrics()
