#!/usr/bin/env python3
"""
Cache Observability

CacheObserver owns every side effect of a cache operation apart from the
storage itself: stage-tagged logs, hit/miss counters and Prometheus metrics.
StatsReporter produces the minimal snapshot the facade exposes.

Logging Strategy:
- L1 hit:        STAGE-C.1 (debug)
- L2 hit:        STAGE-C.2 (debug)
- Miss:          STAGE-C.2 (debug)
- Write:         STAGE-C.3 (debug)
- Delete:        STAGE-C.4 (debug)
- Invalidation:  STAGE-C.5 (info)
- Remote errors: stage of the failing operation (error, or warning for
                 fire-and-forget writes)
"""

from collections.abc import Callable
from typing import Any

from storefront_cache.core.config.constants import CacheTier, InvalidationMode, Stage
from storefront_cache.core.logging.logger import get_logger, log_stage
from storefront_cache.infrastructure.cache.memory_tier import MemoryTier
from storefront_cache.infrastructure.monitoring.metrics_collector import (
    MetricsCollector,
    get_metrics_collector,
)

logger = get_logger(__name__)

_KEY_LOG_LENGTH = 64

_OPERATION_STAGES = {
    "get": Stage.L2_LOOKUP,
    "set": Stage.WRITE,
    "delete": Stage.DELETE,
    "invalidate": Stage.INVALIDATION,
    "close": Stage.SHUTDOWN,
}


class CacheObserver:
    """
    Tracks cache outcomes and logs them.

    Metrics Tracked:
    - L1 hits, L2 hits, misses
    - Remote errors
    - Invalidations
    """

    def __init__(self, metrics: MetricsCollector | None = None, logger_instance=None):
        """
        Args:
            metrics: Prometheus collector (process-wide collector by default)
            logger_instance: Logger instance
        """
        self._metrics = metrics or get_metrics_collector()
        self._logger = logger_instance or logger

        self._hits_l1 = 0
        self._hits_l2 = 0
        self._misses = 0
        self._remote_errors = 0
        self._invalidations = 0

    @property
    def metrics(self) -> MetricsCollector:
        return self._metrics

    def record_hit(self, tier: CacheTier, key: str) -> None:
        if tier is CacheTier.L1:
            self._hits_l1 += 1
            log_stage(self._logger, Stage.L1_LOOKUP, "L1 cache hit", level="debug",
                      cache_key=key[:_KEY_LOG_LENGTH])
        else:
            self._hits_l2 += 1
            log_stage(self._logger, Stage.L2_LOOKUP, "L2 cache hit", level="debug",
                      cache_key=key[:_KEY_LOG_LENGTH])
        self._metrics.record_cache_hit(tier.value)

    def record_miss(self, key: str) -> None:
        self._misses += 1
        log_stage(self._logger, Stage.L2_LOOKUP, "Cache miss", level="debug",
                  cache_key=key[:_KEY_LOG_LENGTH])
        self._metrics.record_cache_miss()

    def record_write(self, key: str, remote_ttl: int) -> None:
        log_stage(self._logger, Stage.WRITE, "Cache set", level="debug",
                  cache_key=key[:_KEY_LOG_LENGTH], ttl=remote_ttl)
        self._metrics.record_cache_write(remote_ttl)

    def record_delete(self, key: str) -> None:
        log_stage(self._logger, Stage.DELETE, "Cache key deleted", level="debug",
                  cache_key=key[:_KEY_LOG_LENGTH])

    def record_invalidation(
        self,
        mode: InvalidationMode,
        fragment: str,
        local_removed: int,
        remote_removed: int,
    ) -> None:
        self._invalidations += 1
        log_stage(
            self._logger,
            Stage.INVALIDATION,
            "Cache invalidated",
            mode=mode.value,
            pattern=fragment,
            local_removed=local_removed,
            remote_removed=remote_removed,
        )
        self._metrics.record_invalidation(mode.value, local_removed, remote_removed)

    def record_remote_error(
        self,
        operation: str,
        error: BaseException,
        level: str = "error",
        **context: Any,
    ) -> None:
        """
        Log a remote failure the facade absorbed.

        Args:
            operation: Facade operation that failed ("get", "set", ...)
            error: The exception raised by the remote client
            level: Log level; fire-and-forget writes use "warning"
            **context: cache_key or pattern
        """
        self._remote_errors += 1
        stage = _OPERATION_STAGES.get(operation, Stage.REMOTE_COMMAND)
        log_stage(
            self._logger,
            stage,
            f"Remote cache {operation} failed",
            level=level,
            operation=operation,
            error=str(error),
            error_type=type(error).__name__,
            **context,
        )
        self._metrics.record_remote_error(operation, type(error).__name__)

    def get_stats(self) -> dict[str, Any]:
        """
        Get cache performance statistics.

        Returns:
            Dict with hit/miss counters and hit rates
        """
        total = self._hits_l1 + self._hits_l2 + self._misses
        hit_rate = (self._hits_l1 + self._hits_l2) / total if total > 0 else 0.0

        return {
            "l1_hits": self._hits_l1,
            "l2_hits": self._hits_l2,
            "misses": self._misses,
            "total_requests": total,
            "hit_rate": round(hit_rate, 3),
            "l1_hit_rate": round(self._hits_l1 / total, 3) if total > 0 else 0.0,
            "remote_errors": self._remote_errors,
            "invalidations": self._invalidations,
        }


class StatsReporter:
    """
    Minimal cache snapshot.

    `remote_connected` reports only whether a remote client handle exists;
    it does not probe the store.
    """

    def __init__(
        self,
        memory: MemoryTier,
        remote_probe: Callable[[], bool],
        metrics: MetricsCollector | None = None,
    ):
        self._memory = memory
        self._remote_probe = remote_probe
        self._metrics = metrics

    def snapshot(self) -> dict[str, Any]:
        entry_count = len(self._memory)
        if self._metrics is not None:
            self._metrics.set_l1_entries(entry_count)
        return {"entry_count": entry_count, "remote_connected": self._remote_probe()}
