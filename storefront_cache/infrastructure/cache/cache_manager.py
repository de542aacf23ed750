#!/usr/bin/env python3
"""
Two-Tier Cache Manager

Architecture:
    CacheManager (Public API)
        ├── MemoryTier    (L1, process-local, TTL + periodic sweep)
        ├── RemoteClient  (L2, REST or native Redis; None = disabled)
        ├── TTLPolicy     (named durations)
        ├── CacheObserver (logging, counters, Prometheus)
        └── StatsReporter (entry_count / remote_connected snapshot)

Read path (STAGE-C.1 / C.2):
    L1 hit -> return (no network)
    L1 miss -> L2 get -> hit: warm L1 with memory residency TTL, return
                      -> miss / error: return None
    Remote disabled -> return None without network I/O

Write path (STAGE-C.3):
    L1 write lands synchronously; the L2 write runs as a detached task and its
    failure is only logged. A read can therefore be served from L1 before the
    L2 write completes; last write wins per tier.

Invalidation (STAGE-C.5):
    L1 scan + delete, then KEYS on L2 with the fragment escaped and one bulk
    DEL (skipped when nothing matched). Local deletions are never rolled back.

No public operation raises. Remote failures degrade to "L2 empty".

The remote client is resolved once, on first use, from settings. Missing
credentials disable the remote tier for the lifetime of the instance.
"""

import asyncio
import functools
import inspect
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from storefront_cache.core.config.constants import (
    KEY_SEPARATOR,
    NS_BOOTSTRAP,
    CacheTier,
    InvalidationMode,
    Stage,
)
from storefront_cache.core.config.settings import Settings, get_settings
from storefront_cache.core.logging.logger import get_logger, log_stage
from storefront_cache.infrastructure.cache import key_builder
from storefront_cache.infrastructure.cache.memory_tier import MemoryTier
from storefront_cache.infrastructure.cache.observer import CacheObserver, StatsReporter
from storefront_cache.infrastructure.cache.remote_client import (
    RemoteClient,
    connect_remote,
    escape_glob,
)
from storefront_cache.infrastructure.cache.ttl_policy import TTLPolicy, TTLTier

logger = get_logger(__name__)

_UNRESOLVED: Any = object()


class CacheManager:
    """
    Public cache API.

    Usage:
        cache = CacheManager()
        await cache.initialize()

        await cache.set_with_ttl("tenant:t1:products", products, "medium")
        products = await cache.get("tenant:t1:products")

        await cache.invalidate_by_prefix("bootstrap:t1")
        await cache.close()

    Tests inject a memory tier with a fake clock and a fake remote client:
        cache = CacheManager(settings, memory=MemoryTier(clock), remote=fake)
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        memory: MemoryTier | None = None,
        remote: RemoteClient | None = _UNRESOLVED,
        policy: TTLPolicy | None = None,
        observer: CacheObserver | None = None,
    ):
        """
        Args:
            settings: Settings (process-wide settings by default)
            memory: L1 tier
            remote: L2 client; omit to resolve lazily from settings, pass None
                to run memory-only
            policy: TTL table (built from settings by default)
            observer: Observability sink
        """
        self._settings = settings or get_settings()
        self._memory = memory if memory is not None else MemoryTier()
        self._remote = None if remote is _UNRESOLVED else remote
        self._remote_resolved = remote is not _UNRESOLVED
        self._policy = policy or TTLPolicy.from_settings(self._settings)
        self._observer = observer or CacheObserver()
        self._reporter = StatsReporter(
            self._memory, lambda: self._get_remote() is not None,
            metrics=self._observer.metrics,
        )
        self._sweep_interval = self._settings.cache.CACHE_SWEEP_INTERVAL
        self._pending: set[asyncio.Task] = set()

        log_stage(
            logger,
            Stage.INITIALIZATION,
            "Cache manager created",
            memory_ttl=self._policy.memory_residency,
            remote_ttl=self._policy.remote_default,
            remote_injected=self._remote_resolved,
        )

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def initialize(self) -> None:
        """
        Resolve the remote client and start the L1 sweeper.

        STAGE-C.0: Cache initialization
        """
        remote = self._get_remote()
        self._memory.start_sweeper(self._sweep_interval)
        log_stage(
            logger,
            Stage.INITIALIZATION,
            "Cache manager initialized",
            remote_backend=getattr(remote, "backend", None),
            sweep_interval=self._sweep_interval,
        )

    async def drain(self) -> None:
        """Wait for in-flight remote writes to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def close(self) -> None:
        """
        Stop the sweeper, drain pending writes and close the remote client.

        STAGE-C.8: Cache shutdown
        """
        await self._memory.stop_sweeper()
        await self.drain()

        if self._remote is not None:
            try:
                await self._remote.close()
            except Exception as e:
                self._observer.record_remote_error("close", e, level="warning")

        self._memory.clear()
        log_stage(logger, Stage.SHUTDOWN, "Cache manager shutdown")

    def _get_remote(self) -> RemoteClient | None:
        if not self._remote_resolved:
            self._remote_resolved = True
            remote = self._settings.remote
            if not remote.is_configured:
                log_stage(logger, Stage.REMOTE_CONNECT,
                          "Remote store not configured, running memory-only", level="warning")
                return None

            self._remote = connect_remote(
                remote.UPSTASH_REDIS_REST_URL,
                remote.UPSTASH_REDIS_REST_TOKEN,
                timeout=remote.REMOTE_STORE_TIMEOUT,
                max_connections=remote.REMOTE_STORE_MAX_CONNECTIONS,
            )
        return self._remote

    def _ensure_sweeper(self) -> None:
        if not self._memory.sweeper_running:
            self._memory.start_sweeper(self._sweep_interval)

    # -------------------------------------------------------------------------
    # Core operations
    # -------------------------------------------------------------------------

    async def get(self, key: str) -> Any | None:
        """
        Look a key up in L1, then L2.

        STAGE-C.1 / C.2: Tiered lookup

        Returns:
            Cached value or None
        """
        value = self._memory.get(key)
        if value is not None:
            self._observer.record_hit(CacheTier.L1, key)
            return value

        remote = self._get_remote()
        if remote is None:
            self._observer.record_miss(key)
            return None

        try:
            value = await remote.get(key)
        except Exception as e:
            self._observer.record_remote_error("get", e, cache_key=key)
            return None

        if value is None:
            self._observer.record_miss(key)
            return None

        self._memory.set(key, value, self._policy.memory_residency)
        self._ensure_sweeper()
        self._observer.record_hit(CacheTier.L2, key)
        return value

    async def set(self, key: str, value: Any) -> None:
        """Write both tiers; L2 uses the default remote TTL."""
        self._write(key, value, self._policy.remote_default)

    async def set_with_ttl(
        self, key: str, value: Any, tier: TTLTier | str = TTLTier.MEDIUM
    ) -> None:
        """
        Write both tiers with an explicit TTL tier.

        Unknown tier names behave as "medium".
        """
        self._write(key, value, self._policy.resolve(tier))

    def _write(self, key: str, value: Any, remote_ttl: int) -> None:
        """
        STAGE-C.3: Cache write

        L1 first and synchronously; L2 detached.
        """
        self._memory.set(key, value, self._policy.memory_residency)
        self._ensure_sweeper()
        self._observer.record_write(key, remote_ttl)

        remote = self._get_remote()
        if remote is None:
            return

        task = asyncio.create_task(remote.set(key, value, remote_ttl))
        self._pending.add(task)
        task.add_done_callback(functools.partial(self._on_remote_write_done, key))

    def _on_remote_write_done(self, key: str, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            self._observer.record_remote_error("set", error, level="warning", cache_key=key)

    async def delete(self, key: str) -> None:
        """
        Remove a key from both tiers.

        STAGE-C.4: Cache delete
        """
        self._memory.delete(key)
        self._observer.record_delete(key)

        remote = self._get_remote()
        if remote is None:
            return

        try:
            await remote.delete(key)
        except Exception as e:
            self._observer.record_remote_error("delete", e, cache_key=key)

    # -------------------------------------------------------------------------
    # Invalidation
    # -------------------------------------------------------------------------

    async def invalidate_by_prefix(self, prefix: str) -> None:
        """Remove every key beginning with prefix from both tiers."""
        await self._invalidate(prefix, InvalidationMode.PREFIX)

    async def invalidate_by_pattern(self, pattern: str) -> None:
        """Remove every key containing pattern from both tiers."""
        await self._invalidate(pattern, InvalidationMode.SUBSTRING)

    async def invalidate_tenant_cache(self, tenant_id: str) -> None:
        """Drop a tenant's bootstrap payloads."""
        await self.invalidate_by_prefix(f"{NS_BOOTSTRAP}{KEY_SEPARATOR}{tenant_id}")

    async def _invalidate(self, fragment: str, mode: InvalidationMode) -> None:
        """
        STAGE-C.5: Invalidation

        The fragment is matched literally in both tiers.
        """
        if mode is InvalidationMode.PREFIX:
            local = [key for key in self._memory.keys() if key.startswith(fragment)]
            remote_pattern = f"{escape_glob(fragment)}*"
        else:
            local = [key for key in self._memory.keys() if fragment in key]
            remote_pattern = f"*{escape_glob(fragment)}*"

        for key in local:
            self._memory.delete(key)

        remote_removed = 0
        remote = self._get_remote()
        if remote is not None:
            try:
                matched = await remote.keys(remote_pattern)
                if matched:
                    await remote.delete(*matched)
                    remote_removed = len(matched)
            except Exception as e:
                self._observer.record_remote_error("invalidate", e, pattern=fragment)

        self._observer.record_invalidation(mode, fragment, len(local), remote_removed)

    # -------------------------------------------------------------------------
    # Read-through
    # -------------------------------------------------------------------------

    async def get_or_load(
        self,
        key: str,
        loader: Callable[[], Any | Awaitable[Any]],
        tier: TTLTier | str | None = None,
    ) -> Any:
        """
        Return the cached value, or load, cache and return it.

        STAGE-C.6: Read-through load

        Loader errors propagate; a None result is not cached.

        Args:
            key: Cache key
            loader: Sync or async callable producing the value
            tier: TTL tier for the write; remote default when None
        """
        cached = await self.get(key)
        if cached is not None:
            return cached

        log_stage(logger, Stage.LOAD, "Loading uncached value", level="debug", cache_key=key[:64])
        value = loader()
        if inspect.isawaitable(value):
            value = await value

        if value is not None:
            if tier is None:
                await self.set(key, value)
            else:
                await self.set_with_ttl(key, value, tier)
        return value

    # -------------------------------------------------------------------------
    # Domain helpers
    # -------------------------------------------------------------------------

    async def cache_api_response(
        self,
        endpoint: str,
        params: Mapping[str, Any] | None,
        data: Any,
        tier: TTLTier | str = TTLTier.MEDIUM,
    ) -> None:
        await self.set_with_ttl(key_builder.api_response(endpoint, params), data, tier)

    async def get_cached_api_response(
        self, endpoint: str, params: Mapping[str, Any] | None = None
    ) -> Any | None:
        return await self.get(key_builder.api_response(endpoint, params))

    async def cache_tenant_products(self, tenant_id: str, products: Any) -> None:
        await self.set_with_ttl(key_builder.tenant_products(tenant_id), products, TTLTier.MEDIUM)

    async def get_cached_tenant_products(self, tenant_id: str) -> Any | None:
        return await self.get(key_builder.tenant_products(tenant_id))

    async def cache_user_permissions(self, user_id: str, tenant_id: str, permissions: Any) -> None:
        await self.set_with_ttl(
            key_builder.user_permissions(user_id, tenant_id), permissions, TTLTier.LONG
        )

    async def get_cached_user_permissions(self, user_id: str, tenant_id: str) -> Any | None:
        return await self.get(key_builder.user_permissions(user_id, tenant_id))

    # -------------------------------------------------------------------------
    # Monitoring
    # -------------------------------------------------------------------------

    def stats(self) -> dict[str, Any]:
        """
        Returns:
            {"entry_count": int, "remote_connected": bool}
        """
        return self._reporter.snapshot()

    def detailed_stats(self) -> dict[str, Any]:
        """stats() plus hit/miss counters."""
        return {**self.stats(), **self._observer.get_stats(),
                "pending_remote_writes": len(self._pending)}


# =============================================================================
# GLOBAL INSTANCE (SINGLETON PATTERN)
# =============================================================================

_cache_manager: CacheManager | None = None


def get_cache_manager() -> CacheManager:
    """
    Get the global cache manager instance (singleton).

    Returns:
        CacheManager: Global cache manager instance
    """
    global _cache_manager

    if _cache_manager is None:
        _cache_manager = CacheManager()

    return _cache_manager


async def init_cache() -> CacheManager:
    """
    Initialize the global cache manager.

    Returns:
        CacheManager: Initialized cache manager
    """
    manager = get_cache_manager()
    await manager.initialize()
    return manager


async def close_cache() -> None:
    """Shutdown the global cache manager."""
    global _cache_manager

    if _cache_manager:
        await _cache_manager.close()
        _cache_manager = None
