"""
L1 Memory Tier

Process-local mapping of key -> (value, expires_at) with time-based expiry.

Responsibility: absorb read bursts with zero network cost. Entries live for
the short memory-residency TTL only; the remote tier is authoritative.

Expiry is enforced twice:
- lazily on every get(), because the sweep interval is coarse
- by a periodic sweep, which reclaims keys that are never read again

There is no capacity bound; eviction is time-based only.

All operations are synchronous and never suspend, so on a single event loop
they are atomic from the caller's point of view.
"""

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from storefront_cache.core.config.constants import Stage
from storefront_cache.core.logging.logger import get_logger, log_stage

logger = get_logger(__name__)


@dataclass
class CacheEntry:
    """A memory-tier entry; replaced wholesale, never partially updated."""

    value: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now > self.expires_at


class MemoryTier:
    """
    In-memory TTL cache.

    Usage:
        tier = MemoryTier()
        tier.set("tenant:t1:products", products, ttl=60)
        tier.get("tenant:t1:products")
        tier.start_sweeper(interval=30)   # inside a running event loop
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        """
        Args:
            clock: Monotonic seconds source; injectable for tests
        """
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._sweep_task: asyncio.Task | None = None

    def get(self, key: str) -> Any | None:
        """Return the live value for key, removing it if it has expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            del self._entries[key]
            return None
        return entry.value

    def set(self, key: str, value: Any, ttl: float) -> None:
        """Unconditionally overwrite key with value, live for ttl seconds."""
        self._entries[key] = CacheEntry(value=value, expires_at=self._clock() + ttl)

    def delete(self, key: str) -> bool:
        """Remove key. Returns True if it was present."""
        return self._entries.pop(key, None) is not None

    def keys(self) -> list[str]:
        """
        Snapshot of stored keys.

        Expiry is not checked here; invalidation scans may see an entry that
        expired since the last sweep, which is harmless.
        """
        return list(self._entries)

    def sweep(self) -> int:
        """
        Remove every expired entry.

        Returns:
            Number of entries removed
        """
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()

    @property
    def size(self) -> int:
        """Current number of entries (expired-but-unswept included)."""
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    # -------------------------------------------------------------------------
    # Background sweep
    # -------------------------------------------------------------------------

    @property
    def sweeper_running(self) -> bool:
        return self._sweep_task is not None and not self._sweep_task.done()

    def start_sweeper(self, interval: float) -> None:
        """
        Schedule the periodic sweep on the running event loop.

        Calling this while a sweeper is already running is a no-op.

        Args:
            interval: Seconds between sweeps
        """
        if self.sweeper_running:
            return
        self._sweep_task = asyncio.create_task(self._sweep_loop(interval))
        log_stage(logger, Stage.SWEEP, "L1 sweeper started", level="debug", interval=interval)

    async def stop_sweeper(self) -> None:
        """Cancel the sweeper task and wait for it to finish."""
        task, self._sweep_task = self._sweep_task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _sweep_loop(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            try:
                removed = self.sweep()
            except Exception as e:
                logger.error("L1 sweep failed", stage=Stage.SWEEP.value, error=str(e))
                continue
            if removed:
                log_stage(
                    logger,
                    Stage.SWEEP,
                    "L1 expired entries swept",
                    level="debug",
                    removed=removed,
                    remaining=len(self._entries),
                )
