"""
Unit Tests for MemoryTier

Lazy expiry, sweep correctness and the background sweeper.
"""

import asyncio

import pytest

from storefront_cache.infrastructure.cache.memory_tier import CacheEntry, MemoryTier


@pytest.fixture
def tier(clock):
    return MemoryTier(clock)


@pytest.mark.unit
class TestMemoryTierBasics:
    def test_set_then_get(self, tier):
        tier.set("tenant:t1:products", [{"id": 1}], ttl=60)
        assert tier.get("tenant:t1:products") == [{"id": 1}]

    def test_missing_key(self, tier):
        assert tier.get("absent") is None

    def test_set_overwrites(self, tier):
        tier.set("k", "old", ttl=60)
        tier.set("k", "new", ttl=60)
        assert tier.get("k") == "new"
        assert len(tier) == 1

    def test_delete_is_idempotent(self, tier):
        tier.set("k", "v", ttl=60)
        assert tier.delete("k") is True
        assert tier.delete("k") is False
        assert "k" not in tier

    def test_keys_is_a_snapshot(self, tier):
        tier.set("a", 1, ttl=60)
        tier.set("b", 2, ttl=60)

        keys = tier.keys()
        for key in keys:
            tier.delete(key)

        assert sorted(keys) == ["a", "b"]
        assert tier.size == 0

    def test_clear(self, tier):
        tier.set("a", 1, ttl=60)
        tier.clear()
        assert len(tier) == 0


@pytest.mark.unit
class TestMemoryTierExpiry:
    def test_entry_live_at_exact_deadline(self, tier, clock):
        tier.set("k", "v", ttl=60)
        clock.advance(60)
        assert tier.get("k") == "v"

    def test_get_removes_expired_entry(self, tier, clock):
        tier.set("k", "v", ttl=60)
        clock.advance(60.001)

        assert tier.get("k") is None
        assert "k" not in tier

    def test_sweep_removes_only_expired(self, tier, clock):
        tier.set("old", 1, ttl=10)
        tier.set("fresh", 2, ttl=120)
        clock.advance(30)

        removed = tier.sweep()

        assert removed == 1
        assert tier.keys() == ["fresh"]

    def test_sweep_without_reads(self, tier, clock):
        """An entry whose deadline has passed disappears from keys() after one sweep."""
        tier._entries["stale"] = CacheEntry(value="v", expires_at=clock() - 1)
        assert "stale" in tier.keys()

        tier.sweep()

        assert "stale" not in tier.keys()


@pytest.mark.unit
class TestMemoryTierSweeper:
    @pytest.mark.asyncio
    async def test_sweeper_runs_periodically(self, tier, clock):
        tier.set("k", "v", ttl=1)
        clock.advance(5)

        tier.start_sweeper(interval=0.01)
        try:
            for _ in range(50):
                if "k" not in tier:
                    break
                await asyncio.sleep(0.01)
        finally:
            await tier.stop_sweeper()

        assert "k" not in tier

    @pytest.mark.asyncio
    async def test_start_twice_is_noop(self, tier):
        tier.start_sweeper(interval=30)
        first = tier._sweep_task
        tier.start_sweeper(interval=30)

        assert tier._sweep_task is first
        await tier.stop_sweeper()
        assert tier.sweeper_running is False

    @pytest.mark.asyncio
    async def test_stop_without_start(self, tier):
        await tier.stop_sweeper()
        assert tier.sweeper_running is False
