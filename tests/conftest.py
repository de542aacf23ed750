"""
Pytest Configuration and Shared Test Fixtures

This module provides pytest configuration and reusable fixtures for all tests.
All fixtures defined here are automatically available to all test files.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from tests.test_fixtures.cache_factory import CacheTestFactory, FakeRemoteStore, ManualClock

# pytest-asyncio runs in auto mode (see pyproject.toml); async fixtures and
# tests need no explicit event loop fixture.


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def settings():
    """
    Real Settings with the remote tier disabled.

    Built with `_env_file=None` and explicit values so a developer's .env or
    shell environment cannot leak in.
    """
    from storefront_cache.core.config.settings import Settings

    return Settings(
        _env_file=None,
        UPSTASH_REDIS_REST_URL=None,
        UPSTASH_REDIS_REST_TOKEN=None,
        ENVIRONMENT="test",
        APP_VERSION="1.0.0-test",
        LOG_FORMAT="console",
    )


@pytest.fixture
def remote_settings(settings):
    """Settings carrying REST credentials (no request is ever sent in unit tests)."""
    return settings.model_copy(
        update={
            "UPSTASH_REDIS_REST_URL": "https://eu1-test.upstash.io",
            "UPSTASH_REDIS_REST_TOKEN": "test-token",
        }
    )


# ============================================================================
# Cache Fixtures
# ============================================================================


@pytest.fixture
def clock():
    """Manually advanced monotonic clock."""
    return ManualClock()


@pytest.fixture
def fake_remote():
    """In-memory remote store implementing the RemoteClient contract."""
    return FakeRemoteStore()


@pytest.fixture
def mock_remote():
    """AsyncMock remote client; every call succeeds and returns nothing."""
    return CacheTestFactory.mock_remote()


@pytest.fixture
async def memory_only_cache(settings, clock):
    """CacheManager with no remote tier."""
    cache = CacheTestFactory.cache_manager(settings, clock=clock, remote=None)
    yield cache
    await cache.close()


@pytest.fixture
async def tiered_cache(settings, clock, fake_remote):
    """CacheManager backed by the in-memory fake remote store."""
    cache = CacheTestFactory.cache_manager(settings, clock=clock, remote=fake_remote)
    yield cache
    await cache.close()


@pytest.fixture
def mock_cache_manager():
    """
    Mock CacheManager for isolated route testing.
    """
    from storefront_cache.infrastructure.cache.cache_manager import CacheManager

    cache = MagicMock(spec=CacheManager)
    cache.get = AsyncMock(return_value=None)
    cache.set = AsyncMock(return_value=None)
    cache.delete = AsyncMock(return_value=None)
    cache.invalidate_by_prefix = AsyncMock(return_value=None)
    cache.invalidate_by_pattern = AsyncMock(return_value=None)
    cache.invalidate_tenant_cache = AsyncMock(return_value=None)
    cache.stats = MagicMock(return_value={"entry_count": 0, "remote_connected": False})
    cache.detailed_stats = MagicMock(
        return_value={"entry_count": 0, "remote_connected": False, "l1_hits": 0}
    )
    return cache
