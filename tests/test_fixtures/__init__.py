"""
Test Fixtures Package

Shared test utilities and helpers for consistent testing across all modules.
"""

from .cache_factory import CacheTestFactory, FakeRemoteStore, ManualClock

__all__ = ["CacheTestFactory", "FakeRemoteStore", "ManualClock"]
