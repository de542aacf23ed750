"""
Configuration Module

Centralized, type-safe configuration for the storefront cache layer.

Components:
-----------
- **settings.py**: Pydantic-based configuration with environment variable loading
- **constants.py**: Key namespaces, TTL tier names, stage identifiers

Usage:
------
```python
from storefront_cache.core.config import get_settings
from storefront_cache.core.config.constants import Stage

settings = get_settings()
ttl = settings.cache.CACHE_TTL_MEDIUM
```
"""

from storefront_cache.core.config.settings import Settings, get_settings, reload_settings

__all__ = [
    "Settings",
    "get_settings",
    "reload_settings",
]
