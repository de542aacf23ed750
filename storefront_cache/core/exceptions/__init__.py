"""
Exception Module

Structured exception hierarchy for the storefront cache layer.

Module Structure:
-----------------
- **base.py**: StorefrontCacheError base class + ConfigurationError
- **cache.py**: Remote store exceptions

Usage:
------
```python
from storefront_cache.core.exceptions import CacheConnectionError, CacheKeyError
```
"""

from storefront_cache.core.exceptions.base import ConfigurationError, StorefrontCacheError
from storefront_cache.core.exceptions.cache import CacheConnectionError, CacheError, CacheKeyError

__all__ = [
    # Base
    "StorefrontCacheError",
    "ConfigurationError",
    # Cache
    "CacheError",
    "CacheConnectionError",
    "CacheKeyError",
]
