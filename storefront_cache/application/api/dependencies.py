"""
FastAPI Dependencies

Reusable dependencies for reaching application singletons from route handlers.
The cache manager is created in the lifespan and stored on `app.state`; tests
replace it through `app.dependency_overrides[get_cache]`.
"""

from typing import Annotated

from fastapi import Depends, Request

from storefront_cache.core.config.settings import Settings, get_settings
from storefront_cache.infrastructure.cache.cache_manager import CacheManager, get_cache_manager


def get_cache(request: Request) -> CacheManager:
    """
    Retrieve the CacheManager from application state.

    Falls back to the process-wide instance when the lifespan has not run.
    """
    cache = getattr(request.app.state, "cache_manager", None)
    if cache is None:
        cache = get_cache_manager()
    return cache


CacheDep = Annotated[CacheManager, Depends(get_cache)]

SettingsDep = Annotated[Settings, Depends(get_settings)]
