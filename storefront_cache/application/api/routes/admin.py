"""
Admin Routes

Operational endpoints for the cache layer:

    GET    /admin/cache/stats                          snapshot + hit counters
    POST   /admin/cache/invalidate                     prefix / substring invalidation
    POST   /admin/cache/tenants/{tenant_id}/invalidate tenant bootstrap invalidation
    DELETE /admin/cache/keys/{key}                     single key delete
    GET    /admin/metrics                              Prometheus exposition

Cache operations never raise, so these handlers do not translate errors;
remote failures show up in logs and in the `remote_errors` counter.

SECURITY CONSIDERATIONS:
------------------------
In production these endpoints belong behind authentication and off the public
listener. `verify_admin_access` is a placeholder that performs no check yet;
it only logs each admin call at debug level.
"""

import structlog
from fastapi import APIRouter, Depends, Request, Response, status

from storefront_cache.application.api.dependencies import CacheDep
from storefront_cache.application.api.models.admin import (
    CacheStatsResponse,
    InvalidationRequest,
    InvalidationResponse,
    KeyDeleteResponse,
)
from storefront_cache.core.config.constants import InvalidationMode
from storefront_cache.infrastructure.monitoring.metrics_collector import get_metrics_collector

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


async def verify_admin_access(request: Request) -> None:
    """
    Placeholder for admin authentication: every caller is allowed.

    Replace with bearer-token verification against the storefront's auth
    service; raise HTTPException(403) for non-admin callers.
    """
    logger.debug(
        "Admin access not verified (no authentication configured)",
        method=request.method,
        path=request.url.path,
    )


# ============================================================================
# CACHE ENDPOINTS
# ============================================================================


@router.get(
    "/cache/stats",
    response_model=CacheStatsResponse,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(verify_admin_access)],
)
async def get_cache_stats(cache: CacheDep):
    """
    Cache statistics.

    `remote_connected` reports whether a remote client exists; no network call
    is made to check reachability.
    """
    return CacheStatsResponse(**cache.detailed_stats())


@router.post(
    "/cache/invalidate",
    response_model=InvalidationResponse,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(verify_admin_access)],
)
async def invalidate_cache(body: InvalidationRequest, cache: CacheDep):
    """Remove every key matching the fragment from both tiers."""
    logger.info("admin_cache_invalidate", pattern=body.pattern, mode=body.mode.value)

    if body.mode is InvalidationMode.PREFIX:
        await cache.invalidate_by_prefix(body.pattern)
    else:
        await cache.invalidate_by_pattern(body.pattern)

    return InvalidationResponse(
        pattern=body.pattern,
        mode=body.mode,
        entry_count=cache.stats()["entry_count"],
    )


@router.post(
    "/cache/tenants/{tenant_id}/invalidate",
    response_model=InvalidationResponse,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(verify_admin_access)],
)
async def invalidate_tenant(tenant_id: str, cache: CacheDep):
    """Drop a tenant's bootstrap payloads, e.g. after a storefront settings change."""
    logger.info("admin_tenant_invalidate", tenant_id=tenant_id)
    await cache.invalidate_tenant_cache(tenant_id)

    return InvalidationResponse(
        pattern=f"bootstrap:{tenant_id}",
        mode=InvalidationMode.PREFIX,
        entry_count=cache.stats()["entry_count"],
    )


@router.delete(
    "/cache/keys/{key:path}",
    response_model=KeyDeleteResponse,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(verify_admin_access)],
)
async def delete_cache_key(key: str, cache: CacheDep):
    """Delete one key from both tiers. Deleting an absent key succeeds."""
    await cache.delete(key)
    return KeyDeleteResponse(key=key)


# ============================================================================
# METRICS
# ============================================================================


@router.get("/metrics", dependencies=[Depends(verify_admin_access)])
async def get_prometheus_metrics():
    """
    Expose metrics in Prometheus text format for scraping.

        scrape_configs:
          - job_name: 'storefront-cache'
            metrics_path: '/api/v1/admin/metrics'
    """
    metrics_collector = get_metrics_collector()
    return Response(
        content=metrics_collector.get_prometheus_metrics(),
        media_type=metrics_collector.get_content_type(),
    )
