"""
Health Check Routes

    GET /health       status + cache snapshot
    GET /health/live  liveness probe (no dependencies)

A missing remote tier is reported as "degraded": the service keeps working
from memory alone, but every process then has its own cache.
"""

from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from storefront_cache.application.api.dependencies import CacheDep, SettingsDep

router = APIRouter(prefix="/health", tags=["Health"])


class CacheHealth(BaseModel):
    entry_count: int
    remote_connected: bool


class HealthResponse(BaseModel):
    status: str  # "healthy" or "degraded"
    timestamp: str
    version: str
    cache: CacheHealth


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@router.get("", response_model=HealthResponse)
async def health_check(cache: CacheDep, settings: SettingsDep):
    """Quick health check for load balancers."""
    snapshot = cache.stats()
    return HealthResponse(
        status="healthy" if snapshot["remote_connected"] else "degraded",
        timestamp=_utc_now(),
        version=settings.app.APP_VERSION,
        cache=CacheHealth(**snapshot),
    )


@router.get("/live")
async def liveness_probe():
    """Liveness probe: the process is up and serving."""
    return {"status": "alive", "timestamp": _utc_now()}
