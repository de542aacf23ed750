#!/usr/bin/env python3
"""
FastAPI Application Entry Point

Operational HTTP surface for the storefront cache: health, cache statistics,
invalidation and Prometheus metrics. The storefront backend itself uses
CacheManager in-process; this app is what operators talk to.
"""

import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from storefront_cache.application.api.routes.admin import router as admin_router
from storefront_cache.application.api.routes.health import router as health_router
from storefront_cache.core.config.constants import HEADER_REQUEST_ID, HEADER_TENANT_ID
from storefront_cache.core.config.settings import get_settings
from storefront_cache.core.exceptions import StorefrontCacheError
from storefront_cache.core.logging.logger import (
    clear_request_context,
    get_logger,
    set_request_context,
    setup_logging,
)
from storefront_cache.infrastructure.cache.cache_manager import close_cache, init_cache

logger = get_logger(__name__)


# ============================================================================
# Application Lifespan
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle (startup and shutdown).
    """
    settings = get_settings()

    setup_logging(log_level=settings.logging.LOG_LEVEL, log_format=settings.logging.LOG_FORMAT)

    logger.info(
        "Starting storefront cache service",
        environment=settings.app.ENVIRONMENT,
        version=settings.app.APP_VERSION,
    )

    try:
        app.state.cache_manager = await init_cache()
        logger.info("Application startup complete")

        yield

    finally:
        logger.info("Shutting down application")
        await close_cache()
        app.state.cache_manager = None
        logger.info("Application shutdown complete")


# ============================================================================
# Application Factory
# ============================================================================


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app.APP_NAME,
        version=settings.app.APP_VERSION,
        description="Two-tier cache service for a multi-tenant storefront",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # All API endpoints are prefixed with API_BASE_PATH (default: /api/v1)
    base_path = settings.API_BASE_PATH
    app.include_router(health_router, prefix=base_path)
    app.include_router(admin_router, prefix=base_path)

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        """Bind request and tenant ids so cache log lines can be correlated."""
        request_id = request.headers.get(HEADER_REQUEST_ID) or str(uuid.uuid4())
        set_request_context(request_id, request.headers.get(HEADER_TENANT_ID))

        try:
            response = await call_next(request)
            response.headers[HEADER_REQUEST_ID] = request_id
            return response
        finally:
            clear_request_context()

    @app.exception_handler(StorefrontCacheError)
    async def storefront_cache_exception_handler(request: Request, exc: StorefrontCacheError):
        logger.error(
            f"Cache service exception: {exc.message}",
            error_type=type(exc).__name__,
            tenant_id=exc.tenant_id,
        )
        return JSONResponse(status_code=500, content=exc.to_dict())

    @app.get("/", tags=["Root"])
    async def root():
        return {
            "name": settings.app.APP_NAME,
            "version": settings.app.APP_VERSION,
            "environment": settings.app.ENVIRONMENT,
            "docs": "/docs",
            "health": f"{base_path}/health",
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "storefront_cache.application.app:app",
        host="0.0.0.0",
        port=8000,
        log_level=get_settings().logging.LOG_LEVEL.lower(),
    )
