"""
FastAPI application setup for the phrase sync service.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import asyncio
import contextlib
import logging
from datetime import datetime, timezone
from contextlib import asynccontextmanager
from typing import Dict, Optional

from app.config.settings import get_settings
from app.core.error_handlers import error_handler, setup_error_handlers
from app.core.logging import configure_logging
from app.core.rate_limiter import FixedWindowRateLimiter, RateLimiter
from app.core.store_client import KeyValueStore, close_store, get_store
from app.middleware import RateLimitMiddleware, RequestContextMiddleware
from app.middleware.rate_limit import cleanup_expired_data
from app.services.translation_service import TranslationService

settings = get_settings()

configure_logging(settings.log_level.value, settings.log_format)

logger = logging.getLogger(__name__)


def default_limiters() -> Dict[str, RateLimiter]:
    """Build the per-endpoint limiters from settings."""
    limits = settings.rate_limit
    return {
        "/phrases": FixedWindowRateLimiter(limits.phrases_max_requests, limits.phrases_window_seconds),
        "/translate": FixedWindowRateLimiter(limits.translate_max_requests, limits.translate_window_seconds),
    }


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan management.
    Starts rate limit housekeeping and releases the store connection on shutdown.
    """
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")

    cleanup_task = asyncio.create_task(
        cleanup_expired_data(app.state.limiters, settings.rate_limit.cleanup_interval_seconds)
    )

    try:
        yield
    finally:
        logger.info("Shutting down application")
        cleanup_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await cleanup_task

        if app.state.store is not None:
            await app.state.store.close()
        else:
            await close_store()

        logger.info("Application shutdown complete")


def create_app(
    store: Optional[KeyValueStore] = None,
    limiters: Optional[Dict[str, RateLimiter]] = None,
    translation_service: Optional[TranslationService] = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        store: Remote store to use instead of the process-wide one
        limiters: Path prefix to limiter mapping, defaults from settings
        translation_service: Translation backend, defaults from settings

    Returns:
        FastAPI: Configured application instance
    """
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan
    )

    app.state.store = store
    app.state.limiters = limiters if limiters is not None else default_limiters()
    app.state.translation_service = translation_service

    # Added innermost first: rate limit, then request logging, then CORS
    app.add_middleware(RateLimitMiddleware, limiters=app.state.limiters)
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        **settings.get_cors_config()
    )

    setup_error_handlers(app)

    from app.api import phrases_router, translation_router
    app.include_router(phrases_router)
    app.include_router(translation_router)

    @app.get("/")
    async def root():
        """Root endpoint for basic health check."""
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.app_version,
            "status": "running"
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint reporting remote store connectivity."""
        phrase_store = app.state.store if app.state.store is not None else get_store()
        store_ok = await phrase_store.ping()

        return {
            "status": "healthy" if store_ok else "degraded",
            "version": settings.app_version,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "details": {
                "store": {
                    "status": "healthy" if store_ok else "unhealthy",
                    "backend": type(phrase_store).__name__,
                },
                "translation": {
                    "status": "configured" if settings.translation.api_key else "not_configured",
                },
            },
            "error_statistics": error_handler.get_error_statistics(),
        }

    return app


# Create application instance
app = create_app()
