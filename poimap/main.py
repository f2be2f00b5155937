"""
FastAPI application setup for the POI map engine.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
from contextlib import asynccontextmanager
from typing import Optional

from poimap.config.settings import get_settings
from poimap.core.error_handlers import setup_error_handlers
from poimap.core.logging import configure_logging
from poimap.core.registry import SessionFactory, SessionRegistry
from poimap.core.session import MapSession
from poimap.middleware import RequestContextMiddleware
from poimap.schemas.base import ok

# Get application settings
settings = get_settings()

configure_logging(settings.log_level.value, settings.log_format)

logger = logging.getLogger(__name__)


def create_app(session_factory: Optional[SessionFactory] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        session_factory: Builds map sessions; defaults to MapSession with
            the Socrata fetcher and Mapbox routing client.

    Returns:
        FastAPI: Configured application instance
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan: owns the session registry and closes every
        live session on shutdown.
        """
        logger.info(f"Starting {settings.app_name} v{settings.app_version}")
        app.state.registry = SessionRegistry(
            session_factory or MapSession,
            max_sessions=settings.max_sessions,
            idle_ttl_seconds=settings.session_idle_ttl_seconds,
        )
        logger.info("Application startup complete")
        try:
            yield
        finally:
            logger.info("Shutting down application")
            try:
                closed = await app.state.registry.close_all()
                logger.info(f"Application shutdown complete, closed {closed} sessions")
            except Exception as e:
                logger.error(f"Application shutdown failed: {e}", exc_info=True)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan
    )

    # Add CORS middleware with configuration
    app.add_middleware(
        CORSMiddleware,
        **settings.get_cors_config()
    )

    # Request id and timing
    app.add_middleware(RequestContextMiddleware)

    setup_error_handlers(app)

    from poimap.api import health_router, session_router
    app.include_router(health_router)
    app.include_router(session_router)

    @app.get("/")
    async def root():
        """Root endpoint with service information."""
        return ok({
            "service": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment.value,
            "endpoints": {
                "health": "/health",
                "sessions": "/sessions",
                "docs": "/docs",
            },
        })

    return app


# Create application instance
app = create_app()
