"""
ASGI entry point: ``uvicorn tradesense.main:app``.

Builds the FastAPI app with logging, rate limits, hardening headers,
the domain error mapping and the health and trading routers. The
service container is created in the lifespan unless one is passed in.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded

from tradesense.core.config import settings
from tradesense.core.container import ServiceContainer
from tradesense.interfaces.health import router as health_router
from tradesense.interfaces.trading.router import router as trading_router
from tradesense.shared.errors.handlers import register_error_handlers
from tradesense.shared.logging import configure_logging
from tradesense.shared.security.headers import SecurityHeadersMiddleware
from tradesense.shared.security.rate_limiting import (
    limiter,
    rate_limit_exceeded_handler,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the service container unless one was supplied, and close it after."""
    if getattr(app.state, "container", None) is not None:
        yield
        return

    container = await ServiceContainer.from_settings(settings)
    app.state.container = container
    logger.info("%s %s started", settings.project_name, settings.version)
    try:
        yield
    finally:
        await container.aclose()
        app.state.container = None


def create_app(container: Optional[ServiceContainer] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Registers routers, error handlers, and security middleware.

    Args:
        container: Prebuilt services. When omitted, the lifespan builds
            them from settings and disposes them at shutdown.

    Returns:
        A fully configured FastAPI application instance.
    """
    configure_logging(level=settings.log_level)

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.container = container

    # --- Rate Limiting ---
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # --- Security Middleware ---
    app.add_middleware(SecurityHeadersMiddleware)

    # --- Error Handlers ---
    register_error_handlers(app)

    # --- Routers ---
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(trading_router, prefix="/api/v1")

    return app


app = create_app()
