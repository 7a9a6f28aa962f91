# relaypanel/main.py

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from relaypanel import __version__
from relaypanel.adapters.configuration.config import DEFAULT_ADMIN_API_TOKEN, Settings, settings
from relaypanel.core.container import build_container, run_shutdown_tasks, run_startup_tasks
from relaypanel.shared.middleware import AsyncExceptionMiddleware, AsyncRequestLoggingMiddleware

# ─── UNIQUE LOGGING CONFIGURATION ─────────────────────────────────────────────────
level = logging.DEBUG if settings.DEBUG else getattr(logging, settings.LOG_LEVEL, logging.INFO)
logging.basicConfig(
    level=level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


# ────────────────────────────────────────────────────────────────────────────────


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        app_settings: Settings to use; defaults to the environment settings

    Returns:
        Configured FastAPI instance
    """
    app_settings = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Async context manager to handle startup and shutdown events.
        """
        logger.info("Application starting up...")
        if app_settings.ADMIN_API_TOKEN == DEFAULT_ADMIN_API_TOKEN:
            logger.warning("ADMIN_API_TOKEN is left at its default value; change it before exposing the panel")

        container = build_container(app_settings)
        app.state.container = container
        await run_startup_tasks(container)

        yield

        logger.info("Application shutting down...")
        await run_shutdown_tasks(container)

    app = FastAPI(
        title="Relay Panel",
        description="Proxy access credentials and relay synchronization",
        version=__version__,
        debug=app_settings.DEBUG,
        lifespan=lifespan,
    )

    # Middlewares
    app.add_middleware(AsyncRequestLoggingMiddleware, environment=app_settings.ENVIRONMENT)
    app.add_middleware(AsyncExceptionMiddleware, environment=app_settings.ENVIRONMENT)

    # Routers
    from relaypanel.adapters.inbound.api.v1.router import api_router

    app.include_router(api_router, prefix="/api")

    @app.get("/health", include_in_schema=False)
    async def health():
        return {"ok": True}

    return app


app = create_app()
