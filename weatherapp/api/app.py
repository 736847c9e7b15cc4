"""
FastAPI application factory.

``create_app()`` builds the application with:
- Lifespan: logging setup, Redis pool shutdown
- CORS middleware
- RFC 9457 error handlers
- Versioned router at ``/api/v1``

Start with::

    uvicorn weatherapp.api.app:create_app --factory
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from weatherapp.api.deps import close_redis
from weatherapp.api.errors import register_error_handlers
from weatherapp.api.middleware.cors import configure_cors
from weatherapp.api.routes.v1.health import API_VERSION
from weatherapp.logging_config import setup_logging
from weatherapp.settings import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings = get_settings()
    setup_logging(level=settings.log_level, json_format=settings.log_json)
    logger.info(
        "Weather API starting (env=%s, location=%s)",
        settings.environment,
        settings.location_city,
    )

    yield

    logger.info("Weather API shutting down")
    await close_redis()


def create_app() -> FastAPI:
    """Build and return the configured FastAPI application."""
    app = FastAPI(
        title="Remix Weather API",
        version=API_VERSION,
        description=(
            "Current weather conditions from OpenWeather, served through a "
            "Redis cache with an in-memory fallback."
        ),
        lifespan=_lifespan,
    )

    register_error_handlers(app)
    configure_cors(app)

    from weatherapp.api.routes.v1.router import v1_router

    app.include_router(v1_router, prefix="/api/v1")

    return app
