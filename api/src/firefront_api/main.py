"""FastAPI application factory.

Creates the FastAPI app with all routers, middleware, and shared services.

Usage:
    uvicorn firefront_api.main:app --reload
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from firefront.environment.source import EnvironmentSource, OpenDataEnvironmentSource

from firefront_api import __version__
from firefront_api.routers import health, sessions
from firefront_api.services.registry import SessionRegistry
from firefront_api.settings import ServiceSettings
from firefront_api.ws.manager import ConnectionManager

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)


def create_app(
    settings: ServiceSettings | None = None,
    environment_source: EnvironmentSource | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Service settings (default: read from environment)
        environment_source: Overrides the HTTP source built from settings
    """
    settings = settings or ServiceSettings.from_env()
    owned_source: OpenDataEnvironmentSource | None = None
    if environment_source is None and settings.weather_api_key:
        owned_source = OpenDataEnvironmentSource(settings.source_config())
        environment_source = owned_source

    registry = SessionRegistry(settings, environment_source)
    ws_manager = ConnectionManager()

    @asynccontextmanager
    async def lifespan(application: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "FireFront API started (environment source: %s)",
            type(environment_source).__name__ if environment_source else "manual only",
        )
        yield
        registry.shutdown()
        if owned_source is not None:
            await owned_source.aclose()

    application = FastAPI(
        title="FireFront API",
        description="Wind-elongated fire-front spread visualization API",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS: allow the map front-end
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Inject services into routers
    sessions.registry = registry
    sessions.ws_manager = ws_manager

    application.include_router(health.router)
    application.include_router(sessions.router)

    return application


app = create_app()
