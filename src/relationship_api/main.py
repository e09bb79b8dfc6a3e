"""FastAPI application factory.

Creates the FastAPI app with lifespan management, exception handlers,
and OpenAPI metadata.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from relationship_api.core.config import get_settings
from relationship_api.core.database import dispose_engine, get_session_factory, init_engine
from relationship_api.core.dependencies import build_app_services
from relationship_api.core.logging import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifecycle.

    Startup: engine, coordinate cache/resolver, background runner.
    Shutdown: drain queued county assignments, then dispose the engine.
    """
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_dir)
    init_engine(settings.database_url, echo=False)

    services = build_app_services(settings, get_session_factory())
    services.task_runner.start()
    app.state.services = services
    logger.info(f"Geocoding providers: {services.resolver.provider_names or 'none'}")

    yield

    logger.info(f"Draining {services.task_runner.pending_count} queued background jobs")
    await services.task_runner.shutdown()
    await dispose_engine()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Relationship API",
        description="Partner organization and contact management with county geocoding and map aggregation",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Register exception handlers
    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"detail": str(exc)},
        )

    # Register middleware and routers
    from relationship_api.api.router import create_router, setup_middleware

    setup_middleware(app, settings)
    app.include_router(create_router(settings))

    return app
