"""
sweetshop.api.app

FastAPI app factory for the Sweet Shop service.

Responsibilities:
- Build the FastAPI application and register routers/middleware/error handlers.
- Initialize and dispose shared infrastructure (DB engine/session factory).
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from sweetshop import __version__
from sweetshop.api.errors import install_error_handlers
from sweetshop.api.routers.auth import router as auth_router
from sweetshop.api.routers.health import router as health_router
from sweetshop.api.routers.sweets import router as sweets_router
from sweetshop.db.init_db import init_db
from sweetshop.db.session import create_engine, create_sessionmaker
from sweetshop.observability.logging import configure_logging, get_logger
from sweetshop.observability.middleware import RequestContextMiddleware
from sweetshop.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    # Configure structured logging once at process startup (before app serves requests).
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        # Create the async DB engine and session factory once and stash them on app.state.
        # Routers obtain sessions via dependencies (see `sweetshop.api.deps`).
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # Dev/test convenience: create tables automatically. Prod should use Alembic migrations.
            await init_db(engine)
        try:
            yield
        finally:
            # Dispose the engine to close pools/FDs gracefully.
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Sweet Shop Inventory API",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(RequestContextMiddleware)
    install_error_handlers(app)
    app.include_router(health_router, tags=["health"])
    app.include_router(auth_router)
    app.include_router(sweets_router)

    return app


# --- Module Notes -----------------------------------------------------------
# App composition stays here; business logic stays
# in routers/services.
