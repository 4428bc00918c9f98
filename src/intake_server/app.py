"""Application factory and CLI entry point.

``create_app()`` builds the FastAPI application with:
  - Lifespan handler that loads the screen catalog and builds the flow registry
  - CORS middleware
  - Global exception handlers (SDK errors → 400/404/409/503)
  - All API routes mounted under ``/api/v1``
  - A ``/health`` endpoint for readiness probes

The ``cli()`` function is the ``intake-server`` console-script entry point.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from intake_db.engine import dispose_engine, get_engine
from intake_db.persister import DatabaseProfilePersister
from intake_flow.catalog import ScreenCatalog
from intake_flow.completion import CompletionHandler
from intake_flow.errors import PersistenceError
from intake_flow.interfaces import ProfilePersister

from intake_server.config import ServerSettings, load_settings
from intake_server.errors import (
    generic_error_handler,
    persistence_error_handler,
    value_error_handler,
)
from intake_server.registry import FlowRegistry
from intake_server.routes import register_routes

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Lifespan: runs once at startup/shutdown
# ------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialise shared resources at startup, tear down on shutdown.

    Startup:
      1. Load and validate the screen catalog (a malformed catalog aborts startup)
      2. Build the completion handler around the configured persister
      3. Stash the catalog and flow registry on ``app.state``

    Shutdown:
      1. Dispose the database engine's connection pool
    """
    settings: ServerSettings = app.state.settings

    catalog = ScreenCatalog.from_yaml(settings.catalog_path)
    persister: ProfilePersister = app.state.persister or DatabaseProfilePersister()
    registry = FlowRegistry(
        catalog,
        CompletionHandler(persister),
        next_stage=settings.next_stage,
        max_active=settings.max_active_flows,
        ttl_seconds=settings.flow_ttl_minutes * 60 if settings.flow_ttl_minutes > 0 else None,
    )

    app.state.catalog = catalog
    app.state.registry = registry
    logger.info("Intake server ready: %d screens", len(catalog))

    yield

    await dispose_engine()
    logger.info("Database engine disposed")


# ------------------------------------------------------------------
# Factory
# ------------------------------------------------------------------

def create_app(
    settings: ServerSettings | None = None,
    persister: ProfilePersister | None = None,
) -> FastAPI:
    """Build and return the configured FastAPI application.

    ``persister`` replaces the PostgreSQL-backed default (used by tests and
    embedded deployments).
    """
    if settings is None:
        settings = load_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(
        title="Fitness Intake API",
        description="REST API for the fitness onboarding wizard",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Read by the lifespan handler
    app.state.settings = settings
    app.state.persister = persister

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ValueError, value_error_handler)
    app.add_exception_handler(PersistenceError, persistence_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    @app.get("/health")
    async def health() -> dict:
        """Readiness probe: verifies DB connectivity."""
        try:
            async with get_engine().connect() as conn:
                await conn.execute(text("SELECT 1"))
            return {"status": "ok"}
        except Exception as exc:
            logger.error("Health check failed: %s", exc)
            return {"status": "error", "detail": str(exc)}

    register_routes(app)

    return app


# ------------------------------------------------------------------
# CLI entry point
# ------------------------------------------------------------------

def cli() -> None:
    """Console-script entry point: ``intake-server``."""
    import uvicorn

    settings = load_settings()
    uvicorn.run(
        "intake_server.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=False,
    )
