"""Route registration: mounts all routers under ``/api/v1``."""

from fastapi import FastAPI

from intake_server.routes.flows import router as flows_router
from intake_server.routes.profiles import router as profiles_router
from intake_server.routes.reference import router as reference_router
from intake_server.routes.steps import router as steps_router

API_PREFIX = "/api/v1"


def register_routes(app: FastAPI) -> None:
    """Include all sub-routers under the versioned API prefix."""
    app.include_router(flows_router, prefix=API_PREFIX)
    app.include_router(steps_router, prefix=API_PREFIX)
    app.include_router(reference_router, prefix=API_PREFIX)
    app.include_router(profiles_router, prefix=API_PREFIX)
