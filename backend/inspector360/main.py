# backend/inspector360/main.py
from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .logging_config import configure_logging

from .middleware.request_id import RequestIDMiddleware
from .middleware.structured_logging import StructuredLoggingMiddleware

from .routers.health import router as health_router
from .routers.inspections import router as inspections_router
from .routers.compliance import router as compliance_router
from .routers.maintenance import router as maintenance_router
from .routers.stations import router as stations_router
from .routers.talks import router as talks_router

API_PREFIX = "/api"


def _cors_origins() -> list[str]:
    val = settings.cors_allow_origins
    if isinstance(val, str):
        v = val.strip()
        return ["*"] if v == "*" else [x.strip() for x in v.split(",") if x.strip()]
    if isinstance(val, list) and val:
        return val
    return ["*"]


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="Inspector 360",
        version=settings.app_version,
    )

    # Starlette runs the last added middleware first: request id wraps the access log.
    app.add_middleware(StructuredLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router, prefix=API_PREFIX)

    # FOR-ATA-057
    app.include_router(inspections_router, prefix=API_PREFIX)
    app.include_router(compliance_router, prefix=API_PREFIX)
    app.include_router(maintenance_router, prefix=API_PREFIX)

    # Settings + safety talks
    app.include_router(stations_router, prefix=API_PREFIX)
    app.include_router(talks_router, prefix=API_PREFIX)

    return app


app = create_app()
