"""Entry point for the task service."""

from __future__ import annotations

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routers import api_router, health_router
from .core.config import Settings, get_settings
from .core.logging import configure_logging
from .core.middleware import CorrelationIdMiddleware
from .db import RecordStore, build_store
from .deps import SettingsDependency
from .errors import register_exception_handlers
from .schemas.system import RootResponse


def _normalise_prefix(raw_prefix: str) -> str:
    prefix = raw_prefix.strip()
    if prefix and not prefix.startswith("/"):
        prefix = f"/{prefix}"
    prefix = prefix.rstrip("/")
    return "" if prefix == "/" else prefix


def create_app(settings: Settings | None = None, store: RecordStore | None = None) -> FastAPI:
    """Instantiate and configure the FastAPI application.

    The record store is loaded here and owned by the application; pass
    ``store`` to supply one built elsewhere.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    router_prefix = _normalise_prefix(settings.api_prefix)
    openapi_url = "/openapi.json" if not router_prefix else f"{router_prefix}/openapi.json"

    application = FastAPI(
        title=settings.project_name,
        version=settings.version,
        summary="Task management service with per-user tasks and an admin console.",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url=openapi_url,
    )

    application.state.settings = settings
    application.state.store = store if store is not None else build_store(settings)

    application.add_middleware(CorrelationIdMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    if router_prefix:
        application.include_router(api_router, prefix=router_prefix)
    else:
        application.include_router(api_router)

    application.include_router(health_router)

    register_exception_handlers(application)

    @application.get("/", response_model=RootResponse, summary="Service metadata")
    async def read_root(settings: SettingsDependency) -> RootResponse:
        """Expose minimal service metadata at the root endpoint."""
        return RootResponse(
            name=settings.project_name,
            environment=settings.environment,
            version=settings.version,
            api_prefix=router_prefix,
        )

    return application


def run() -> None:
    """Convenience entry point for the ``taskdesk`` console script."""
    settings: Settings = get_settings()
    uvicorn.run(
        "taskdesk.main:create_app",
        factory=True,
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.reload,
        log_config=None,
    )


__all__ = ["create_app", "run"]
