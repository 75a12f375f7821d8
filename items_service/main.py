from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.types import ASGIApp

from items_service.api.health import router as health_router
from items_service.api.items import router as items_router
from items_service.api.metrics import router as metrics_router
from items_service.config import Settings, get_settings
from items_service.observability.logging import build_logger, configure_from_settings
from items_service.observability.metrics import AppMetrics
from items_service.observability.middleware import RequestMetricsMiddleware
from items_service.services.item_service import ItemStore


class InstrumentedFastAPI(FastAPI):
    """FastAPI app whose outermost ASGI layer is the request metrics middleware.

    ``add_middleware`` would place it inside Starlette's error middleware, where
    the 500 sent for an unhandled handler error is never seen.
    """

    def build_middleware_stack(self) -> ASGIApp:
        return RequestMetricsMiddleware(
            super().build_middleware_stack(),
            metrics=self.state.metrics,
            logger=self.state.logger,
        )


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings: Settings = app.state.settings
    configure_from_settings(settings)

    # A store that cannot be reached is logged; requests that need it fail individually.
    app.state.store.connect()
    app.state.logger.info(f"Server running on port {settings.port}", port=settings.port)
    try:
        yield
    finally:
        app.state.store.close()


def create_app(
    settings: Settings | None = None,
    *,
    store: ItemStore | None = None,
    metrics: AppMetrics | None = None,
    logger: Any | None = None,
) -> FastAPI:
    """Build the application with its components wired in explicitly.

    Anything not passed in is constructed from ``settings``. Startup (logging
    configuration, store connection) and teardown run in the app lifespan.
    """

    settings = settings or get_settings()
    store = store if store is not None else ItemStore(settings.database_url)
    metrics = metrics if metrics is not None else AppMetrics()
    logger = logger if logger is not None else build_logger(settings)

    app = InstrumentedFastAPI(title="Items Service", version="0.1.0", lifespan=_lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.metrics = metrics
    app.state.logger = logger

    app.include_router(health_router)
    app.include_router(items_router)
    app.include_router(metrics_router)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    return app
