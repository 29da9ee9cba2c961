from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from .adapters.base import MarketAdapter
from .adapters.factory import make_adapter
from .config import Settings, get_settings
from .jobs.loop import Refresher
from .logging_config import configure_logging
from .routers import control, health, portfolio, signals, swap, tokens
from .state import DashboardState

LOGGER = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, adapter: MarketAdapter | None = None) -> FastAPI:
    settings = settings or get_settings()
    adapter = adapter or make_adapter(settings)
    state = DashboardState(source=adapter.source)
    refresher = Refresher(adapter, state, settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.refresh_on_startup:
            refresher.start()
        yield
        await refresher.stop()

    app = FastAPI(
        title="AlphaVault",
        description="Token metrics, buy signals, swap quotes and a simulated portfolio.",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.dashboard = state
    app.state.refresher = refresher

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router, tags=["health"])
    app.include_router(control.router)
    app.include_router(tokens.router, prefix="/tokens", tags=["tokens"])
    app.include_router(signals.router, prefix="/signals", tags=["signals"])
    app.include_router(swap.router, prefix="/swap", tags=["swap"])
    app.include_router(portfolio.router, prefix="/portfolio", tags=["portfolio"])

    if settings.metrics_enabled:
        @app.get("/metrics", include_in_schema=False)
        async def metrics_endpoint() -> Response:
            return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return app


def build_default_app() -> FastAPI:
    settings = get_settings()
    configure_logging(log_level=settings.log_level)
    LOGGER.info("Starting AlphaVault with %s data source", settings.data_source)
    return create_app(settings)
