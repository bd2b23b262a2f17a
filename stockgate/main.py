# stockgate/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from stockgate.cache import ResponseCache
from stockgate.config import Settings, load_settings
from stockgate.data_client import TwelveDataClient
from stockgate.errors import http_exception_handler
from stockgate.logging_conf import setup_logging
from stockgate.market import MarketService

# --- Observability ---
from stockgate.observability import metrics_endpoint, timing_middleware

# --- Routers ---
from stockgate.routers import market as market_router
from stockgate.schemas import HealthResponse, RootResponse, VersionResponse
from stockgate.utils import utc_now_iso
from stockgate.version import SERVICE_VERSION, version_payload

logger = logging.getLogger("stockgate.main")


def create_app(
    settings: Settings | None = None,
    cache: ResponseCache | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """
    Build the app and its process-wide state:
      - app.state.cache   (ResponseCache, lives as long as the process)
      - app.state.client  (TwelveDataClient, closed on shutdown)
      - app.state.market  (MarketService used by the /api routes)
    `transport` lets tests swap the upstream network for an httpx.MockTransport.
    """
    settings = settings or load_settings()
    if not settings.upstream_configured:
        logger.warning("TWELVE_DATA_API_KEY is not set; upstream calls will be unauthenticated")

    client = TwelveDataClient.from_settings(settings, transport=transport)
    response_cache = cache if cache is not None else ResponseCache()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await client.aclose()

    app = FastAPI(title="StockGate", version=SERVICE_VERSION, lifespan=lifespan)
    app.state.settings = settings
    app.state.cache = response_cache
    app.state.client = client
    app.state.market = MarketService(response_cache, client)

    # --- Include routers ---
    app.include_router(market_router.router)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    # --- Middleware ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.middleware("http")(timing_middleware)

    # --- Utility endpoints ---
    @app.get("/", response_model=RootResponse)
    def root():
        return {"message": "Stock Market Dashboard Backend is running"}

    @app.get("/health", response_model=HealthResponse)
    def health(request: Request):
        state = request.app.state
        configured = state.settings.upstream_configured
        return {
            "status": "ok" if configured else "degraded",
            "as_of": utc_now_iso(),
            "cache_entries": len(state.cache),
            "upstream_configured": configured,
        }

    @app.get("/version", response_model=VersionResponse)
    def version():
        return version_payload()

    @app.get("/metrics")
    def metrics():
        return metrics_endpoint()

    return app


def build_default_app() -> FastAPI:
    """App factory for `uvicorn --factory stockgate.main:build_default_app`."""
    settings = load_settings()
    setup_logging(settings.log_level)
    return create_app(settings)


def run() -> None:
    settings = load_settings()
    setup_logging(settings.log_level)
    logger.info("Backend server running on port %s", settings.port)
    uvicorn.run(
        "stockgate.main:build_default_app",
        factory=True,
        host="0.0.0.0",
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    run()
