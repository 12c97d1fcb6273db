"""Cycle Garden API — FastAPI application entry point.

Run locally:
    uvicorn cyclegarden.main:app --reload --port 8000
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cyclegarden.config import get_settings
from cyclegarden.dependencies import get_engine
from cyclegarden.engine.ticker import GrowthTicker
from cyclegarden.routers import calendar, chat, garden, health

# ---------- Logging ----------

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stdout,
)
logger = logging.getLogger("cyclegarden")


# ---------- Lifespan ----------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup / shutdown hooks.

    The growth ticker fires once immediately and then every
    ``growth_tick_seconds``.
    """
    settings = get_settings()
    logger.info(
        "Starting %s API v%s [%s], data in %s",
        settings.app_name,
        settings.app_version,
        settings.environment,
        settings.data_dir,
    )
    ticker = GrowthTicker(get_engine(), interval_seconds=settings.growth_tick_seconds)
    ticker.start()
    app.state.ticker = ticker
    yield
    await ticker.stop()
    logger.info("Cycle Garden API shut down")


# ---------- App factory ----------

def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=f"{settings.app_name} API",
        description=(
            "Cycle tracking with a virtual plant that grows with your phase, "
            "self-care streak and moods."
        ),
        version=settings.app_version,
        debug=settings.debug,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---------- Health check (outside v1 prefix — always at /health) ----------
    app.include_router(health.router)

    # ---------- API v1 routes ----------
    v1_prefix = "/api/v1"

    app.include_router(garden.router, prefix=v1_prefix)
    app.include_router(calendar.router, prefix=v1_prefix)
    app.include_router(chat.router, prefix=v1_prefix)

    return app


app = create_app()
