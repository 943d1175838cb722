"""Application factory for the FastAPI service."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .routers.calendar_preferences import router as calendar_preferences_router
from .routers.engine import router as engine_router
from .services.calendar_preferences import get_calendar_preferences_service
from .services.ticker import DashboardClock


def _configure_logging() -> None:
    """Configure logging based on LOG_LEVEL environment variable."""
    # Load .env file first to ensure LOG_FILE is available
    load_dotenv()

    log_level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, log_level_str, logging.INFO)

    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handlers: list[logging.Handler] = []

    log_file = os.getenv("LOG_FILE")
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    # Always add console handler
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    logging.basicConfig(
        level=log_level,
        handlers=handlers,
        force=True,  # Override any existing configuration
    )

    logging.getLogger("dashboard_engine").setLevel(log_level)
    logging.getLogger("uvicorn").setLevel(log_level)
    logging.getLogger("uvicorn.access").setLevel(log_level)
    logging.getLogger("uvicorn.error").setLevel(log_level)


def create_app() -> FastAPI:
    # Configure logging first thing
    _configure_logging()

    settings = get_settings()
    preferences = get_calendar_preferences_service().get_preferences()

    clock = DashboardClock(
        preferences.timezone or settings.timezone,
        interval_seconds=settings.tick_seconds,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        clock.start()
        logging.info(
            "Dashboard clock started (%s, every %.0fs)",
            clock.snapshot.timezone_display(),
            settings.tick_seconds,
        )
        try:
            yield
        finally:
            await clock.stop()

    app = FastAPI(
        title="Dashboard Temporal Engine",
        version="0.1.0",
        description="Calendar grids, ranked action feeds and funnel summaries for career dashboards.",
        lifespan=lifespan,
    )

    app.state.dashboard_clock = clock

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(engine_router)
    app.include_router(calendar_preferences_router)

    @app.get("/health", tags=["health"])
    async def healthcheck() -> dict[str, str | bool]:
        snapshot = clock.snapshot
        return {
            "status": "ok",
            "timezone": snapshot.timezone_display(),
            "now": snapshot.iso_local,
            "clock_running": clock.running,
        }

    return app


__all__ = ["create_app"]
