"""Application factory and context for the Game of Life grid server.

This module provides a factory for creating the FastAPI app without
import-time side effects. The grid engine is owned by an AppContext rather
than a module-level global.

Design Decision:
----------------
We use an AppContext dataclass to hold all runtime state. This:
1. Gives each test a fresh grid
2. Makes the single shared grid an explicit dependency of the routers
3. Keeps configuration lookups in one place

Usage:
------
    # For production (uses default settings from environment)
    app = create_app()

    # For testing (custom configuration)
    app = create_app(context=AppContext(grid_engine=GridEngine(3, 3)))
"""

import logging
import os
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend import __version__
from backend.errors import register_exception_handlers
from backend.logging_config import configure_logging
from backend.security import WebSocketLimiter, setup_security_middleware
from core.config.server import (
    DEFAULT_ALLOWED_ORIGINS,
    DEFAULT_API_HOST,
    DEFAULT_API_PORT,
    DEFAULT_LOG_LEVEL,
    WS_HEARTBEAT_SECONDS,
)
from core.grid import GridEngine


def _env_list(name: str, default: str) -> list:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


@dataclass
class AppContext:
    """Runtime context holding all application state."""

    # The one grid of the process (default 5x5)
    grid_engine: GridEngine = field(default_factory=GridEngine)
    websocket_limiter: WebSocketLimiter = field(default_factory=WebSocketLimiter)

    # Configuration
    api_host: str = field(default_factory=lambda: os.getenv("LIFE_API_HOST", DEFAULT_API_HOST))
    api_port: int = field(
        default_factory=lambda: int(os.getenv("LIFE_API_PORT", str(DEFAULT_API_PORT)))
    )
    log_level: str = field(
        default_factory=lambda: os.getenv("LIFE_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    )
    production_mode: bool = field(
        default_factory=lambda: os.getenv("PRODUCTION", "false").lower() == "true"
    )
    allowed_origins: list = field(
        default_factory=lambda: _env_list("ALLOWED_ORIGINS", DEFAULT_ALLOWED_ORIGINS)
    )
    # Peers whose X-Forwarded-For / X-Real-IP headers are believed
    trusted_proxies: frozenset = field(
        default_factory=lambda: frozenset(_env_list("TRUSTED_PROXIES", ""))
    )
    ws_heartbeat_seconds: float = field(
        default_factory=lambda: float(
            os.getenv("LIFE_WS_HEARTBEAT_SECONDS", str(WS_HEARTBEAT_SECONDS))
        )
    )

    server_start_time: float = field(default_factory=time.time)

    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("backend"))

    def uptime_seconds(self) -> float:
        return time.time() - self.server_start_time


def create_app(
    *,
    production_mode: bool | None = None,
    context: AppContext | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        production_mode: Override production mode (default: from PRODUCTION env var)
        context: Pre-configured AppContext (for testing). If None, creates a new one.

    Returns:
        Configured FastAPI application with context attached as app.state.context
    """
    if context is None:
        context = AppContext()

    if production_mode is not None:
        context.production_mode = production_mode

    context.logger = configure_logging(context.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        ctx = app.state.context
        snapshot = ctx.grid_engine.snapshot()
        ctx.logger.info(
            "LIFESPAN: Startup complete - serving %dx%d grid", snapshot.rows, snapshot.cols
        )
        yield
        ctx.logger.info("LIFESPAN: Received shutdown signal")

    app = FastAPI(
        title="Game of Life Grid API",
        version=__version__,
        lifespan=lifespan,
        docs_url=None if context.production_mode else "/docs",
        redoc_url=None if context.production_mode else "/redoc",
    )

    app.state.context = context

    # Only production pins origins; the development client may run anywhere
    app.add_middleware(
        CORSMiddleware,
        allow_origins=context.allowed_origins if context.production_mode else ["*"],
        allow_credentials=context.production_mode,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    setup_security_middleware(
        app,
        enable_rate_limiting=context.production_mode,
        trusted_proxies=context.trusted_proxies,
    )
    register_exception_handlers(app)
    _setup_routers(app, context)

    return app


def _setup_routers(app: FastAPI, ctx: AppContext) -> None:
    """Setup and include all API routers."""
    from backend.routers import grid, health, websocket

    app.include_router(grid.setup_router(ctx.grid_engine))
    app.include_router(health.setup_router(ctx.grid_engine, ctx.uptime_seconds))
    app.include_router(
        websocket.setup_router(
            ctx.grid_engine,
            ctx.websocket_limiter,
            ctx.ws_heartbeat_seconds,
            ctx.trusted_proxies,
        )
    )

    ctx.logger.info("API routers configured successfully")
