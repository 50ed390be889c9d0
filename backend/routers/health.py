"""Liveness endpoint."""

from typing import Callable

from fastapi import APIRouter

from backend import __version__
from core.grid import GridEngine


def setup_router(grid_engine: GridEngine, get_uptime: Callable[[], float]) -> APIRouter:
    router = APIRouter(tags=["health"])

    @router.get("/health")
    def health():
        snapshot = grid_engine.snapshot()
        return {
            "status": "ok",
            "version": __version__,
            "uptime_seconds": round(get_uptime(), 3),
            "rows": snapshot.rows,
            "cols": snapshot.cols,
            "generation": snapshot.generation,
        }

    return router
