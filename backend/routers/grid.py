"""Grid API endpoints.

Handlers are plain ``def`` functions so Starlette runs each request in its
worker thread pool; ``GridEngine`` serializes the concurrent calls.

Endpoints:
    GET /api/grid - Current grid snapshot
    POST /api/grid - Replace the grid with an empty one of a new size
    POST /api/grid/reset - Clear every cell
    POST /api/cell - Set a single cell
    POST /api/next - Advance one generation
"""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from backend.models import CellUpdateRequest, ErrorResponse, GridResponse, ResizeRequest
from core.grid import GridEngine

logger = logging.getLogger(__name__)

_REJECTED = {status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}}


def setup_router(grid_engine: GridEngine) -> APIRouter:
    """Create the grid router bound to ``grid_engine``.

    Args:
        grid_engine: The process-wide grid engine

    Returns:
        Configured APIRouter
    """
    router = APIRouter(prefix="/api", tags=["grid"])

    @router.get("/grid", response_model=GridResponse)
    def get_grid():
        """Return the current grid."""
        return JSONResponse(grid_engine.snapshot().to_dict())

    @router.post(
        "/grid",
        response_model=GridResponse,
        status_code=status.HTTP_201_CREATED,
        responses=_REJECTED,
    )
    def resize_grid(body: ResizeRequest):
        """Discard the current grid and create an empty one of the requested size.

        Raises InvalidDimensions (400) when either axis is outside [1, 20].
        """
        snapshot = grid_engine.create(body.rows, body.cols)
        return JSONResponse(snapshot.to_dict(), status_code=status.HTTP_201_CREATED)

    @router.post("/grid/reset", response_model=GridResponse)
    def reset_grid():
        """Set every cell dead, keeping the dimensions."""
        return JSONResponse(grid_engine.clear().to_dict())

    @router.post("/cell", response_model=GridResponse, responses=_REJECTED)
    def set_cell(body: CellUpdateRequest):
        """Set one cell; coordinates outside the grid are silently ignored."""
        snapshot = grid_engine.set_cell(body.row, body.col, body.state)
        return JSONResponse(snapshot.to_dict())

    @router.post("/next", response_model=GridResponse)
    def next_generation():
        """Advance the simulation one generation."""
        return JSONResponse(grid_engine.advance().to_dict())

    return router
