"""Request and response models for the grid API."""

from typing import List

from pydantic import BaseModel, ConfigDict


class ResizeRequest(BaseModel):
    """Body of POST /api/grid."""

    # JSON numbers must be integers; range is checked by the engine
    model_config = ConfigDict(strict=True)

    rows: int
    cols: int


class CellUpdateRequest(BaseModel):
    """Body of POST /api/cell. Out-of-range coordinates are accepted and ignored."""

    model_config = ConfigDict(strict=True)

    row: int
    col: int
    state: bool


class GridResponse(BaseModel):
    """Full grid snapshot returned by every grid endpoint."""

    rows: int
    cols: int
    generation: int = 0
    cells: List[List[bool]]


class ErrorResponse(BaseModel):
    error: str
    message: str
