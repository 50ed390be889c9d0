"""Grid engine exception hierarchy.

Centralised base classes so the HTTP layer can map every domain failure
to a rejected request with a single handler.
"""

from typing import Any, List, Optional


class GridError(Exception):
    """Root of all grid domain exceptions."""


class InvalidDimensions(GridError, ValueError):
    """Requested grid size is outside the supported bounds."""

    def __init__(self, rows: Any, cols: Any, message: Optional[str] = None):
        self.rows = rows
        self.cols = cols
        super().__init__(message or f"Invalid grid dimensions {rows}x{cols}.")


class MalformedRequest(GridError, ValueError):
    """Request body could not be parsed into the expected shape."""

    def __init__(self, message: str = "Malformed request body.", details: Optional[List[Any]] = None):
        self.details = details or []
        super().__init__(message)
