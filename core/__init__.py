"""Core grid engine for the Game of Life server.

This package contains the pure simulation logic with no web dependencies:

- grid: GridEngine (shared grid state behind one lock) and GridSnapshot
- rules: neighbor counting and the B3/S23 transition rule
- exceptions: domain exception hierarchy
- config: grid bounds and server defaults
"""

from core.exceptions import GridError, InvalidDimensions, MalformedRequest
from core.grid import GridEngine, GridSnapshot

__all__ = [
    "GridEngine",
    "GridSnapshot",
    "GridError",
    "InvalidDimensions",
    "MalformedRequest",
]
