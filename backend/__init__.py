"""Backend package for the Game of Life grid server.

This package provides the FastAPI web server and the WebSocket feed,
as thin adapters over ``core.grid.GridEngine``.
"""

__version__ = "1.0.0"
