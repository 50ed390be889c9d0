"""Pytest configuration and fixtures for grid server tests."""

import pytest
from fastapi.testclient import TestClient

from backend.app_factory import AppContext, create_app
from core.grid import GridEngine


@pytest.fixture
def engine():
    """Provide a fresh default 5x5 grid engine."""
    return GridEngine()


@pytest.fixture
def seed_cells():
    """Return a helper that marks (row, col) positions live on an engine."""

    def _seed(grid_engine: GridEngine, *positions):
        for row, col in positions:
            grid_engine.set_cell(row, col, True)
        return grid_engine.snapshot()

    return _seed


@pytest.fixture
def context(engine):
    """Provide an app context owning the ``engine`` fixture."""
    return AppContext(grid_engine=engine, production_mode=False, ws_heartbeat_seconds=5.0)


@pytest.fixture
def test_client(context):
    """Create a test client with fresh context."""
    app = create_app(context=context)

    with TestClient(app) as client:
        yield client
