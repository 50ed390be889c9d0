"""Tests for the grid HTTP endpoints.

These exercise the request/response contract: every mutating call returns
the full post-mutation grid, resize rejections and malformed bodies are
answered with 400, and out-of-range cells are silently ignored.
"""

import pytest

from backend.app_factory import AppContext, create_app
from core.grid import GridEngine


def _live(payload):
    return [
        (r, c)
        for r, row in enumerate(payload["cells"])
        for c, alive in enumerate(row)
        if alive
    ]


class TestGetGrid:
    def test_returns_default_grid(self, test_client):
        response = test_client.get("/api/grid")
        assert response.status_code == 200

        data = response.json()
        assert data["rows"] == 5
        assert data["cols"] == 5
        assert data["generation"] == 0
        assert data["cells"] == [[False] * 5 for _ in range(5)]

    def test_reflects_engine_state(self, test_client, engine):
        engine.set_cell(3, 1, True)
        assert _live(test_client.get("/api/grid").json()) == [(3, 1)]

    def test_no_cache_headers(self, test_client):
        response = test_client.get("/api/grid")
        assert "no-store" in response.headers["cache-control"]
        assert response.headers["x-content-type-options"] == "nosniff"


class TestResizeGrid:
    def test_resize_returns_created_snapshot(self, test_client):
        response = test_client.post("/api/grid", json={"rows": 3, "cols": 20})
        assert response.status_code == 201

        data = response.json()
        assert (data["rows"], data["cols"]) == (3, 20)
        assert len(data["cells"]) == 3
        assert all(len(row) == 20 for row in data["cells"])

    @pytest.mark.parametrize(
        "body", [{"rows": 0, "cols": 5}, {"rows": 5, "cols": 21}, {"rows": -2, "cols": 5}]
    )
    def test_invalid_dimensions_rejected(self, test_client, engine, body):
        engine.set_cell(0, 0, True)
        before = engine.snapshot()

        response = test_client.post("/api/grid", json=body)
        assert response.status_code == 400
        assert response.json()["error"] == "InvalidDimensions"
        assert engine.snapshot() == before

    @pytest.mark.parametrize(
        "body",
        [
            {"rows": "5", "cols": 5},
            {"rows": 5.5, "cols": 5},
            {"rows": 5},
            {"rows": True, "cols": 5},
            [],
        ],
    )
    def test_malformed_body_rejected(self, test_client, engine, body):
        before = engine.snapshot()

        response = test_client.post("/api/grid", json=body)
        assert response.status_code == 400
        assert response.json()["error"] == "MalformedRequest"
        assert engine.snapshot() == before

    def test_unparsable_json_rejected(self, test_client):
        response = test_client.post(
            "/api/grid",
            content=b"{rows: 5",
            headers={"content-type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "MalformedRequest"


class TestResetGrid:
    def test_reset_clears_cells(self, test_client, engine, seed_cells):
        engine.create(4, 6)
        seed_cells(engine, (0, 0), (3, 5))

        response = test_client.post("/api/grid/reset")
        assert response.status_code == 200

        data = response.json()
        assert (data["rows"], data["cols"]) == (4, 6)
        assert _live(data) == []

    def test_get_not_allowed(self, test_client):
        assert test_client.get("/api/grid/reset").status_code == 405


class TestSetCell:
    def test_set_and_unset(self, test_client):
        response = test_client.post("/api/cell", json={"row": 2, "col": 4, "state": True})
        assert response.status_code == 200
        assert _live(response.json()) == [(2, 4)]

        response = test_client.post("/api/cell", json={"row": 2, "col": 4, "state": False})
        assert _live(response.json()) == []

    @pytest.mark.parametrize("row,col", [(-1, 0), (5, 0), (0, 5), (0, -1)])
    def test_out_of_range_ignored(self, test_client, engine, row, col):
        engine.set_cell(1, 1, True)
        before = test_client.get("/api/grid").json()

        response = test_client.post("/api/cell", json={"row": row, "col": col, "state": True})
        assert response.status_code == 200
        assert response.json() == before

    @pytest.mark.parametrize(
        "body",
        [
            {"row": 1, "col": 1},
            {"row": 1, "col": 1, "state": "yes"},
            {"row": 1, "col": 1, "state": 1},
            {"row": "1", "col": 1, "state": True},
        ],
    )
    def test_malformed_body_rejected(self, test_client, engine, body):
        response = test_client.post("/api/cell", json=body)
        assert response.status_code == 400
        assert response.json()["error"] == "MalformedRequest"
        assert engine.snapshot().live_cells() == []


class TestNextGeneration:
    def test_blinker_over_http(self, test_client):
        for col in (1, 2, 3):
            test_client.post("/api/cell", json={"row": 2, "col": col, "state": True})

        response = test_client.post("/api/next")
        assert response.status_code == 200
        data = response.json()
        assert _live(data) == [(1, 2), (2, 2), (3, 2)]
        assert data["generation"] == 1

        data = test_client.post("/api/next").json()
        assert _live(data) == [(2, 1), (2, 2), (2, 3)]
        assert data["generation"] == 2


class TestHealth:
    def test_health(self, test_client):
        response = test_client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestProductionMode:
    @pytest.fixture
    def prod_client(self):
        from fastapi.testclient import TestClient

        context = AppContext(
            grid_engine=GridEngine(),
            production_mode=True,
            allowed_origins=["http://localhost:3000"],
        )
        with TestClient(create_app(context=context)) as client:
            yield client

    def test_docs_disabled(self, prod_client):
        assert prod_client.get("/docs").status_code == 404

    def test_cors_allows_configured_origin(self, prod_client):
        response = prod_client.get("/api/grid", headers={"Origin": "http://localhost:3000"})
        assert response.headers["access-control-allow-origin"] == "http://localhost:3000"

    def test_cors_omits_unknown_origin(self, prod_client):
        response = prod_client.get("/api/grid", headers={"Origin": "http://elsewhere.example"})
        assert "access-control-allow-origin" not in response.headers
