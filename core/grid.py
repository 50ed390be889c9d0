"""Grid state machine for the Game of Life server.

``GridEngine`` is the single shared mutable resource of the process. Every
operation (create, snapshot, set_cell, clear, advance) runs under one
exclusive lock covering the full read-modify-write sequence, so a resize
racing a cell update can never leave a torn or dimension-mismatched grid.

All operations are CPU-bound and O(rows * cols) on a grid capped at 20x20,
so the lock is held only briefly. Callers that keep a connection open (the
WebSocket feed) take a snapshot and release the lock immediately.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from core.config.grid import DEFAULT_COLS, DEFAULT_ROWS
from core.rules import Cells, empty_cells, next_generation, validate_dimensions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GridSnapshot:
    """Immutable copy of the grid at one instant."""

    rows: int
    cols: int
    cells: Tuple[Tuple[bool, ...], ...]
    generation: int = 0

    def is_alive(self, row: int, col: int) -> bool:
        return self.cells[row][col]

    def live_cells(self) -> List[Tuple[int, int]]:
        """Return (row, col) of every live cell in row-major order."""
        return [
            (r, c)
            for r, row in enumerate(self.cells)
            for c, alive in enumerate(row)
            if alive
        ]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "rows": self.rows,
            "cols": self.cols,
            "generation": self.generation,
            "cells": [list(row) for row in self.cells],
        }


class GridEngine:
    """Owns the grid and serializes all access to it."""

    def __init__(self, rows: int = DEFAULT_ROWS, cols: int = DEFAULT_COLS):
        validate_dimensions(rows, cols)
        self._lock = threading.Lock()
        self._rows = rows
        self._cols = cols
        self._cells: Cells = empty_cells(rows, cols)
        self._generation = 0
        logger.info("GridEngine initialized with %dx%d grid", rows, cols)

    @property
    def rows(self) -> int:
        with self._lock:
            return self._rows

    @property
    def cols(self) -> int:
        with self._lock:
            return self._cols

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def _snapshot_locked(self) -> GridSnapshot:
        # rows/cols are the stored fields, never derived from the matrix
        return GridSnapshot(
            rows=self._rows,
            cols=self._cols,
            cells=tuple(tuple(row) for row in self._cells),
            generation=self._generation,
        )

    def _in_bounds(self, row: Any, col: Any) -> bool:
        for value in (row, col):
            if isinstance(value, bool) or not isinstance(value, int):
                return False
        return 0 <= row < self._rows and 0 <= col < self._cols

    def create(self, rows: int, cols: int) -> GridSnapshot:
        """Replace the grid with a new all-dead grid of the given size.

        Raises:
            InvalidDimensions: If either axis is outside the supported
                bounds. The current grid is left untouched.
        """
        validate_dimensions(rows, cols)
        cells = empty_cells(rows, cols)
        with self._lock:
            self._rows = rows
            self._cols = cols
            self._cells = cells
            self._generation = 0
            snapshot = self._snapshot_locked()
        logger.info("Grid resized to %dx%d", rows, cols)
        return snapshot

    def snapshot(self) -> GridSnapshot:
        with self._lock:
            return self._snapshot_locked()

    def set_cell(self, row: int, col: int, state: bool) -> GridSnapshot:
        """Set a single cell. Out-of-range coordinates are ignored."""
        with self._lock:
            if self._in_bounds(row, col):
                self._cells[row][col] = bool(state)
            else:
                logger.debug(
                    "Ignoring out-of-range cell (%s, %s) on %dx%d grid",
                    row,
                    col,
                    self._rows,
                    self._cols,
                )
            return self._snapshot_locked()

    def clear(self) -> GridSnapshot:
        with self._lock:
            for row in self._cells:
                for c in range(self._cols):
                    row[c] = False
            snapshot = self._snapshot_locked()
        logger.info("Grid cleared (%dx%d)", snapshot.rows, snapshot.cols)
        return snapshot

    def advance(self) -> GridSnapshot:
        """Install the next generation and return the resulting snapshot."""
        with self._lock:
            self._cells = next_generation(self._cells)
            self._generation += 1
            snapshot = self._snapshot_locked()
        logger.debug("Advanced to generation %d", snapshot.generation)
        return snapshot
