"""Conway's Game of Life transition rules.

Pure functions over a row-major boolean matrix. Nothing here holds state or
locks; ``core.grid.GridEngine`` owns the matrix and calls into this module.

The grid is bounded: neighbors that fall outside ``[0, rows) x [0, cols)``
are simply absent from the count (no wraparound).
"""

from typing import List, Sequence

from core.config.grid import MAX_GRID_SIZE, MIN_GRID_SIZE
from core.exceptions import InvalidDimensions

Cells = List[List[bool]]

# Moore neighborhood offsets, center excluded
NEIGHBOR_OFFSETS = tuple(
    (dr, dc) for dr in (-1, 0, 1) for dc in (-1, 0, 1) if (dr, dc) != (0, 0)
)


def validate_dimensions(rows: int, cols: int) -> None:
    """Raise InvalidDimensions unless both axes are ints within bounds."""
    for value in (rows, cols):
        # bool is an int subclass; True would otherwise pass as 1
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidDimensions(rows, cols, "Grid dimensions must be integers.")
        if not MIN_GRID_SIZE <= value <= MAX_GRID_SIZE:
            raise InvalidDimensions(
                rows,
                cols,
                f"Invalid grid dimensions. Max {MAX_GRID_SIZE}x{MAX_GRID_SIZE}.",
            )


def empty_cells(rows: int, cols: int) -> Cells:
    return [[False] * cols for _ in range(rows)]


def count_live_neighbors(cells: Sequence[Sequence[bool]], row: int, col: int) -> int:
    """Count live cells among the 8 Moore-adjacent positions of (row, col)."""
    rows = len(cells)
    cols = len(cells[0]) if rows else 0
    count = 0
    for dr, dc in NEIGHBOR_OFFSETS:
        r, c = row + dr, col + dc
        if 0 <= r < rows and 0 <= c < cols and cells[r][c]:
            count += 1
    return count


def next_state(alive: bool, live_neighbors: int) -> bool:
    """Apply B3/S23 to a single cell."""
    if alive:
        return live_neighbors in (2, 3)
    return live_neighbors == 3


def next_generation(cells: Sequence[Sequence[bool]]) -> Cells:
    """Compute the next generation.

    Counts are always taken from ``cells`` (the current generation); the
    result is built in a fresh matrix so the input is never mutated.
    """
    return [
        [
            next_state(bool(alive), count_live_neighbors(cells, r, c))
            for c, alive in enumerate(row)
        ]
        for r, row in enumerate(cells)
    ]
