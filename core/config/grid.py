"""Grid size configuration constants."""

# Inclusive bounds for both axes
MIN_GRID_SIZE = 1
MAX_GRID_SIZE = 20

# Grid created at startup
DEFAULT_ROWS = 5
DEFAULT_COLS = 5
