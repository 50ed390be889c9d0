"""Logging setup for the grid server."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Loggers that follow the server's configured level
ALIGNED_LOGGERS = ("backend", "core", "uvicorn", "uvicorn.error", "uvicorn.access")


def configure_logging(level: str) -> logging.Logger:
    """Apply ``level`` to the root handler and every server logger.

    Safe to call once per app; ``basicConfig`` only installs a handler the
    first time.

    Returns:
        The ``backend`` logger.
    """
    resolved_level = level.upper()
    logging.basicConfig(level=resolved_level, format=LOG_FORMAT, datefmt=LOG_DATEFMT)

    for logger_name in ALIGNED_LOGGERS:
        logging.getLogger(logger_name).setLevel(resolved_level)

    app_logger = logging.getLogger("backend")
    app_logger.debug("Logging configured at %s", resolved_level)
    return app_logger
