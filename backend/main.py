"""Server entry point for ``python -m backend.main`` and ``life-grid-server``.

Host, port, reload and log level all come from the app's AppContext, so the
environment is read in exactly one place.
"""

import uvicorn

from backend.app_factory import create_app

# uvicorn imports this by name ("backend.main:app"), including on reload
app = create_app()


def main() -> None:
    ctx = app.state.context
    ctx.logger.info("Serving grid API on %s:%d", ctx.api_host, ctx.api_port)
    uvicorn.run(
        "backend.main:app",
        host=ctx.api_host,
        port=ctx.api_port,
        reload=not ctx.production_mode,
        log_level=ctx.log_level.lower(),
    )


if __name__ == "__main__":
    main()
