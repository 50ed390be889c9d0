"""Exception handlers translating domain and validation errors to HTTP.

Every rejected request is answered with HTTP 400 and an ``ErrorResponse``
shaped body; the grid is never touched on these paths.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.exceptions import GridError, MalformedRequest

logger = logging.getLogger(__name__)


def error_payload(exc: GridError) -> dict:
    payload = {"error": type(exc).__name__, "message": str(exc)}
    details = getattr(exc, "details", None)
    if details:
        payload["details"] = jsonable_encoder(details)
    return payload


async def grid_error_handler(request: Request, exc: GridError) -> JSONResponse:
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(error_payload(exc), status_code=status.HTTP_400_BAD_REQUEST)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    malformed = MalformedRequest(
        "Request body does not match the expected shape.",
        details=[
            {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
            for err in exc.errors()
        ],
    )
    return await grid_error_handler(request, malformed)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the grid error handlers to ``app``."""
    app.add_exception_handler(GridError, grid_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
