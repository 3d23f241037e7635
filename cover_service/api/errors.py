"""Exception handlers translating generation errors into JSON envelopes."""

import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from cover_service.generation.errors import CoverGenerationError

logger = logging.getLogger(__name__)


def error_envelope(exc: CoverGenerationError) -> dict:
    """``{error}`` for caller mistakes, ``{error, details}`` for server failures."""
    if exc.http_status < 500:
        return {"error": exc.message}
    return {"error": f"Server Error: {exc.message}", "details": exc.details}


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(CoverGenerationError)
    async def _generation_error(request: Request, exc: CoverGenerationError) -> JSONResponse:
        if exc.http_status >= 500:
            logger.error(
                "%s on %s (remote status=%s): %s details=%s",
                type(exc).__name__, request.url.path, exc.remote_status,
                exc.message, exc.details,
            )
        return JSONResponse(status_code=exc.http_status, content=error_envelope(exc))

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error: %s\n%s", exc, traceback.format_exc())
        return JSONResponse(
            status_code=500,
            content={"error": f"Server Error: {exc}", "details": ""},
        )
