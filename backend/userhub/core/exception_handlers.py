# userhub/core/exception_handlers.py
"""
Top-level error boundary.
Converts every exception escaping a route into the uniform error envelope.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from userhub.core.exceptions import ApiError
from userhub.schemas.response import api_error

logger = logging.getLogger("uvicorn.error")


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=api_error(exc.status_code, exc.message, exc.errors),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are reported as 400 with per-field details."""
    errors = []
    for error in exc.errors():
        errors.append({
            "field": ".".join(str(loc) for loc in error["loc"][1:]),
            "message": error["msg"],
        })
    return JSONResponse(status_code=400, content=api_error(400, "Invalid request.", errors))


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=api_error(exc.status_code, str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("[error] unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=api_error(500, "Internal server error."))


def setup_exception_handlers(app: FastAPI) -> None:
    """Register the global exception handlers."""
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
