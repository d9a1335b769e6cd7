"""
Error mapping shared by the model routers.

Model service failures are reported as gateway errors; the routers
re-raise them untouched and the handlers here turn them into responses.
"""

import logging

import httpx
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from app.clients.platform_client import PlatformConfigurationError

logger = logging.getLogger(__name__)

# Exceptions routers let through to the application handlers
PASSTHROUGH_ERRORS = (HTTPException, httpx.HTTPError, PlatformConfigurationError)


def register_exception_handlers(app: FastAPI) -> None:
    """Register handlers for model service failures."""

    @app.exception_handler(httpx.HTTPStatusError)
    async def model_service_status_handler(request: Request, exc: httpx.HTTPStatusError):
        logger.warning(
            "Model service returned %s for %s",
            exc.response.status_code,
            exc.request.url,
        )
        return JSONResponse(
            status_code=502,
            content={"detail": f"Model service error: {exc.response.status_code}"},
        )

    @app.exception_handler(httpx.RequestError)
    async def model_service_unreachable_handler(request: Request, exc: httpx.RequestError):
        logger.warning("Model service request failed: %s", exc)
        return JSONResponse(
            status_code=502,
            content={"detail": "Model service unreachable"},
        )

    @app.exception_handler(PlatformConfigurationError)
    async def configuration_handler(request: Request, exc: PlatformConfigurationError):
        return JSONResponse(status_code=503, content={"detail": str(exc)})
