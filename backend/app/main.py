"""
FastAPI application entry point.

This module configures the FastAPI application with:
- CORS middleware
- Security headers middleware
- Health check endpoints
- Model service error handlers
- API routers
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from app import __version__
from app.config import get_settings
from app.dependencies import get_platform_client
from app.routers import entities, microflows, modules
from app.routers.errors import register_exception_handlers
from app.schemas.model import HealthResponse

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        # Only add HSTS in production
        if get_settings().env == "production":
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains"
            )

        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()

    logger.info("Mendix Model API starting on port %d (%s)", settings.port, settings.env)
    if settings.mendix_token:
        logger.info("MENDIX_TOKEN found in environment")
    else:
        logger.warning("MENDIX_TOKEN not found in environment variables")

    yield

    await get_platform_client().close()


def create_application() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Mendix Model API",
        description=(
            "Reads and changes Mendix app models through temporary working copies. "
            "Lists modules, entities and microflows, and creates entities."
        ),
        version=__version__,
        docs_url="/api/docs" if settings.env != "production" else None,
        redoc_url="/api/redoc" if settings.env != "production" else None,
        openapi_url="/api/openapi.json" if settings.env != "production" else None,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Security headers
    app.add_middleware(SecurityHeadersMiddleware)

    # Include routers
    app.include_router(modules.router)
    app.include_router(entities.router)
    app.include_router(microflows.router)

    register_exception_handlers(app)

    # Health check endpoints
    @app.get("/health", tags=["health"], response_model=HealthResponse)
    async def health_check():
        """Basic health check."""
        return {"status": "OK", "message": "Mendix API is running"}

    @app.get("/health/liveness", tags=["health"])
    async def liveness_check():
        """Kubernetes liveness probe."""
        return {"status": "alive"}

    @app.get("/health/readiness", tags=["health"])
    async def readiness_check():
        """Kubernetes readiness probe."""
        if not get_settings().mendix_token:
            return JSONResponse(
                status_code=503,
                content={"status": "not ready", "reason": "MENDIX_TOKEN not configured"},
            )
        return {"status": "ready"}

    @app.get("/health/startup", tags=["health"])
    async def startup_check():
        """Kubernetes startup probe."""
        return {"status": "started"}

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        if settings.debug:
            return JSONResponse(
                status_code=500,
                content={"detail": str(exc), "type": type(exc).__name__},
            )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    return app


app = create_application()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=logging.DEBUG if get_settings().debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.env == "development",
        workers=1 if settings.env == "development" else settings.workers,
    )
