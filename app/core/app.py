from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from app.core import status_handler
from app.core.config import settings
from app.core.logging_config import setup_logging
from app.middlewares.logging_middleware import LoggingMiddleware
from app.middlewares.metrics_middleware import PrometheusMiddleware, metrics
from app.services.instance_registry import load_registry
from app.services.status_cache import InMemoryStatusCache, StatusCache

logger = setup_logging()

STATUS_METHODS = ["GET", "HEAD", "POST", "PUT", "DELETE", "PATCH", "OPTIONS", "TRACE", "CONNECT"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application startup...", instances=[i.id for i in app.state.instances])
    app.state.client = await status_handler.create_async_client()
    try:
        yield
    finally:
        await app.state.client.aclose()
        logger.info("Application shutdown...")


def create_app(cache: StatusCache | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)

    app.state.instances = load_registry(settings.instances_file, settings.instances)
    app.state.cache = cache or InMemoryStatusCache()
    app.state.client = None

    # Add Logging Middleware
    app.add_middleware(LoggingMiddleware)

    if settings.metrics_enabled:
        # Add Prometheus middleware
        app.add_middleware(PrometheusMiddleware)

        # Expose metrics endpoint
        @app.get("/metrics")
        async def get_metrics():
            return await metrics()

    # Every other path and method serves the aggregated status
    @app.api_route("/{full_path:path}", methods=STATUS_METHODS)
    async def status(full_path: str, request: Request):
        if request.method == "OPTIONS":
            return status_handler.preflight_response()
        state = request.app.state
        return await status_handler.serve_status(state.client, state.cache, state.instances)

    return app
