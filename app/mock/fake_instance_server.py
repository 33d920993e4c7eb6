import asyncio

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from app.core.config import settings
from app.core.logging_config import setup_logging
from app.middlewares.logging_middleware import LoggingMiddleware

logger = setup_logging()

def create_app() -> FastAPI:
    """Create a stand-in instance whose /health answers with a chosen status after a chosen delay."""
    app = FastAPI(title="Fake Instance", debug=settings.debug)

    # Add Logging Middleware
    app.add_middleware(LoggingMiddleware)

    @app.get("/health")
    async def health(status: int | None = None, delay_ms: int | None = None):
        status_code = status if status is not None else settings.fake_instance_status_code
        delay = delay_ms if delay_ms is not None else settings.fake_instance_delay_ms
        if delay > 0:
            await asyncio.sleep(delay / 1000)
        logger.debug("Fake health answered", status_code=status_code, delay_ms=delay)
        return JSONResponse(
            content={"status": "ok" if 200 <= status_code < 300 else "error"},
            status_code=status_code,
        )

    return app
