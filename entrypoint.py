"""Runs the instance status service under uvicorn.

Every path answers with the cached aggregate of the configured instances' health checks.
"""

from app.core.app import create_app
from app.core.config import settings
from app.core.logging_config import setup_logging

# Configure logging
logger = setup_logging().bind(module=__name__)

# Create FastAPI application
app = create_app()

if __name__ == "__main__":
    import uvicorn

    logger.info(f"Starting status server on {settings.host}:{settings.port}")
    uvicorn.run(
        "entrypoint:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )
