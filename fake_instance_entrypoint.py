"""Runs a stand-in monitored instance for local development.

Point a registry entry at http://localhost:8001/health and steer its answer
with STATUS_FAKE_INSTANCE_STATUS_CODE, STATUS_FAKE_INSTANCE_DELAY_MS, or the
?status= and ?delay_ms= query parameters.
"""

from app.mock.fake_instance_server import create_app
from app.core.config import settings
from app.core.logging_config import setup_logging

# Configure logging
logger = setup_logging().bind(module=__name__)

# Create FastAPI application
app = create_app()

if __name__ == "__main__":
    import uvicorn

    logger.info(f"Starting fake instance on {settings.fake_instance_host}:{settings.fake_instance_port}")
    uvicorn.run(
        "fake_instance_entrypoint:app",
        host=settings.fake_instance_host,
        port=settings.fake_instance_port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )
