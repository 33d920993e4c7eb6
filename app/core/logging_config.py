from app.core.config import settings
import logging
import structlog

def setup_logging():
    """Configures logging for the entire application."""

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if settings.log_file:
        handlers.append(logging.FileHandler(settings.log_file))

    # 1. Standard logging configuration
    logging.basicConfig(
        level=settings.log_level,
        format="%(message)s",  # Structlog will handle formatting
        handlers=handlers,
    )

    # 2. Configure structlog
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),  # Add timestamp
            structlog.processors.add_log_level,  # Include log level
            structlog.stdlib.add_logger_name,  # Include logger name
            structlog.processors.StackInfoRenderer(),  # Adds stack info on errors
            structlog.processors.format_exc_info,  # Adds exception trace
            structlog.processors.JSONRenderer(),  # Output logs in JSON format
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # 3. Probe traffic goes through httpx; keep its per-request lines out of INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return structlog.get_logger()
