from app.core.logging_config import setup_logging
import logging
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
import time
import json

logger = setup_logging()

# Request headers kept in access logs
_LOGGED_HEADERS = ("user-agent", "origin", "referer", "x-forwarded-for")


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        """Middleware to log request and response information"""
        start_time = time.time()

        log_data = {
            "method": request.method,
            "path": request.url.path,
            "query_params": dict(request.query_params),
            "headers": {key: request.headers[key] for key in _LOGGED_HEADERS if key in request.headers},
        }
        logger.info("Incoming Request", **log_data)

        response = await call_next(request)

        process_time = time.time() - start_time
        response_log = {
            "status_code": response.status_code,
            "content_length": response.headers.get("content-length"),
            "process_time": f"{process_time:.4f}s",
        }

        if not logger.isEnabledFor(logging.DEBUG):
            logger.info("Outgoing Response", **response_log)
            return response

        # Read response body (only if debugging)
        response_body = b""
        async for chunk in response.body_iterator:
            response_body += chunk

        # Clone the response (because body can be consumed only once)
        response = Response(
            content=response_body,
            status_code=response.status_code,
            headers=dict(response.headers),
            media_type=response.media_type
        )

        try:
            response_log["body"] = json.loads(response_body.decode("utf-8")) if response_body else None
        except ValueError:
            response_log["body"] = response_body.decode("utf-8")  # Log as raw text

        logger.debug("Outgoing Response", **response_log)

        return response
