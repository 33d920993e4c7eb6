import json
from typing import Iterable

from fastapi.responses import Response
from httpx import AsyncBaseTransport, AsyncClient, Limits, Timeout
from starlette.background import BackgroundTask

from app.core.config import settings
from app.core.logging_config import setup_logging
from app.schemas.instance import Instance
from app.schemas.status import CachedStatus, StatusDocument
from app.services.probe_metrics import record_cache_lookup
from app.services.status_aggregator import get_status
from app.services.status_cache import StatusCache

logger = setup_logging()

PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Max-Age": "86400",
}


async def create_async_client(transport: AsyncBaseTransport | None = None) -> AsyncClient:
    """Shared client for all probes. Redirects are followed to the final health response."""
    return AsyncClient(
        transport=transport,
        follow_redirects=True,
        timeout=Timeout(settings.probe_timeout_ms / 1000),
        limits=Limits(
            max_connections=settings.probe_max_connections,
            max_keepalive_connections=settings.probe_max_connections,
        ),
    )


def preflight_response() -> Response:
    return Response(status_code=200, headers=PREFLIGHT_HEADERS)


def status_headers(ttl: int) -> dict[str, str]:
    return {
        "Content-Type": "application/json",
        "Access-Control-Allow-Origin": "*",
        "Cache-Control": f"public, max-age={ttl}",
    }


def serialize_status(document: StatusDocument, ttl: int) -> CachedStatus:
    body = json.dumps(document.to_payload(), indent=2, ensure_ascii=False).encode("utf-8")
    return CachedStatus(body=body, headers=status_headers(ttl))


async def store_status(cache: StatusCache, key: str, value: CachedStatus, ttl: int) -> None:
    """Background cache write. Failures are logged and dropped."""
    try:
        await cache.put(key, value, ttl)
        logger.debug("Status cached", key=key, ttl=ttl)
    except Exception as e:
        logger.warning("Status cache write failed", key=key, exception=str(e), exception_type=type(e).__name__)


async def serve_status(client: AsyncClient, cache: StatusCache, instances: Iterable[Instance]) -> Response:
    key = settings.cache_key
    ttl = settings.cache_ttl

    try:
        cached = await cache.get(key)
    except Exception as e:
        logger.warning("Status cache read failed", key=key, exception=str(e), exception_type=type(e).__name__)
        cached = None

    record_cache_lookup(cached is not None)
    if cached is not None:
        logger.debug("Status cache hit", key=key)
        return Response(content=cached.body, status_code=200, headers=cached.headers)

    logger.info("Status cache miss, probing instances", key=key)
    document = await get_status(
        client,
        instances,
        timeout_ms=settings.probe_timeout_ms,
        user_agent=settings.probe_user_agent,
    )
    fresh = serialize_status(document, ttl)
    return Response(
        content=fresh.body,
        status_code=200,
        headers=fresh.headers,
        background=BackgroundTask(store_status, cache, key, fresh, ttl),
    )
