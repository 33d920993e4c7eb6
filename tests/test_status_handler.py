import json

import pytest
from unittest.mock import AsyncMock, patch
from starlette.background import BackgroundTask

from app.core import status_handler
from app.schemas.status import CachedStatus, CheckResult, InstanceStatus, OverallStatus, StatusDocument


def _document():
    return StatusDocument(
        timestamp="2026-10-17T11:05:00.123Z",
        overall=OverallStatus.DEGRADED,
        instances=(
            CheckResult(id="usa", name="United States", status=InstanceStatus.ONLINE, latency_ms=40, status_code=200),
            CheckResult(id="fra", name="France", status=InstanceStatus.OFFLINE, error_message="Timed out after 5000ms"),
            CheckResult(id="gbr", name="United Kingdom", status=InstanceStatus.DEGRADED, latency_ms=120, status_code=503),
        ),
    )


def test_preflight_response():
    response = status_handler.preflight_response()

    assert response.status_code == 200
    assert response.body == b""
    assert response.headers["access-control-allow-origin"] == "*"
    assert response.headers["access-control-allow-methods"] == "GET, OPTIONS"
    assert response.headers["access-control-allow-headers"] == "Content-Type"
    assert response.headers["access-control-max-age"] == "86400"


def test_serialize_status_is_pretty_json_with_headers():
    cached = status_handler.serialize_status(_document(), ttl=30)

    assert cached.body.startswith(b'{\n  "timestamp": "2026-10-17T11:05:00.123Z",\n  "overall": "degraded"')
    assert cached.headers == {
        "Content-Type": "application/json",
        "Access-Control-Allow-Origin": "*",
        "Cache-Control": "public, max-age=30",
    }
    payload = json.loads(cached.body)
    assert payload["instances"][0] == {
        "id": "usa", "name": "United States", "status": "online", "latency": 40, "statusCode": 200,
    }
    assert payload["instances"][1] == {
        "id": "fra", "name": "France", "status": "offline", "latency": None, "error": "Timed out after 5000ms",
    }
    assert payload["instances"][2]["statusCode"] == 503


@pytest.mark.asyncio
async def test_cache_miss_aggregates_and_schedules_background_store(instances):
    cache = AsyncMock()
    cache.get = AsyncMock(return_value=None)
    client = AsyncMock()
    document = _document()

    with patch("app.core.status_handler.get_status", AsyncMock(return_value=document)) as mock_get_status:
        response = await status_handler.serve_status(client, cache, instances)

    mock_get_status.assert_awaited_once()
    assert mock_get_status.call_args.args[:2] == (client, instances)
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/json"
    assert response.headers["cache-control"] == "public, max-age=30"
    assert json.loads(response.body)["overall"] == "degraded"

    # The write happens only once the background task runs
    cache.put.assert_not_awaited()
    assert isinstance(response.background, BackgroundTask)
    await response.background()
    cache.put.assert_awaited_once()
    key, value, ttl = cache.put.call_args.args
    assert key == "/status"
    assert value.body == response.body
    assert ttl == 30


@pytest.mark.asyncio
async def test_cache_hit_returns_cached_response_unmodified(instances):
    cached = CachedStatus(body=b'{"cached": true}', headers={"Content-Type": "application/json", "X-Test": "1"})
    cache = AsyncMock()
    cache.get = AsyncMock(return_value=cached)

    with patch("app.core.status_handler.get_status", AsyncMock()) as mock_get_status:
        response = await status_handler.serve_status(AsyncMock(), cache, instances)

    mock_get_status.assert_not_awaited()
    cache.get.assert_awaited_once_with("/status")
    assert response.body == b'{"cached": true}'
    assert response.headers["x-test"] == "1"
    assert response.background is None


@pytest.mark.asyncio
async def test_cache_read_failure_is_a_miss(instances):
    cache = AsyncMock()
    cache.get = AsyncMock(side_effect=RuntimeError("cache down"))

    with patch("app.core.status_handler.get_status", AsyncMock(return_value=_document())) as mock_get_status:
        response = await status_handler.serve_status(AsyncMock(), cache, instances)

    mock_get_status.assert_awaited_once()
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_store_status_swallows_cache_write_failure():
    cache = AsyncMock()
    cache.put = AsyncMock(side_effect=RuntimeError("cache down"))
    value = CachedStatus(body=b"{}")

    await status_handler.store_status(cache, "/status", value, 30)

    cache.put.assert_awaited_once_with("/status", value, 30)


@pytest.mark.asyncio
async def test_create_async_client_uses_probe_settings():
    with patch.object(status_handler, "settings") as s:
        s.probe_timeout_ms = 2500
        s.probe_max_connections = 7
        client = await status_handler.create_async_client()

    try:
        assert client.timeout.read == 2.5
        assert client.timeout.connect == 2.5
        assert client.follow_redirects is True
    finally:
        await client.aclose()
