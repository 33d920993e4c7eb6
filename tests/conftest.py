import asyncio

import pytest
from unittest.mock import AsyncMock
from httpx import AsyncClient, Response as HTTPXResponse, Request as HTTPXRequest

from app.schemas.instance import Instance


@pytest.fixture
def instances():
    return (
        Instance(id="usa", name="United States", url="http://usa.test/health"),
        Instance(id="fra", name="France", url="http://fra.test/health"),
        Instance(id="gbr", name="United Kingdom", url="http://gbr.test/health"),
        Instance(id="deu", name="Germany", url="http://deu.test/health"),
    )


def http_response(status_code, url="http://test/health"):
    return HTTPXResponse(
        status_code=status_code,
        json={"status": "ok" if status_code < 300 else "error"},
        request=HTTPXRequest("GET", url),
    )


@pytest.fixture
def probe_client():
    """Build a mocked AsyncClient whose GET outcome is chosen per URL.

    Each outcome is an int (status code), an exception instance (raised), or
    a (delay_seconds, status_code) tuple.
    """
    def _build(outcomes):
        async def fake_get(url, **kwargs):
            outcome = outcomes[url]
            if isinstance(outcome, BaseException):
                raise outcome
            if isinstance(outcome, tuple):
                delay, outcome = outcome
                await asyncio.sleep(delay)
            return http_response(outcome, url)

        client = AsyncMock(spec=AsyncClient)
        client.get = AsyncMock(side_effect=fake_get)
        return client

    return _build
