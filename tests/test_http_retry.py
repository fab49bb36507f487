"""Tests for HTTP retry wrapper"""
import httpx
import pytest
from unittest.mock import AsyncMock, patch

from core.http_retry import (
    RETRYABLE_STATUS_CODES,
    get_json_with_retry,
    request_json_with_retry,
)


def _client(responses):
    """AsyncClient whose transport replays `responses` (Response or Exception) in order."""
    calls = []
    queue = list(responses)

    def handler(request):
        calls.append(request)
        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    return httpx.AsyncClient(transport=httpx.MockTransport(handler)), calls


@pytest.fixture(autouse=True)
def no_sleep():
    with patch("core.http_retry.asyncio.sleep", new=AsyncMock()) as sleep:
        yield sleep


@pytest.mark.asyncio
async def test_successful_request_first_try():
    client, calls = _client([httpx.Response(200, json={"data": "success"})])
    async with client:
        ok, status, data, error = await get_json_with_retry(client, "https://example.com/api")

    assert ok is True
    assert status == 200
    assert data == {"data": "success"}
    assert error is None
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_retry_on_502_then_success(no_sleep):
    client, calls = _client([
        httpx.Response(502),
        httpx.Response(502),
        httpx.Response(200, json={"data": "success"}),
    ])
    async with client:
        ok, status, data, error = await get_json_with_retry(client, "https://example.com/api")

    assert ok is True
    assert data == {"data": "success"}
    assert len(calls) == 3
    assert no_sleep.await_count == 2


@pytest.mark.asyncio
async def test_no_retry_on_400():
    client, calls = _client([httpx.Response(400, text="Bad Request")])
    async with client:
        ok, status, data, error = await get_json_with_retry(client, "https://example.com/api")

    assert ok is False
    assert status == 400
    assert data is None
    assert error == "HTTP 400: Bad Request"
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_retry_on_timeout():
    client, calls = _client([httpx.ReadTimeout("Timeout")] * 3)
    async with client:
        ok, status, data, error = await get_json_with_retry(client, "https://example.com/api", max_attempts=3)

    assert ok is False
    assert status is None
    assert "ReadTimeout" in error
    assert error.startswith("All 3 attempts failed")
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_connect_error_then_success():
    client, calls = _client([httpx.ConnectError("refused"), httpx.Response(200, json=[1, 2])])
    async with client:
        ok, status, data, error = await get_json_with_retry(client, "https://example.com/api")

    assert ok is True
    assert data == [1, 2]


@pytest.mark.asyncio
async def test_invalid_json():
    client, _ = _client([httpx.Response(200, text="<html>")])
    async with client:
        ok, status, data, error = await get_json_with_retry(client, "https://example.com/api")

    assert ok is False
    assert status == 200
    assert error.startswith("Invalid JSON")


@pytest.mark.asyncio
async def test_max_elapsed_time():
    client, calls = _client([httpx.Response(503)] * 3)
    async with client:
        ok, status, data, error = await get_json_with_retry(
            client, "https://example.com/api", max_elapsed=0.0,
        )

    assert ok is False
    assert "Max elapsed time" in error
    assert len(calls) == 0


@pytest.mark.asyncio
async def test_params_and_headers_are_sent():
    client, calls = _client([httpx.Response(200, json={"ok": True})])
    async with client:
        ok, status, data, _ = await get_json_with_retry(
            client, "https://example.com/api", params={"sport": "nba"}, headers={"Accept": "application/json"},
        )

    assert ok is True
    assert data == {"ok": True}
    assert calls[0].method == "GET"
    assert calls[0].url.params["sport"] == "nba"
    assert calls[0].headers["Accept"] == "application/json"


@pytest.mark.asyncio
async def test_custom_retry_statuses():
    client, calls = _client([httpx.Response(500), httpx.Response(200, json={})])
    async with client:
        ok, *_ = await request_json_with_retry(
            client, "GET", "https://example.com/api", allowed_retry_statuses={500},
        )

    assert ok is True
    assert len(calls) == 2


def test_retryable_status_codes():
    assert RETRYABLE_STATUS_CODES == {429, 502, 503, 504}
