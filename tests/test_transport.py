from __future__ import annotations

import base64
import logging

import httpx
import pytest

from statboard.config import Settings
from statboard.transport import StatisticsClient


@pytest.mark.asyncio
async def test_get_json_decodes_body(figures, make_client, json_handler):
    async with make_client(json_handler(figures)) as client:
        body = await client.get_json("/_admin/statistics-description")

    assert body == figures


@pytest.mark.asyncio
async def test_get_json_raises_on_error_status(make_client, json_handler):
    async with make_client(json_handler([])) as client:
        with pytest.raises(httpx.HTTPStatusError):
            await client.get_json("/_admin/unknown")


@pytest.mark.asyncio
async def test_get_json_raises_on_non_json_body(make_client):
    def handler(request):
        return httpx.Response(200, content=b"<html>")

    async with make_client(handler) as client:
        with pytest.raises(ValueError):
            await client.get_json("/_admin/statistics-description")


@pytest.mark.asyncio
async def test_timeouts_propagate(make_client):
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    async with make_client(handler) as client:
        with pytest.raises(httpx.TimeoutException):
            await client.get_json("/_admin/statistics-description")


@pytest.mark.asyncio
async def test_uses_configured_server_and_credentials():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json=[])

    config = Settings(server_url="http://db.test:8529/", username="root", password="pw")
    async with StatisticsClient(
        config=config, transport=httpx.MockTransport(handler)
    ) as client:
        await client.get_json("/_admin/statistics-description")

    assert seen["url"] == "http://db.test:8529/_admin/statistics-description"
    assert seen["auth"] == "Basic " + base64.b64encode(b"root:pw").decode()


@pytest.mark.asyncio
async def test_failed_requests_are_logged_as_errors(make_client, json_handler, caplog):
    async with make_client(json_handler([], status_code=500)) as client:
        with pytest.raises(httpx.HTTPStatusError):
            await client.get_json("/_admin/statistics-description")

    errors = [
        r for r in caplog.records if r.name == "statboard.transport" and r.levelno == logging.ERROR
    ]
    assert len(errors) == 1
    assert "failed" in errors[0].getMessage()
