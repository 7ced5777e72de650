"""Fetching the readings endpoint."""

import asyncio

import httpx
import pytest

import meterdash as md
from conftest import mock_client, json_handler

URL = "http://meter.test/readings"


def _fetch(handler):
    async def go():
        async with mock_client(handler) as client:
            return await md.fetch.fetch_records(client, URL)

    return asyncio.run(go())


def test_fetch_returns_array(scenario_records):
    assert _fetch(json_handler(scenario_records)) == scenario_records


def test_fetch_rejects_non_array():
    with pytest.raises(md.exceptions.PayloadError):
        _fetch(json_handler({"data": []}))


def test_fetch_http_error_status():
    with pytest.raises(md.exceptions.FetchError):
        _fetch(json_handler([], status=500))


def test_fetch_invalid_json():
    with pytest.raises(md.exceptions.FetchError):
        _fetch(lambda request: httpx.Response(200, text="<html>oops</html>"))


def test_fetch_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(md.exceptions.FetchError):
        _fetch(handler)
