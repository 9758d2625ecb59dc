"""Tests for the async HTTP helpers (httpx MockTransport)."""

from unittest.mock import patch

import httpx
import pytest

from url_ingest.errors import UpstreamFetchFailed
from url_ingest.fetch import download_to_file, fetch_json, fetch_text

_RealAsyncClient = httpx.AsyncClient


def _client_with(handler):
    transport = httpx.MockTransport(handler)

    def factory(**kwargs):
        return _RealAsyncClient(transport=transport, **kwargs)

    return patch("url_ingest.fetch.httpx.AsyncClient", side_effect=factory)


async def test_fetch_text_sends_user_agent():
    seen = {}

    def handler(request):
        seen["ua"] = request.headers["User-Agent"]
        return httpx.Response(200, text="<html>ok</html>")

    with _client_with(handler):
        body = await fetch_text("https://example.com", timeout=5, user_agent="TestAgent/1.0")

    assert body == "<html>ok</html>"
    assert seen["ua"] == "TestAgent/1.0"


async def test_fetch_text_status_error():
    with _client_with(lambda request: httpx.Response(503)):
        with pytest.raises(UpstreamFetchFailed):
            await fetch_text("https://example.com", timeout=5)


async def test_fetch_json_with_params():
    def handler(request):
        assert request.url.params["id"] == "42"
        return httpx.Response(200, json={"text": "hi"})

    with _client_with(handler):
        data = await fetch_json("https://api.example.com", timeout=5, params={"id": "42"})

    assert data == {"text": "hi"}


async def test_fetch_json_bad_body():
    with _client_with(lambda request: httpx.Response(200, text="not json")):
        with pytest.raises(UpstreamFetchFailed):
            await fetch_json("https://api.example.com", timeout=5)


async def test_download_to_file(tmp_path):
    dest = tmp_path / "episode.mp3"
    with _client_with(lambda request: httpx.Response(200, content=b"audio-bytes")):
        result = await download_to_file("https://cdn.example.com/e.mp3", dest, timeout=5)

    assert result == dest
    assert dest.read_bytes() == b"audio-bytes"


async def test_download_failure_removes_partial(tmp_path):
    dest = tmp_path / "episode.mp3"
    with _client_with(lambda request: httpx.Response(404)):
        with pytest.raises(UpstreamFetchFailed):
            await download_to_file("https://cdn.example.com/e.mp3", dest, timeout=5)

    assert not dest.exists()
