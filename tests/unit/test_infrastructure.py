"""Unit tests for the infrastructure layer: HTTP client and captcha images."""

import base64
import io
from unittest.mock import MagicMock

import httpx
import pytest
from PIL import Image

from infrastructure.captcha.image import (
    DATA_URI_PREFIX,
    render_digits_data_uri,
    render_digits_png,
    to_data_uri,
)
from infrastructure.http_client import HttpClient


# ── HttpClient ────────────────────────────────────────────────────────────────


class TestHttpClient:
    async def test_get_delegates_to_httpx(self, mocker):
        client = HttpClient()
        fake_resp = MagicMock(status_code=200)
        mocker.patch.object(client._client, "get", return_value=fake_resp)
        resp = await client.get("http://example.com")
        assert resp.status_code == 200
        await client.aclose()

    async def test_get_propagates_exception(self, mocker):
        client = HttpClient()
        mocker.patch.object(client._client, "get", side_effect=httpx.ConnectError("refused"))
        with pytest.raises(httpx.ConnectError, match="refused"):
            await client.get("http://example.com")
        await client.aclose()

    async def test_timeout_is_applied(self):
        async with HttpClient(timeout=2.5) as client:
            assert client.timeout == 2.5
            assert client._client.timeout.read == 2.5

    async def test_custom_transport(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="pong"))
        async with HttpClient(transport=transport) as client:
            resp = await client.get("http://example.com/ping", params={"a": "1"})
        assert resp.text == "pong"
        assert resp.request.url.params["a"] == "1"


# ── Captcha images ────────────────────────────────────────────────────────────


class TestCaptchaImage:
    def test_png_has_requested_size(self):
        png = render_digits_png([1, 2, 3, 4], width=110, height=34)
        with Image.open(io.BytesIO(png)) as img:
            assert img.format == "PNG"
            assert img.size == (110, 34)

    def test_custom_size(self):
        png = render_digits_png([9] * 6, width=160, height=50)
        with Image.open(io.BytesIO(png)) as img:
            assert img.size == (160, 50)

    def test_data_uri_round_trips(self):
        uri = to_data_uri(b"\x89PNGfake")
        assert uri.startswith(DATA_URI_PREFIX)
        assert base64.b64decode(uri[len(DATA_URI_PREFIX):]) == b"\x89PNGfake"

    def test_render_digits_data_uri_is_decodable_png(self):
        uri = render_digits_data_uri([0, 0, 7])
        png = base64.b64decode(uri[len(DATA_URI_PREFIX):])
        with Image.open(io.BytesIO(png)) as img:
            assert img.format == "PNG"
