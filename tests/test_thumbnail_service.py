"""Tests for the Cloudinary thumbnail upload."""

import hashlib
import pytest
import httpx

from common.utils.exceptions import ServerException
from coursehub.services.media.thumbnail_service import ThumbnailService


_RealAsyncClient = httpx.AsyncClient


def _patch_transport(monkeypatch, handler):
    """Route every AsyncClient created during the test through a MockTransport."""
    transport = httpx.MockTransport(handler)

    def factory(*args, **kwargs):
        kwargs["transport"] = transport
        return _RealAsyncClient(*args, **kwargs)

    monkeypatch.setattr(httpx, "AsyncClient", factory)


@pytest.fixture
def service():
    return ThumbnailService(cloud_name="demo", api_key="key123", api_secret="shh")


class TestSign:
    def test_sha1_over_timestamp_and_secret(self, service):
        expected = hashlib.sha1(b"timestamp=1700000000shh").hexdigest()
        assert service.sign(1700000000) == expected


class TestUpload:
    @pytest.mark.asyncio
    async def test_not_configured(self):
        service = ThumbnailService(cloud_name=None, api_key=None, api_secret=None)

        with pytest.raises(ServerException) as exc:
            await service.upload("t.png", b"png", "image/png")

        assert exc.value.code == "MEDIA_HOST_MISSING"

    @pytest.mark.asyncio
    async def test_returns_secure_url(self, service, monkeypatch):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["body"] = request.content
            return httpx.Response(200, json={"secure_url": "https://res.cloudinary.com/demo/t.png"})

        _patch_transport(monkeypatch, handler)

        url = await service.upload("t.png", b"png-bytes", "image/png")

        assert url == "https://res.cloudinary.com/demo/t.png"
        assert seen["url"] == "https://api.cloudinary.com/v1_1/demo/image/upload"
        assert b"key123" in seen["body"]
        assert b"png-bytes" in seen["body"]

    @pytest.mark.asyncio
    async def test_error_status(self, service, monkeypatch):
        _patch_transport(monkeypatch, lambda request: httpx.Response(401, json={"error": "bad"}))

        with pytest.raises(ServerException) as exc:
            await service.upload("t.png", b"png", "image/png")

        assert exc.value.code == "UPLOAD_FAILED"

    @pytest.mark.asyncio
    async def test_connection_error(self, service, monkeypatch):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        _patch_transport(monkeypatch, handler)

        with pytest.raises(ServerException) as exc:
            await service.upload("t.png", b"png", "image/png")

        assert exc.value.code == "UPLOAD_FAILED"

    @pytest.mark.asyncio
    async def test_missing_secure_url(self, service, monkeypatch):
        _patch_transport(monkeypatch, lambda request: httpx.Response(200, json={}))

        with pytest.raises(ServerException):
            await service.upload("t.png", b"png", "image/png")
