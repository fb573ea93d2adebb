from __future__ import annotations

import httpx
import pytest

from catalogsync.adapters.upload import UPLOAD_FIELD, HttpAssetUploader
from catalogsync.config import ResilienceConfig, RetryPolicy
from catalogsync.domain.ports.assets import AssetUploadError


def _config(total_retries: int = 0) -> ResilienceConfig:
    return ResilienceConfig(
        name="upload-test",
        base_url="https://shop.test",
        retry=RetryPolicy(total=total_retries, backoff_factor=0.0, backoff_jitter=0.0),
    )


def test_upload_posts_multipart_and_returns_url() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json={"url": "/uploads/abc.jpg"})

    with HttpAssetUploader(_config(), transport=httpx.MockTransport(handler)) as uploader:
        url = uploader(filename="main.jpg", content=b"jpeg-bytes")

    assert url == "/uploads/abc.jpg"
    [request] = seen
    assert request.method == "POST"
    assert request.url.path == "/api/upload"
    body = request.read()
    assert f'name="{UPLOAD_FIELD}"'.encode() in body
    assert b'filename="main.jpg"' in body
    assert b"jpeg-bytes" in body


def test_server_error_is_retried() -> None:
    attempts: list[int] = []

    def handler(_request: httpx.Request) -> httpx.Response:
        attempts.append(1)
        if len(attempts) == 1:
            return httpx.Response(503)
        return httpx.Response(200, json={"url": "/uploads/ok.png"})

    with HttpAssetUploader(_config(total_retries=2), transport=httpx.MockTransport(handler)) as up:
        assert up(filename="a.png", content=b"x") == "/uploads/ok.png"

    assert len(attempts) == 2


def test_client_error_raises_upload_error() -> None:
    transport = httpx.MockTransport(lambda _request: httpx.Response(413))

    with HttpAssetUploader(_config(), transport=transport) as uploader:
        with pytest.raises(AssetUploadError, match="413"):
            uploader(filename="huge.jpg", content=b"x")


def test_malformed_response_raises_upload_error() -> None:
    transport = httpx.MockTransport(lambda _request: httpx.Response(200, json={"path": "x"}))

    with HttpAssetUploader(_config(), transport=transport) as uploader:
        with pytest.raises(AssetUploadError, match="Unexpected upload response"):
            uploader(filename="a.jpg", content=b"x")


def test_transport_error_raises_upload_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with HttpAssetUploader(_config(), transport=httpx.MockTransport(handler)) as uploader:
        with pytest.raises(AssetUploadError, match="refused"):
            uploader(filename="a.jpg", content=b"x")


def test_base_url_is_required() -> None:
    with pytest.raises(ValueError, match="base URL"):
        HttpAssetUploader(ResilienceConfig(name="upload-test"))
