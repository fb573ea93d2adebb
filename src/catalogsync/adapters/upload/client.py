"""HTTP client for the asset upload endpoint."""

from __future__ import annotations

import mimetypes
from logging import getLogger
from typing import TYPE_CHECKING, Final

import httpx
from pydantic import ValidationError

from catalogsync.adapters.http_resilience import ResilientClient
from catalogsync.domain.ports.assets import AssetUploadError

from .schema import UploadResponse

if TYPE_CHECKING:
    from catalogsync.config.http_resilience import ResilienceConfig

log = getLogger(__name__)

UPLOAD_PATH: Final[str] = "/api/upload"
UPLOAD_FIELD: Final[str] = "productImage"


class HttpAssetUploader:
    """Send each file as multipart form data and return the reference the server assigns.

    One client (and connection pool) is shared by every upload; call
    :meth:`close` or use the instance as a context manager when done.
    """

    def __init__(
        self,
        config: ResilienceConfig,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if config.base_url is None:
            raise ValueError("HttpAssetUploader needs a base URL")
        self._client = ResilientClient(config, transport=transport)

    def __enter__(self) -> HttpAssetUploader:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def __call__(self, *, filename: str, content: bytes) -> str:
        mime_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"
        try:
            response = self._client.post(
                UPLOAD_PATH,
                files={UPLOAD_FIELD: (filename, content, mime_type)},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise AssetUploadError(
                f"Upload endpoint answered {exc.response.status_code} for {filename}"
            ) from exc
        except httpx.HTTPError as exc:
            raise AssetUploadError(f"Upload of {filename} failed: {exc}") from exc

        try:
            payload = UploadResponse.model_validate_json(response.content)
        except ValidationError as exc:
            raise AssetUploadError(f"Unexpected upload response for {filename}: {exc}") from exc
        log.debug("Uploaded %s to %s", filename, payload.url)
        return payload.url
