"""Client side of the HTTP asset upload endpoint."""

from __future__ import annotations

from .client import UPLOAD_FIELD, UPLOAD_PATH, HttpAssetUploader
from .schema import UploadResponse

__all__ = ["UPLOAD_FIELD", "UPLOAD_PATH", "HttpAssetUploader", "UploadResponse"]
