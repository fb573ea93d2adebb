"""Asset uploader that copies files into a local directory."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from logging import getLogger
from pathlib import Path, PurePath
from typing import Final

from catalogsync.domain.ports.assets import AssetUploadError

log = getLogger(__name__)

DEFAULT_URL_PREFIX: Final[str] = "/uploads"


@dataclass(slots=True)
class LocalDirectoryUploader:
    """Store each file under a fresh unique name and return ``<url_prefix>/<name>``."""

    directory: Path
    url_prefix: str = DEFAULT_URL_PREFIX

    def __call__(self, *, filename: str, content: bytes) -> str:
        suffix = PurePath(filename).suffix.lower()
        stored_name = f"{uuid.uuid4().hex}{suffix}"
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            (self.directory / stored_name).write_bytes(content)
        except OSError as exc:
            raise AssetUploadError(f"Cannot store {filename} in {self.directory}: {exc}") from exc
        log.debug("Stored %s as %s", filename, stored_name)
        return f"{self.url_prefix.rstrip('/')}/{stored_name}"
