"""Registration of asset files as Multimedia records."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Final

from catalogsync.domain.model import FileType, Multimedia
from catalogsync.domain.ports.assets import AssetUploadError
from catalogsync.domain.reconciliation.errors import AssetRegistrationError

if TYPE_CHECKING:
    from pathlib import Path
    from uuid import UUID

    from catalogsync.domain.ports.assets import AssetUploader
    from catalogsync.domain.reconciliation.upsert import EntityReconciler

log = getLogger(__name__)

_EXTENSION_ALIASES: Final[dict[str, FileType]] = {"JPEG": FileType.JPG}


def file_type_for(path: Path) -> FileType:
    extension = path.suffix.lstrip(".").upper()
    if extension in _EXTENSION_ALIASES:
        return _EXTENSION_ALIASES[extension]
    try:
        return FileType(extension)
    except ValueError:
        log.warning("Unsupported file type %r for %s, defaulting to JPG", extension, path.name)
        return FileType.JPG


@dataclass(slots=True)
class MultimediaRegistrar:
    """Register files for an owner, uploading each distinct content only once."""

    uploader: AssetUploader

    def register(self, path: Path, owner_id: UUID, *, reconciler: EntityReconciler) -> UUID:
        """Return the Multimedia id for ``path``, uploading it if its bytes are new.

        Raises :class:`AssetRegistrationError` when the file cannot be read or
        uploaded; in that case nothing is written to the store.
        """

        try:
            content = path.read_bytes()
        except OSError as exc:
            raise AssetRegistrationError(f"Cannot read asset {path}: {exc}", path=path) from exc

        key = {"owner_id": owner_id, "checksum": hashlib.sha256(content).hexdigest()}
        existing = reconciler.repository.find(Multimedia, key)
        if existing is not None:
            log.debug("Asset %s already registered as %s", path.name, existing.id)
            return existing.id

        log.info("Uploading %s", path.name)
        try:
            url = self.uploader(filename=path.name, content=content)
        except AssetUploadError as exc:
            raise AssetRegistrationError(f"Upload of {path} failed: {exc}", path=path) from exc

        result = reconciler.upsert(
            Multimedia,
            key,
            {"url": url, "alt_text": path.name, "file_type": file_type_for(path)},
        )
        log.info("Registered %s as multimedia %s (%s)", path.name, result.entity.id, url)
        return result.entity.id
