"""Ports for storing asset files outside the catalog store."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


class AssetUploadError(RuntimeError):
    """Raised by uploaders when a file could not be stored."""


@runtime_checkable
class AssetUploader(Protocol):
    """Callable port that stores one file and returns a reference to it.

    The reference is what ends up in ``Multimedia.url``; usually a relative
    path such as ``/uploads/<name>``. Implementations raise
    :class:`AssetUploadError` on failure.
    """

    def __call__(self, *, filename: str, content: bytes) -> str: ...


__all__ = ["AssetUploadError", "AssetUploader"]
