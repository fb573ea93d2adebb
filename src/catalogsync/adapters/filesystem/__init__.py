"""Filesystem adapters: the import-tree walker and a local asset store."""

from __future__ import annotations

from .uploader import LocalDirectoryUploader
from .walker import CatalogSourceError, FilesystemCatalogWalker

__all__ = ["CatalogSourceError", "FilesystemCatalogWalker", "LocalDirectoryUploader"]
