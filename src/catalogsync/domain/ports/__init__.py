"""Domain port definitions for adapters."""

from __future__ import annotations

from .assets import AssetUploader, AssetUploadError
from .catalog_source import CatalogSource
from .persistence import CatalogRepository
from .unit_of_work import (
    CatalogRepositories,
    CatalogUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "AssetUploadError",
    "AssetUploader",
    "CatalogRepositories",
    "CatalogRepository",
    "CatalogSource",
    "CatalogUnitOfWork",
    "RepositoryCollection",
    "UnitOfWork",
]
