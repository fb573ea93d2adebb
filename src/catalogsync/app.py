"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from catalogsync.adapters.filesystem import FilesystemCatalogWalker, LocalDirectoryUploader
from catalogsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from catalogsync.adapters.upload import HttpAssetUploader
from catalogsync.config import get_catalog_import_config, get_database_config
from catalogsync.domain.ports.unit_of_work import CatalogUnitOfWork
from catalogsync.domain.reconciliation import (
    MultimediaRegistrar,
    ReconciliationEngine,
    default_owner_metadata,
)

if TYPE_CHECKING:
    from pathlib import Path
    from threading import Event

    from catalogsync.config import CatalogImportConfig, UploadConfig
    from catalogsync.domain.ports import AssetUploader, CatalogSource
    from catalogsync.domain.reconciliation import ReconciliationReport

UnitOfWorkFactory = Callable[[], CatalogUnitOfWork]

log = getLogger(__name__)


def build_uploader(config: UploadConfig) -> AssetUploader:
    """Pick the HTTP uploader when an endpoint is configured, else the local directory."""

    if config.uses_http and config.resilience is not None:
        log.info("Uploading assets to %s", config.base_url)
        return HttpAssetUploader(config.resilience)
    if config.directory is None:
        raise ValueError("Upload configuration names neither an endpoint nor a directory")
    log.info("Storing assets in %s", config.directory)
    return LocalDirectoryUploader(config.directory)


def reconcile_catalog(
    *,
    source_dir: Path | None = None,
    source: CatalogSource | None = None,
    uploader: AssetUploader | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: CatalogImportConfig | None = None,
    stop_event: Event | None = None,
) -> ReconciliationReport:
    """Reconcile the store with an import tree using the configured adapters."""

    effective_config = config or get_catalog_import_config(source_dir=source_dir)
    if unit_of_work_factory is None and not is_started():
        startup()
    effective_uow = unit_of_work_factory or SqlAlchemyCatalogUnitOfWork
    effective_source = source or FilesystemCatalogWalker(effective_config.require_source_dir())
    effective_uploader = uploader or build_uploader(effective_config.upload)

    engine = ReconciliationEngine(
        unit_of_work_factory=effective_uow,
        registrar=MultimediaRegistrar(effective_uploader),
        default_owner=default_owner_metadata(
            email=effective_config.default_owner_email,
            company_name=effective_config.default_owner_company,
        ),
        stop_event=stop_event,
    )
    log.info("Starting catalog reconciliation from %s", effective_config.source_dir)
    try:
        return engine.reconcile(effective_source())
    finally:
        if uploader is None and isinstance(effective_uploader, HttpAssetUploader):
            effective_uploader.close()


def init_database(*, database_uri: str | None = None) -> str:
    """Create or migrate the catalog schema and return the database URI used."""

    uri = database_uri or get_database_config().uri
    startup(database_uri=uri, force=True)
    engine = configured_engine()
    log.info("Database schema is up to date at %s", engine.url if engine else uri)
    shutdown()
    return uri
