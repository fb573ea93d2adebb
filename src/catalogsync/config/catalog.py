"""Catalog import configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .env import optional_env_var
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import ResilienceConfig
from .storage import StorageConfig, get_storage_config

UPLOAD_TIMEOUT_SECONDS = 60.0
DEFAULT_OWNER_EMAIL = "test-importer@example.com"
DEFAULT_OWNER_COMPANY = "Test Importer"


@dataclass(frozen=True, slots=True)
class UploadConfig:
    """Where asset files go: an HTTP upload endpoint or a local directory."""

    base_url: str | None = None
    directory: Path | None = None
    resilience: ResilienceConfig | None = None

    @property
    def uses_http(self) -> bool:
        return self.base_url is not None


@dataclass(frozen=True, slots=True)
class CatalogImportConfig:
    source_dir: Path | None
    upload: UploadConfig
    default_owner_email: str = DEFAULT_OWNER_EMAIL
    default_owner_company: str = DEFAULT_OWNER_COMPANY

    def require_source_dir(self) -> Path:
        if self.source_dir is None:
            raise MissingConfigurationError("Missing configuration for: CATALOG_IMPORT_PATH")
        return self.source_dir


def get_upload_config(*, storage: StorageConfig | None = None) -> UploadConfig:
    base_url = optional_env_var("CATALOG_UPLOAD_URL")
    if base_url is not None:
        if not base_url.startswith(("http://", "https://")):
            raise ConfigurationError(f"CATALOG_UPLOAD_URL must be an http(s) URL, got {base_url!r}")
        return UploadConfig(
            base_url=base_url,
            resilience=ResilienceConfig(
                name="upload",
                base_url=base_url,
                timeout_seconds=UPLOAD_TIMEOUT_SECONDS,
            ),
        )

    env_dir = optional_env_var("CATALOG_UPLOAD_DIR")
    if env_dir is not None:
        directory = Path(env_dir)
    else:
        directory = (storage or get_storage_config()).uploads_path(ensure=False)
    return UploadConfig(directory=directory)


def get_catalog_import_config(
    *,
    source_dir: Path | None = None,
    storage: StorageConfig | None = None,
) -> CatalogImportConfig:
    """Build the import configuration; an explicit ``source_dir`` wins over the environment."""

    if source_dir is None:
        env_path = optional_env_var("CATALOG_IMPORT_PATH")
        source_dir = Path(env_path) if env_path is not None else None
    return CatalogImportConfig(
        source_dir=source_dir,
        upload=get_upload_config(storage=storage),
        default_owner_email=optional_env_var("CATALOG_DEFAULT_OWNER_EMAIL") or DEFAULT_OWNER_EMAIL,
        default_owner_company=optional_env_var("CATALOG_DEFAULT_OWNER_COMPANY")
        or DEFAULT_OWNER_COMPANY,
    )
