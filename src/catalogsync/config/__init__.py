"""Application configuration helpers."""

from __future__ import annotations

from .catalog import (
    CatalogImportConfig,
    UploadConfig,
    get_catalog_import_config,
    get_upload_config,
)
from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "CatalogImportConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "UploadConfig",
    "configure_logging",
    "get_catalog_import_config",
    "get_database_config",
    "get_storage_config",
    "get_upload_config",
    "optional_env_var",
    "require_env_vars",
]
