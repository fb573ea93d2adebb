"""SQLAlchemy adapter package for catalogsync."""

from __future__ import annotations

from .engine import create_catalog_engine, enable_sqlite_savepoints
from .mappings import TABLE_BY_CLASS, create_all_tables, mapper_registry, start_mappers
from .repositories import SqlAlchemyCatalogRepository
from .unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    StartupError,
    shutdown,
    startup,
)

__all__ = [
    "TABLE_BY_CLASS",
    "SqlAlchemyCatalogRepository",
    "SqlAlchemyCatalogUnitOfWork",
    "StartupError",
    "create_all_tables",
    "create_catalog_engine",
    "enable_sqlite_savepoints",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
