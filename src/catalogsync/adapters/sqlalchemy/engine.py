"""Engine construction for the SQLAlchemy adapter."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import create_engine, event

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine

log = logging.getLogger(__name__)


def enable_sqlite_savepoints(engine: Engine) -> None:
    """Let pysqlite honour SAVEPOINT by taking over transaction control.

    The driver otherwise defers ``BEGIN`` on its own and releases savepoints
    behind SQLAlchemy's back; per-SKU and per-asset rollbacks depend on them.
    """

    @event.listens_for(engine, "connect")
    def _disable_driver_transactions(  # pyright: ignore[reportUnusedFunction]
        dbapi_connection: Any,
        connection_record: Any,
    ) -> None:
        _ = connection_record
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn: Connection) -> None:  # pyright: ignore[reportUnusedFunction]
        conn.exec_driver_sql("BEGIN")


def create_catalog_engine(database_uri: str) -> Engine:
    engine = create_engine(database_uri, future=True)
    if engine.dialect.name == "sqlite":
        enable_sqlite_savepoints(engine)
    log.debug("Created %s engine", engine.dialect.name)
    return engine
