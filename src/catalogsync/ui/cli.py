from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from signal import SIGINT, signal
from threading import Event
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from catalogsync.app import init_database, reconcile_catalog
from catalogsync.config import (
    ConfigurationError,
    UploadConfig,
    configure_logging,
    get_catalog_import_config,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from catalogsync.config import CatalogImportConfig
    from catalogsync.domain.reconciliation import ReconciliationReport

log = logging.getLogger(__name__)

_STOP_EVENT = Event()


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile a product catalog with an import tree")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    import_cmd = subparsers.add_parser("import", help="Import a catalog tree into the store")
    import_cmd.add_argument(
        "source_dir",
        nargs="?",
        type=Path,
        help="Root of the import tree (defaults to CATALOG_IMPORT_PATH)",
    )
    import_cmd.add_argument(
        "--upload-dir",
        type=Path,
        help="Store assets in this directory instead of the configured target",
    )

    init_db = subparsers.add_parser("init-db", help="Create or migrate the catalog schema")
    init_db.add_argument(
        "--database-uri",
        type=str,
        help="Database to initialise (defaults to DATABASE_URI or the data directory)",
    )

    return parser.parse_args(list(argv))


def _import_config(args: argparse.Namespace) -> CatalogImportConfig:
    config = get_catalog_import_config(source_dir=args.source_dir)
    if args.upload_dir is not None:
        config = replace(config, upload=UploadConfig(directory=args.upload_dir))
    source_dir = config.require_source_dir()
    if not source_dir.is_dir():
        raise ValueError(f"Import root {source_dir} is not a directory")
    return config


def _log_report(report: ReconciliationReport) -> None:
    for failure in report.failed_products:
        log.error(
            "Product %s/%s failed during %s: %s",
            failure.company,
            failure.entity,
            failure.phase,
            failure.reason,
        )
    for failure in report.failed_skus:
        log.error(
            "SKU %s/%s failed during %s: %s",
            failure.company,
            failure.entity,
            failure.phase,
            failure.reason,
        )
    for kind, counts in sorted(report.counts.items()):
        log.info(
            "%s: created=%d, updated=%d, unchanged=%d",
            kind,
            counts.created,
            counts.updated,
            counts.unchanged,
        )


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args: argparse.Namespace
    try:
        parsed_args = _parse_args(args_list)
        configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
        config = _import_config(parsed_args) if parsed_args.command == "import" else None
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "import":
            report = reconcile_catalog(config=config, stop_event=_STOP_EVENT)
            _log_report(report)
        elif parsed_args.command == "init-db":
            init_database(database_uri=parsed_args.database_uri)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during import")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """First Ctrl+C stops after the current product, the second one exits."""
    if _STOP_EVENT.is_set():
        log.info("Closed by user (Ctrl+C)")
        sys.exit(0)
    log.info("Stopping after the current product (Ctrl+C again to abort)")
    _STOP_EVENT.set()


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
