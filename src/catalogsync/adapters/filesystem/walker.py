"""Walk an on-disk import tree and yield one descriptor per company.

Expected layout::

    <root>/<company>/producer.meta.json
    <root>/<company>/WLASCIWOSCI/<property>/<variant>.<ext>
    <root>/<company>/PRODUKTY/<product>/product_metadata.json
    <root>/<company>/PRODUKTY/<product>/main.jpg
    <root>/<company>/PRODUKTY/<product>/WARIANTY/<sku code>.<ext>

Every file is optional. Missing or invalid metadata is logged and replaced by
defaults; the walker never writes anything.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Final

from pydantic import ValidationError

from catalogsync.domain.descriptor import (
    CompanyDescriptor,
    GlobalPropertyDescriptor,
    OwnerMetadata,
    ProductDescriptor,
    ProductMetadata,
    SkuDescriptor,
    VariantAsset,
)

from .schema import ProducerMetadataFile, ProductMetadataFile
from .translator import translate_producer, translate_product_metadata

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

log = getLogger(__name__)

PRODUCER_METADATA_FILENAME: Final[str] = "producer.meta.json"
PRODUCT_METADATA_FILENAME: Final[str] = "product_metadata.json"
PROPERTIES_DIRNAME: Final[str] = "WLASCIWOSCI"
PRODUCTS_DIRNAME: Final[str] = "PRODUKTY"
SKUS_DIRNAME: Final[str] = "WARIANTY"
MAIN_IMAGE_STEM: Final[str] = "main"
MAIN_IMAGE_FILENAME: Final[str] = "main.jpg"


class CatalogSourceError(RuntimeError):
    """Raised when the import root itself is unusable."""


def _subdirectories(path: Path) -> list[Path]:
    if not path.is_dir():
        return []
    return sorted(
        (child for child in path.iterdir() if child.is_dir() and not child.name.startswith(".")),
        key=lambda child: child.name,
    )


def _files(path: Path) -> list[Path]:
    if not path.is_dir():
        return []
    return sorted(
        (child for child in path.iterdir() if child.is_file() and not child.name.startswith(".")),
        key=lambda child: child.name,
    )


def _load_json(path: Path) -> object | None:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        log.warning("Cannot read %s: %s", path, exc)
        return None


@dataclass(slots=True)
class FilesystemCatalogWalker:
    """:class:`~catalogsync.domain.ports.CatalogSource` over a directory tree."""

    root: Path

    def __call__(self) -> Iterator[CompanyDescriptor]:
        root = self.root.expanduser()
        if not root.is_dir():
            raise CatalogSourceError(f"Import root {root} is not a directory")
        log.info("Walking import tree %s", root)
        for company_dir in _subdirectories(root):
            yield self.read_company(company_dir)

    def read_company(self, company_dir: Path) -> CompanyDescriptor:
        products_dir = company_dir / PRODUCTS_DIRNAME
        if not products_dir.is_dir():
            log.warning(
                "No %r directory found for company %s, skipping products",
                PRODUCTS_DIRNAME,
                company_dir.name,
            )
        return CompanyDescriptor(
            name=company_dir.name,
            owner=self.read_owner(company_dir),
            global_properties=tuple(self.read_global_properties(company_dir)),
            products=tuple(self.read_product(path) for path in _subdirectories(products_dir)),
        )

    def read_owner(self, company_dir: Path) -> OwnerMetadata | None:
        path = company_dir / PRODUCER_METADATA_FILENAME
        payload = _load_json(path)
        if payload is None:
            log.info("No usable %s for %s", PRODUCER_METADATA_FILENAME, company_dir.name)
            return None
        try:
            parsed = ProducerMetadataFile.model_validate(payload)
        except ValidationError as exc:
            log.warning("Invalid %s, ignoring it: %s", path, exc)
            return None
        log.info("Loaded producer metadata for %s", parsed.company_name)
        return translate_producer(parsed, company_dir=company_dir)

    def read_global_properties(self, company_dir: Path) -> Iterator[GlobalPropertyDescriptor]:
        properties_dir = company_dir / PROPERTIES_DIRNAME
        if not properties_dir.is_dir():
            log.info("No company-level properties directory at %s", properties_dir)
            return
        for property_dir in _subdirectories(properties_dir):
            yield GlobalPropertyDescriptor(
                name=property_dir.name,
                variants=tuple(
                    VariantAsset(name=path.stem, asset_path=path) for path in _files(property_dir)
                ),
            )

    def read_product(self, product_dir: Path) -> ProductDescriptor:
        parsed = self._parse_product_metadata(product_dir)
        metadata = ProductMetadata() if parsed is None else translate_product_metadata(parsed)
        file_skus = {path.stem: path for path in _files(product_dir / SKUS_DIRNAME)}
        listed = [code for code in _listed_sku_codes(parsed) if code not in file_skus]
        skus = [SkuDescriptor(code=code, asset_path=path) for code, path in file_skus.items()]
        skus.extend(SkuDescriptor(code=code) for code in dict.fromkeys(listed))
        if not skus:
            log.info("No SKUs found for product %s", product_dir.name)
        return ProductDescriptor(
            name=product_dir.name,
            metadata=metadata,
            main_image_path=self._main_image(product_dir),
            skus=tuple(skus),
        )

    def _parse_product_metadata(self, product_dir: Path) -> ProductMetadataFile | None:
        path = product_dir / PRODUCT_METADATA_FILENAME
        payload = _load_json(path)
        if payload is None:
            log.warning(
                "No %s found or invalid for %s, using defaults",
                PRODUCT_METADATA_FILENAME,
                product_dir.name,
            )
            return None
        try:
            return ProductMetadataFile.model_validate(payload)
        except ValidationError as exc:
            log.warning("Invalid %s, using defaults: %s", path, exc)
            return None

    def _main_image(self, product_dir: Path) -> Path | None:
        preferred = product_dir / MAIN_IMAGE_FILENAME
        if preferred.is_file():
            return preferred
        candidates = [path for path in _files(product_dir) if path.stem == MAIN_IMAGE_STEM]
        if candidates:
            return candidates[0]
        log.warning("No main image found for product %s", product_dir.name)
        return None


def _listed_sku_codes(parsed: ProductMetadataFile | None) -> list[str]:
    """SKU codes named in product metadata; they need no image file to exist."""

    if parsed is None:
        return []
    return [entry.sku_code.strip() for entry in parsed.skus if entry.sku_code.strip()]
