"""Catalog descriptor consumed by the reconciliation engine.

A descriptor is the already-validated, in-memory form of one company's
catalog subtree. Adapters (see ``catalogsync.adapters.filesystem``) build it
from whatever physical layout they read; the engine never looks past it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from pathlib import Path

    from catalogsync.domain.model import BodyShape, StylePreference

DESCRIPTOR_SCHEMA_VERSION: Final[int] = 1


@dataclass(frozen=True, slots=True)
class OwnerMetadata:
    email: str
    company_name: str
    company_data: dict[str, object] = field(default_factory=dict)
    logo_path: Path | None = None
    start_screen_path: Path | None = None


@dataclass(frozen=True, slots=True)
class VariantAsset:
    """Variant of a company-level property, backed by an image file."""

    name: str
    asset_path: Path | None = None


@dataclass(frozen=True, slots=True)
class GlobalPropertyDescriptor:
    name: str
    variants: tuple[VariantAsset, ...] = ()


@dataclass(frozen=True, slots=True)
class VariantAdjustment:
    name: str
    price_adjustment: Decimal = Decimal(0)


@dataclass(frozen=True, slots=True)
class ProductPropertyMetadata:
    name: str
    hotspot_x: float | None = None
    hotspot_y: float | None = None
    variants: tuple[VariantAdjustment, ...] = ()


@dataclass(frozen=True, slots=True)
class ProductMetadata:
    """Product-level metadata; the default instance stands in for a missing file."""

    base_price: Decimal = Decimal(0)
    suitable_for: tuple[BodyShape, ...] = ()
    style: tuple[StylePreference, ...] = ()
    properties: tuple[ProductPropertyMetadata, ...] = ()


@dataclass(frozen=True, slots=True)
class SkuDescriptor:
    code: str
    asset_path: Path | None = None


@dataclass(frozen=True, slots=True)
class ProductDescriptor:
    name: str
    metadata: ProductMetadata = field(default_factory=ProductMetadata)
    main_image_path: Path | None = None
    skus: tuple[SkuDescriptor, ...] = ()


@dataclass(frozen=True, slots=True)
class CompanyDescriptor:
    """One company's subtree. ``owner`` is ``None`` when no producer metadata exists."""

    name: str
    owner: OwnerMetadata | None = None
    global_properties: tuple[GlobalPropertyDescriptor, ...] = ()
    products: tuple[ProductDescriptor, ...] = ()
    schema_version: int = DESCRIPTOR_SCHEMA_VERSION
