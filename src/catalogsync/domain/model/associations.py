"""Join entities linking catalog aggregates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from catalogsync.domain.model.entity import Reconcilable
from catalogsync.domain.model.enums import EntityKind

if TYPE_CHECKING:
    from uuid import UUID


@dataclass(eq=False, kw_only=True)
class ProductProperty(Reconcilable):
    """Property exposed by a product, with an optional UI hotspot."""

    ENTITY_KIND = EntityKind.PRODUCT_PROPERTY
    NATURAL_KEY = ("product_id", "property_id")
    MUTABLE_FIELDS = frozenset({"hotspot_x", "hotspot_y"})

    product_id: UUID
    property_id: UUID
    hotspot_x: float | None = None
    hotspot_y: float | None = None


@dataclass(eq=False, kw_only=True)
class ProductSkuPropertyVariant(Reconcilable):
    """Variant a SKU resolved to. Pure association, nothing to update."""

    ENTITY_KIND = EntityKind.PRODUCT_SKU_PROPERTY_VARIANT
    NATURAL_KEY = ("product_sku_id", "property_variant_id")

    product_sku_id: UUID
    property_variant_id: UUID
