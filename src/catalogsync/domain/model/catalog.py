"""Catalog aggregates: owners, products, properties, variants and SKUs."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING

from catalogsync.domain.model.entity import Entity
from catalogsync.domain.model.enums import BodyShape, EntityKind, StylePreference

if TYPE_CHECKING:
    from uuid import UUID


@dataclass(eq=False, kw_only=True)
class Owner(Entity):
    """Seller account that exclusively owns a catalog subtree."""

    ENTITY_KIND = EntityKind.OWNER
    NATURAL_KEY = ("email",)
    MUTABLE_FIELDS = frozenset({"company_name", "company_data", "logo_id", "start_screen_image_id"})

    email: str
    company_name: str
    company_data: dict[str, object] = field(default_factory=dict)
    logo_id: UUID | None = None
    start_screen_image_id: UUID | None = None


@dataclass(eq=False, kw_only=True)
class Property(Entity):
    """Customizable attribute, global to an owner or scoped to one product."""

    ENTITY_KIND = EntityKind.PROPERTY
    NATURAL_KEY = ("owner_id", "product_id", "name")

    name: str
    owner_id: UUID
    product_id: UUID | None = None

    @property
    def is_global(self) -> bool:
        return self.product_id is None


@dataclass(eq=False, kw_only=True)
class PropertyVariant(Entity):
    ENTITY_KIND = EntityKind.PROPERTY_VARIANT
    NATURAL_KEY = ("property_id", "name")
    MUTABLE_FIELDS = frozenset({"image_id", "price_adjustment"})

    property_id: UUID
    name: str
    image_id: UUID | None = None
    price_adjustment: Decimal = Decimal(0)


@dataclass(eq=False, kw_only=True)
class Product(Entity):
    ENTITY_KIND = EntityKind.PRODUCT
    NATURAL_KEY = ("owner_id", "name")
    MUTABLE_FIELDS = frozenset({"base_price", "main_image_id", "suitable_for", "style"})

    owner_id: UUID
    name: str
    base_price: Decimal = Decimal(0)
    main_image_id: UUID | None = None
    suitable_for: list[BodyShape] = field(default_factory=list)
    style: list[StylePreference] = field(default_factory=list)


@dataclass(eq=False, kw_only=True)
class ProductSku(Entity):
    """One purchasable variant combination of a product."""

    ENTITY_KIND = EntityKind.PRODUCT_SKU
    NATURAL_KEY = ("product_id", "sku_code")
    MUTABLE_FIELDS = frozenset({"price", "image_id"})

    product_id: UUID
    sku_code: str
    price: Decimal = Decimal(0)
    image_id: UUID | None = None
