"""Public domain model surface."""

from __future__ import annotations

from catalogsync.domain.model.associations import ProductProperty, ProductSkuPropertyVariant
from catalogsync.domain.model.catalog import (
    Owner,
    Product,
    ProductSku,
    Property,
    PropertyVariant,
)
from catalogsync.domain.model.entity import Entity, Reconcilable, new_id
from catalogsync.domain.model.enums import BodyShape, EntityKind, FileType, StylePreference
from catalogsync.domain.model.media import Multimedia

__all__ = [  # noqa: RUF022
    # base
    "Entity",
    "Reconcilable",
    "new_id",
    # catalog
    "Owner",
    "Property",
    "PropertyVariant",
    "Product",
    "ProductSku",
    # associations
    "ProductProperty",
    "ProductSkuPropertyVariant",
    # media
    "Multimedia",
    # enums
    "BodyShape",
    "EntityKind",
    "FileType",
    "StylePreference",
]
