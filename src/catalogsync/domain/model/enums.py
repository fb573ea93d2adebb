"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class EntityKind(StrEnum):
    """Discriminator for the reconciled entity kinds."""

    OWNER = "owner"
    PROPERTY = "property"
    PROPERTY_VARIANT = "property_variant"
    PRODUCT = "product"
    PRODUCT_SKU = "product_sku"
    PRODUCT_PROPERTY = "product_property"
    PRODUCT_SKU_PROPERTY_VARIANT = "product_sku_property_variant"
    MULTIMEDIA = "multimedia"


class BodyShape(StrEnum):
    INVERTED_TRIANGLE = "INVERTED_TRIANGLE"
    HOURGLASS = "HOURGLASS"
    OVAL = "OVAL"
    RECTANGLE = "RECTANGLE"
    TRIANGLE = "TRIANGLE"


class StylePreference(StrEnum):
    FITTED_WEAR = "FITTED_WEAR"
    OVERSIZE_WEAR = "OVERSIZE_WEAR"
    RETRO_SHAPES = "RETRO_SHAPES"
    MASCULINE_SHAPES = "MASCULINE_SHAPES"


class FileType(StrEnum):
    JPG = "JPG"
    PNG = "PNG"
    GIF = "GIF"
    WEBP = "WEBP"
    PDF = "PDF"
