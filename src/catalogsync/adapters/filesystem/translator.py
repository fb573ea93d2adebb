"""Translate validated metadata files into catalog descriptors."""

from __future__ import annotations

from typing import TYPE_CHECKING

from catalogsync.domain.descriptor import (
    OwnerMetadata,
    ProductMetadata,
    ProductPropertyMetadata,
    VariantAdjustment,
)

if TYPE_CHECKING:
    from pathlib import Path

    from .schema import ProducerMetadataFile, ProductMetadataFile, ProductPropertyEntry


def translate_producer(payload: ProducerMetadataFile, *, company_dir: Path) -> OwnerMetadata:
    """Asset references are resolved relative to the company directory."""

    return OwnerMetadata(
        email=payload.email.strip(),
        company_name=payload.company_name.strip(),
        company_data=dict(payload.company_data),
        logo_path=company_dir / payload.logo if payload.logo else None,
        start_screen_path=(
            company_dir / payload.start_screen_image if payload.start_screen_image else None
        ),
    )


def translate_product_metadata(payload: ProductMetadataFile) -> ProductMetadata:
    return ProductMetadata(
        base_price=payload.base_price,
        suitable_for=tuple(dict.fromkeys(payload.suitable_for)),
        style=tuple(dict.fromkeys(payload.style)),
        properties=tuple(_translate_property(entry) for entry in payload.properties),
    )


def _translate_property(entry: ProductPropertyEntry) -> ProductPropertyMetadata:
    return ProductPropertyMetadata(
        name=entry.name.strip(),
        hotspot_x=entry.hotspot_x,
        hotspot_y=entry.hotspot_y,
        variants=tuple(
            VariantAdjustment(name=variant.name.strip(), price_adjustment=variant.price_adjustment)
            for variant in entry.variants
        ),
    )
