"""Schemas for the JSON metadata files of an import tree."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, ClassVar, Final

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from catalogsync.domain.model import BodyShape, StylePreference

log = logging.getLogger(__name__)

METADATA_SCHEMA_VERSION: Final[int] = 1


class MetadataBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)
    _logged_extra_keys: ClassVar[set[tuple[str, str]]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        model = type(self).__name__
        new_keys = {key for key in extras if (model, key) not in self._logged_extra_keys}
        if not new_keys:
            return
        self._logged_extra_keys.update((model, key) for key in new_keys)
        log.warning(
            "Metadata %s: unmodeled keys: %s",
            model,
            ", ".join(sorted(new_keys)),
        )


class VersionedMetadataFile(MetadataBaseModel):
    schema_version: int = Field(default=METADATA_SCHEMA_VERSION, alias="schemaVersion")

    @field_validator("schema_version")
    @classmethod
    def _supported_version(cls, value: int) -> int:
        if value > METADATA_SCHEMA_VERSION:
            raise ValueError(
                f"schema version {value} is newer than supported {METADATA_SCHEMA_VERSION}"
            )
        return value


class ProducerMetadataFile(VersionedMetadataFile):
    """``producer.meta.json``"""

    company_name: str = Field(alias="companyName", min_length=1)
    email: str = Field(min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    company_data: dict[str, Any] = Field(default_factory=dict, alias="companyData")
    logo: str | None = Field(default=None, validation_alias=AliasChoices("logo", "logoUrl"))
    start_screen_image: str | None = Field(
        default=None,
        validation_alias=AliasChoices("startScreenImage", "startScreenImageUrl"),
    )

    @field_validator("company_data", mode="before")
    @classmethod
    def _null_company_data(cls, value: object) -> object:
        return {} if value is None else value


class VariantAdjustmentEntry(MetadataBaseModel):
    name: str = Field(min_length=1)
    price_adjustment: Decimal = Field(default=Decimal(0), alias="priceAdjustment")

    @field_validator("price_adjustment", mode="before")
    @classmethod
    def _null_adjustment(cls, value: object) -> object:
        return 0 if value is None else value


class ProductPropertyEntry(MetadataBaseModel):
    name: str = Field(min_length=1)
    hotspot_x: float | None = Field(default=None, alias="hotspotX", ge=0.0, le=1.0)
    hotspot_y: float | None = Field(default=None, alias="hotspotY", ge=0.0, le=1.0)
    variants: list[VariantAdjustmentEntry] = Field(default_factory=list)


class SkuEntry(MetadataBaseModel):
    sku_code: str = Field(validation_alias=AliasChoices("skuCode", "code"), min_length=1)


class ProductMetadataFile(VersionedMetadataFile):
    """``product_metadata.json``"""

    base_price: Decimal = Field(default=Decimal(0), alias="basePrice")
    suitable_for: list[BodyShape] = Field(default_factory=list, alias="suitableFor")
    style: list[StylePreference] = Field(default_factory=list)
    properties: list[ProductPropertyEntry] = Field(default_factory=list)
    skus: list[SkuEntry] = Field(default_factory=list)

    @field_validator("base_price", mode="before")
    @classmethod
    def _null_price(cls, value: object) -> object:
        return 0 if value is None else value

    @field_validator("suitable_for", mode="before")
    @classmethod
    def _known_body_shapes(cls, value: object) -> object:
        return _drop_unknown(value, BodyShape, "suitableFor")

    @field_validator("style", mode="before")
    @classmethod
    def _known_styles(cls, value: object) -> object:
        return _drop_unknown(value, StylePreference, "style")


def _drop_unknown(
    value: object, enum_class: type[BodyShape | StylePreference], field: str
) -> object:
    if value is None:
        return []
    if not isinstance(value, list):
        return value
    known = {member.value for member in enum_class}
    kept: list[object] = []
    for item in value:  # pyright: ignore[reportUnknownVariableType]
        if isinstance(item, str) and item not in known:
            log.warning("Ignoring unknown %s value %r", field, item)
            continue
        kept.append(item)  # pyright: ignore[reportUnknownArgumentType]
    return kept
