"""SQLAlchemy mapping metadata for the catalog domain model."""

from __future__ import annotations

import json
import logging
import uuid
from enum import StrEnum
from functools import cache
from typing import TYPE_CHECKING, Any, Final, cast

from sqlalchemy import (
    JSON,
    Column,
    Dialect,
    Enum,
    Float,
    ForeignKey,
    Index,
    Numeric,
    String,
    Table,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers

from catalogsync.domain.model import (
    BodyShape,
    FileType,
    Multimedia,
    Owner,
    Product,
    ProductProperty,
    ProductSku,
    ProductSkuPropertyVariant,
    Property,
    PropertyVariant,
    Reconcilable,
    StylePreference,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]
PRICE_PRECISION = 12
PRICE_SCALE = 2


def _price_column(name: str) -> Column[Any]:
    return Column(
        name,
        Numeric(PRICE_PRECISION, PRICE_SCALE, asdecimal=True),
        nullable=False,
        default=0,
    )


class EnumListType[TEnum: StrEnum](TypeDecorator[list[TEnum]]):
    """Ordered list of enum members stored as a JSON array of their values."""

    impl = String
    cache_ok = True

    def __init__(self, enum_class: type[TEnum]) -> None:
        super().__init__()
        self.enum_class = enum_class

    def process_bind_param(self, value: list[TEnum] | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        return json.dumps([self.enum_class(member).value for member in value])

    def process_result_value(self, value: str | None, dialect: Dialect) -> list[TEnum]:
        _ = dialect
        if value is None:
            return []
        loaded = json.loads(value)
        if not isinstance(loaded, list):
            return []
        items = cast(list[Any], loaded)
        members: list[TEnum] = []
        for item in items:
            if isinstance(item, str):
                try:
                    members.append(self.enum_class(item))
                except ValueError:
                    log.warning("Dropping unknown %s value %r", self.enum_class.__name__, item)
        return members


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Owners and assets -----------------------------------------------------------

owner_table = Table(
    "owner",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("email", String(255), nullable=False),
    Column("company_name", String(255), nullable=False),
    Column("company_data", JSON, nullable=False),
    Column(
        "logo_id",
        UUIDColumnType,
        ForeignKey(
            "multimedia.id",
            ondelete="SET NULL",
            use_alter=True,
            name="fk_owner_logo_id_multimedia",
        ),
        nullable=True,
    ),
    Column(
        "start_screen_image_id",
        UUIDColumnType,
        ForeignKey(
            "multimedia.id",
            ondelete="SET NULL",
            use_alter=True,
            name="fk_owner_start_screen_image_id_multimedia",
        ),
        nullable=True,
    ),
    UniqueConstraint("email", name="uq_owner_email"),
)

multimedia_table = Table(
    "multimedia",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "owner_id", UUIDColumnType, ForeignKey("owner.id", ondelete="CASCADE"), nullable=False
    ),
    Column("checksum", String(64), nullable=False),
    Column("url", String, nullable=False),
    Column("alt_text", String, nullable=True),
    Column("file_type", Enum(FileType, native_enum=False), nullable=False),
    UniqueConstraint("owner_id", "checksum", name="uq_multimedia_owner_checksum"),
)

# Products and properties -----------------------------------------------------

product_table = Table(
    "product",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "owner_id", UUIDColumnType, ForeignKey("owner.id", ondelete="CASCADE"), nullable=False
    ),
    Column("name", String(255), nullable=False),
    _price_column("base_price"),
    Column(
        "main_image_id",
        UUIDColumnType,
        ForeignKey("multimedia.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column("suitable_for", EnumListType(BodyShape), nullable=False),
    Column("style", EnumListType(StylePreference), nullable=False),
    UniqueConstraint("owner_id", "name", name="uq_product_owner_name"),
)

property_table = Table(
    "property",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "owner_id", UUIDColumnType, ForeignKey("owner.id", ondelete="CASCADE"), nullable=False
    ),
    Column(
        "product_id",
        UUIDColumnType,
        ForeignKey("product.id", ondelete="CASCADE"),
        nullable=True,
    ),
    Column("name", String(255), nullable=False),
    UniqueConstraint("owner_id", "product_id", "name", name="uq_property_owner_product_name"),
)

# NULL never collides in a unique constraint, so global properties get their own index
Index(
    "uq_property_owner_name_global",
    property_table.c.owner_id,
    property_table.c.name,
    unique=True,
    sqlite_where=property_table.c.product_id.is_(None),
    postgresql_where=property_table.c.product_id.is_(None),
)

property_variant_table = Table(
    "property_variant",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "property_id",
        UUIDColumnType,
        ForeignKey("property.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("name", String(255), nullable=False),
    Column(
        "image_id",
        UUIDColumnType,
        ForeignKey("multimedia.id", ondelete="SET NULL"),
        nullable=True,
    ),
    _price_column("price_adjustment"),
    UniqueConstraint("property_id", "name", name="uq_property_variant_property_name"),
)

product_sku_table = Table(
    "product_sku",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "product_id",
        UUIDColumnType,
        ForeignKey("product.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("sku_code", String(255), nullable=False),
    _price_column("price"),
    Column(
        "image_id",
        UUIDColumnType,
        ForeignKey("multimedia.id", ondelete="SET NULL"),
        nullable=True,
    ),
    UniqueConstraint("product_id", "sku_code", name="uq_product_sku_product_code"),
)

# Associations ----------------------------------------------------------------

product_property_table = Table(
    "product_property",
    mapper_registry.metadata,
    Column(
        "product_id", UUIDColumnType, ForeignKey("product.id", ondelete="CASCADE"), primary_key=True
    ),
    Column(
        "property_id",
        UUIDColumnType,
        ForeignKey("property.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("hotspot_x", Float, nullable=True),
    Column("hotspot_y", Float, nullable=True),
)

product_sku_property_variant_table = Table(
    "product_sku_property_variant",
    mapper_registry.metadata,
    Column(
        "product_sku_id",
        UUIDColumnType,
        ForeignKey("product_sku.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "property_variant_id",
        UUIDColumnType,
        ForeignKey("property_variant.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


@cache
def start_mappers() -> orm.registry:
    """Map the domain dataclasses onto their tables (idempotent)."""

    log.info("Starting mappers")

    mapper_registry.map_imperatively(Owner, owner_table)
    mapper_registry.map_imperatively(Multimedia, multimedia_table)
    mapper_registry.map_imperatively(Product, product_table)
    mapper_registry.map_imperatively(Property, property_table)
    mapper_registry.map_imperatively(PropertyVariant, property_variant_table)
    mapper_registry.map_imperatively(ProductSku, product_sku_table)
    mapper_registry.map_imperatively(ProductProperty, product_property_table)
    mapper_registry.map_imperatively(
        ProductSkuPropertyVariant, product_sku_property_variant_table
    )

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)


TABLE_BY_CLASS: Final[dict[type[Reconcilable], Table]] = {
    Owner: owner_table,
    Multimedia: multimedia_table,
    Product: product_table,
    Property: property_table,
    PropertyVariant: property_variant_table,
    ProductSku: product_sku_table,
    ProductProperty: product_property_table,
    ProductSkuPropertyVariant: product_sku_property_variant_table,
}
