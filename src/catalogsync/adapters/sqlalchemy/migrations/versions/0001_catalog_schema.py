"""Catalog schema: owners, assets, products, properties, SKUs and their links.

Revision ID: 0001_catalog_schema
Revises:
Create Date: 2026-10-19 09:00:00

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001_catalog_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

FILE_TYPES = ("JPG", "PNG", "GIF", "WEBP", "PDF")


def _price(name: str) -> sa.Column[object]:
    return sa.Column(name, sa.Numeric(12, 2), nullable=False)


def upgrade() -> None:
    op.create_table(
        "owner",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("company_name", sa.String(length=255), nullable=False),
        sa.Column("company_data", sa.JSON(), nullable=False),
        sa.Column("logo_id", sa.Uuid(), nullable=True),
        sa.Column("start_screen_image_id", sa.Uuid(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_owner"),
        sa.UniqueConstraint("email", name="uq_owner_email"),
    )
    op.create_table(
        "multimedia",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("owner_id", sa.Uuid(), nullable=False),
        sa.Column("checksum", sa.String(length=64), nullable=False),
        sa.Column("url", sa.String(), nullable=False),
        sa.Column("alt_text", sa.String(), nullable=True),
        sa.Column(
            "file_type",
            sa.Enum(*FILE_TYPES, name="filetype", native_enum=False),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(
            ["owner_id"],
            ["owner.id"],
            name="fk_multimedia_owner_id_owner",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_multimedia"),
        sa.UniqueConstraint("owner_id", "checksum", name="uq_multimedia_owner_checksum"),
    )
    with op.batch_alter_table("owner") as batch_op:
        batch_op.create_foreign_key(
            "fk_owner_logo_id_multimedia",
            "multimedia",
            ["logo_id"],
            ["id"],
            ondelete="SET NULL",
        )
        batch_op.create_foreign_key(
            "fk_owner_start_screen_image_id_multimedia",
            "multimedia",
            ["start_screen_image_id"],
            ["id"],
            ondelete="SET NULL",
        )

    op.create_table(
        "product",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("owner_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        _price("base_price"),
        sa.Column("main_image_id", sa.Uuid(), nullable=True),
        sa.Column("suitable_for", sa.String(), nullable=False),
        sa.Column("style", sa.String(), nullable=False),
        sa.ForeignKeyConstraint(
            ["owner_id"], ["owner.id"], name="fk_product_owner_id_owner", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["main_image_id"],
            ["multimedia.id"],
            name="fk_product_main_image_id_multimedia",
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_product"),
        sa.UniqueConstraint("owner_id", "name", name="uq_product_owner_name"),
    )
    op.create_table(
        "property",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("owner_id", sa.Uuid(), nullable=False),
        sa.Column("product_id", sa.Uuid(), nullable=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.ForeignKeyConstraint(
            ["owner_id"], ["owner.id"], name="fk_property_owner_id_owner", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["product_id"],
            ["product.id"],
            name="fk_property_product_id_product",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_property"),
        sa.UniqueConstraint(
            "owner_id", "product_id", "name", name="uq_property_owner_product_name"
        ),
    )
    op.create_index(
        "uq_property_owner_name_global",
        "property",
        ["owner_id", "name"],
        unique=True,
        sqlite_where=sa.text("product_id IS NULL"),
        postgresql_where=sa.text("product_id IS NULL"),
    )
    op.create_table(
        "property_variant",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("property_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("image_id", sa.Uuid(), nullable=True),
        _price("price_adjustment"),
        sa.ForeignKeyConstraint(
            ["property_id"],
            ["property.id"],
            name="fk_property_variant_property_id_property",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["image_id"],
            ["multimedia.id"],
            name="fk_property_variant_image_id_multimedia",
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_property_variant"),
        sa.UniqueConstraint("property_id", "name", name="uq_property_variant_property_name"),
    )
    op.create_table(
        "product_sku",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("product_id", sa.Uuid(), nullable=False),
        sa.Column("sku_code", sa.String(length=255), nullable=False),
        _price("price"),
        sa.Column("image_id", sa.Uuid(), nullable=True),
        sa.ForeignKeyConstraint(
            ["product_id"],
            ["product.id"],
            name="fk_product_sku_product_id_product",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["image_id"],
            ["multimedia.id"],
            name="fk_product_sku_image_id_multimedia",
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_product_sku"),
        sa.UniqueConstraint("product_id", "sku_code", name="uq_product_sku_product_code"),
    )
    op.create_table(
        "product_property",
        sa.Column("product_id", sa.Uuid(), nullable=False),
        sa.Column("property_id", sa.Uuid(), nullable=False),
        sa.Column("hotspot_x", sa.Float(), nullable=True),
        sa.Column("hotspot_y", sa.Float(), nullable=True),
        sa.ForeignKeyConstraint(
            ["product_id"],
            ["product.id"],
            name="fk_product_property_product_id_product",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["property_id"],
            ["property.id"],
            name="fk_product_property_property_id_property",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("product_id", "property_id", name="pk_product_property"),
    )
    op.create_table(
        "product_sku_property_variant",
        sa.Column("product_sku_id", sa.Uuid(), nullable=False),
        sa.Column("property_variant_id", sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(
            ["product_sku_id"],
            ["product_sku.id"],
            name="fk_product_sku_property_variant_product_sku_id_product_sku",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["property_variant_id"],
            ["property_variant.id"],
            name="fk_product_sku_property_variant_property_variant_id_property_variant",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint(
            "product_sku_id", "property_variant_id", name="pk_product_sku_property_variant"
        ),
    )


def downgrade() -> None:
    op.drop_table("product_sku_property_variant")
    op.drop_table("product_property")
    op.drop_table("product_sku")
    op.drop_table("property_variant")
    op.drop_index("uq_property_owner_name_global", table_name="property")
    op.drop_table("property")
    op.drop_table("product")
    with op.batch_alter_table("owner") as batch_op:
        batch_op.drop_constraint("fk_owner_start_screen_image_id_multimedia", type_="foreignkey")
        batch_op.drop_constraint("fk_owner_logo_id_multimedia", type_="foreignkey")
    op.drop_table("multimedia")
    op.drop_table("owner")
