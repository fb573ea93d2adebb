from __future__ import annotations

import uuid

from catalogsync.domain.model import (
    EntityKind,
    Owner,
    ProductProperty,
    ProductSku,
    Property,
)


def test_entities_get_distinct_ids_and_compare_by_identity() -> None:
    first = Owner(email="shop@acme.test", company_name="Acme")
    second = Owner(email="shop@acme.test", company_name="Acme")

    assert first.id != second.id
    assert first != second
    assert first.natural_key() == second.natural_key() == ("shop@acme.test",)


def test_property_scope_is_part_of_the_natural_key() -> None:
    owner_id = uuid.uuid4()
    product_id = uuid.uuid4()
    global_color = Property(owner_id=owner_id, name="COLOR")
    scoped_color = Property(owner_id=owner_id, product_id=product_id, name="COLOR")

    assert global_color.is_global
    assert not scoped_color.is_global
    assert global_color.natural_key() == (owner_id, None, "COLOR")
    assert scoped_color.natural_key() == (owner_id, product_id, "COLOR")


def test_keys_are_never_mutable_fields() -> None:
    for kind in (Owner, Property, ProductSku, ProductProperty):
        assert not set(kind.NATURAL_KEY) & kind.MUTABLE_FIELDS


def test_entity_kind_reflects_class() -> None:
    sku = ProductSku(product_id=uuid.uuid4(), sku_code="SHIRT_RED")

    assert sku.entity_kind is EntityKind.PRODUCT_SKU
