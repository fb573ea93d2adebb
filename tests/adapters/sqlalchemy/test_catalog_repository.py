from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

import pytest
from sqlalchemy.exc import IntegrityError

from catalogsync.adapters.sqlalchemy import SqlAlchemyCatalogRepository
from catalogsync.domain.model import (
    BodyShape,
    Owner,
    Product,
    Property,
    PropertyVariant,
)
from catalogsync.domain.ports.persistence import CatalogRepository

if TYPE_CHECKING:
    from sqlalchemy.orm import Session


def _owner(repo: SqlAlchemyCatalogRepository) -> Owner:
    owner = Owner(email="shop@acme.test", company_name="Acme Ltd")
    assert repo.insert_if_absent(owner)
    return owner


def test_repository_satisfies_port(sqlite_session: Session) -> None:
    assert isinstance(SqlAlchemyCatalogRepository(sqlite_session), CatalogRepository)


def test_find_distinguishes_global_and_product_scoped_properties(
    sqlite_session: Session,
) -> None:
    repo = SqlAlchemyCatalogRepository(sqlite_session)
    owner = _owner(repo)
    product = Product(owner_id=owner.id, name="SHIRT")
    repo.insert_if_absent(product)
    global_color = Property(owner_id=owner.id, name="COLOR")
    scoped_color = Property(owner_id=owner.id, product_id=product.id, name="COLOR")
    assert repo.insert_if_absent(global_color)
    assert repo.insert_if_absent(scoped_color)

    found_global = repo.find(Property, {"owner_id": owner.id, "product_id": None, "name": "COLOR"})
    found_scoped = repo.find(
        Property, {"owner_id": owner.id, "product_id": product.id, "name": "COLOR"}
    )

    assert found_global is global_color
    assert found_scoped is scoped_color


def test_insert_if_absent_reports_unique_key_collision(sqlite_session: Session) -> None:
    repo = SqlAlchemyCatalogRepository(sqlite_session)
    _owner(repo)

    inserted = repo.insert_if_absent(Owner(email="shop@acme.test", company_name="Other"))

    assert inserted is False
    stored = repo.find(Owner, {"email": "shop@acme.test"})
    assert stored is not None
    assert stored.company_name == "Acme Ltd"


def test_duplicate_global_property_is_rejected(sqlite_session: Session) -> None:
    repo = SqlAlchemyCatalogRepository(sqlite_session)
    owner = _owner(repo)

    assert repo.insert_if_absent(Property(owner_id=owner.id, name="SIZE"))
    assert repo.insert_if_absent(Property(owner_id=owner.id, name="SIZE")) is False
    assert [prop.name for prop in repo.global_properties(owner.id)] == ["SIZE"]


def test_global_properties_exclude_product_scoped_ones(sqlite_session: Session) -> None:
    repo = SqlAlchemyCatalogRepository(sqlite_session)
    owner = _owner(repo)
    product = Product(owner_id=owner.id, name="SHIRT")
    repo.insert_if_absent(product)
    for name in ("SIZE", "COLOR"):
        repo.insert_if_absent(Property(owner_id=owner.id, name=name))
    repo.insert_if_absent(Property(owner_id=owner.id, product_id=product.id, name="FIT"))

    assert [prop.name for prop in repo.global_properties(owner.id)] == ["COLOR", "SIZE"]


def test_variants_are_ordered_by_property_then_variant(sqlite_session: Session) -> None:
    repo = SqlAlchemyCatalogRepository(sqlite_session)
    owner = _owner(repo)
    size = Property(owner_id=owner.id, name="SIZE")
    color = Property(owner_id=owner.id, name="COLOR")
    repo.insert_if_absent(size)
    repo.insert_if_absent(color)
    for prop, name in ((size, "M"), (color, "RED"), (size, "L"), (color, "BLUE")):
        repo.insert_if_absent(PropertyVariant(property_id=prop.id, name=name))

    variants = repo.variants_of([size.id, color.id])

    assert [variant.name for variant in variants] == ["BLUE", "RED", "L", "M"]
    assert repo.variants_of([]) == ()


def test_prices_and_enum_lists_survive_a_reload(sqlite_session: Session) -> None:
    repo = SqlAlchemyCatalogRepository(sqlite_session)
    owner = _owner(repo)
    repo.insert_if_absent(
        Product(
            owner_id=owner.id,
            name="SHIRT",
            base_price=Decimal("99.95"),
            suitable_for=[BodyShape.OVAL, BodyShape.HOURGLASS],
        )
    )
    sqlite_session.commit()
    sqlite_session.expire_all()

    stored = repo.find(Product, {"owner_id": owner.id, "name": "SHIRT"})

    assert stored is not None
    assert stored.base_price == Decimal("99.95")
    assert stored.suitable_for == [BodyShape.OVAL, BodyShape.HOURGLASS]
    assert stored.style == []


def test_non_key_constraint_violation_propagates(sqlite_session: Session) -> None:
    repo = SqlAlchemyCatalogRepository(sqlite_session)
    owner = _owner(repo)

    with pytest.raises(IntegrityError):
        repo.insert_if_absent(Product(owner_id=owner.id, name=None))  # type: ignore[arg-type]

    assert repo.find(Owner, {"email": "shop@acme.test"}) is owner
