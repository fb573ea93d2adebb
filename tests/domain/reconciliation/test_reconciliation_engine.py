from __future__ import annotations

from decimal import Decimal
from threading import Event
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from catalogsync.adapters.filesystem import FilesystemCatalogWalker
from catalogsync.domain.descriptor import OwnerMetadata
from catalogsync.domain.model import (
    BodyShape,
    EntityKind,
    Multimedia,
    Owner,
    Product,
    ProductProperty,
    ProductSku,
    ProductSkuPropertyVariant,
    Property,
    PropertyVariant,
    StylePreference,
)
from catalogsync.domain.reconciliation import (
    DEFAULT_OWNER_EMAIL,
    MultimediaRegistrar,
    ReconciliationEngine,
)
from tests.helpers.catalog import (
    RecordingUploader,
    build_import_tree,
    company,
    global_property,
    owner_metadata,
    product,
    product_property,
    write_file,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from sqlalchemy.engine import Engine

    from catalogsync.adapters.sqlalchemy.unit_of_work import SqlAlchemyCatalogUnitOfWork
    from catalogsync.domain.model import Reconcilable

    UowFactory = Callable[[], SqlAlchemyCatalogUnitOfWork]


def _engine(
    uow_factory: UowFactory,
    uploader: RecordingUploader | None = None,
    stop_event: Event | None = None,
) -> ReconciliationEngine:
    return ReconciliationEngine(
        unit_of_work_factory=uow_factory,
        registrar=MultimediaRegistrar(uploader or RecordingUploader()),
        stop_event=stop_event,
    )


def _all[TEntity: Reconcilable](engine: Engine, kind: type[TEntity]) -> list[TEntity]:
    with Session(engine) as session:
        return list(session.execute(select(kind)).scalars().all())


def _count(engine: Engine, kind: type[Reconcilable]) -> int:
    with Session(engine) as session:
        return session.execute(select(func.count()).select_from(kind)).scalar_one()


def _sku(engine: Engine, code: str) -> ProductSku:
    [sku] = [sku for sku in _all(engine, ProductSku) if sku.sku_code == code]
    return sku


def _variant_names_of(engine: Engine, sku: ProductSku) -> set[str]:
    variants = {variant.id: variant.name for variant in _all(engine, PropertyVariant)}
    return {
        variants[link.property_variant_id]
        for link in _all(engine, ProductSkuPropertyVariant)
        if link.product_sku_id == sku.id
    }


def test_import_tree_is_reconciled_into_the_store(
    tmp_path: Path, sqlite_engine: Engine, sqlite_unit_of_work: UowFactory
) -> None:
    uploader = RecordingUploader()
    source = FilesystemCatalogWalker(build_import_tree(tmp_path / "import"))

    report = _engine(sqlite_unit_of_work, uploader).reconcile(source())

    assert report.succeeded
    assert (report.companies, report.products, report.skus) == (1, 1, 2)
    [owner] = _all(sqlite_engine, Owner)
    assert owner.email == "shop@acme.test"
    assert owner.company_data == {"nip": "123"}
    assert owner.logo_id is not None
    assert _count(sqlite_engine, Multimedia) == 8
    assert len(uploader.calls) == 8

    [shirt] = _all(sqlite_engine, Product)
    assert shirt.base_price == Decimal(100)
    assert shirt.suitable_for == [BodyShape.HOURGLASS]
    assert shirt.style == [StylePreference.FITTED_WEAR]
    assert shirt.main_image_id is not None

    red_m = _sku(sqlite_engine, "PRODUCT_LEMANSKA_01_RED_M")
    assert red_m.price == Decimal(110)
    assert red_m.image_id is not None
    assert _variant_names_of(sqlite_engine, red_m) == {"RED", "M"}
    blue_l = _sku(sqlite_engine, "PRODUCT_LEMANSKA_01_BLUE_L")
    assert blue_l.price == Decimal(100)
    assert _variant_names_of(sqlite_engine, blue_l) == {"BLUE", "L"}


def test_price_override_lives_on_a_product_scoped_property(
    tmp_path: Path, sqlite_engine: Engine, sqlite_unit_of_work: UowFactory
) -> None:
    source = FilesystemCatalogWalker(build_import_tree(tmp_path / "import"))

    _engine(sqlite_unit_of_work).reconcile(source())

    properties = _all(sqlite_engine, Property)
    [scoped_color] = [prop for prop in properties if not prop.is_global]
    assert scoped_color.name == "COLOR"
    global_variants = {
        variant.name: variant
        for variant in _all(sqlite_engine, PropertyVariant)
        if variant.property_id != scoped_color.id
    }
    local_variants = {
        variant.name: variant
        for variant in _all(sqlite_engine, PropertyVariant)
        if variant.property_id == scoped_color.id
    }
    assert set(local_variants) == {"RED", "BLUE"}
    assert local_variants["RED"].price_adjustment == Decimal(10)
    assert local_variants["BLUE"].price_adjustment == 0
    for name, variant in local_variants.items():
        assert variant.image_id == global_variants[name].image_id
    assert all(variant.price_adjustment == 0 for variant in global_variants.values())

    links = {link.property_id: link for link in _all(sqlite_engine, ProductProperty)}
    assert set(links) == {
        scoped_color.id,
        next(prop.id for prop in properties if prop.is_global and prop.name == "SIZE"),
    }
    assert (links[scoped_color.id].hotspot_x, links[scoped_color.id].hotspot_y) == (0.5, 0.25)


def test_sku_variants_belong_to_properties_linked_to_their_product(
    tmp_path: Path, sqlite_engine: Engine, sqlite_unit_of_work: UowFactory
) -> None:
    source = FilesystemCatalogWalker(build_import_tree(tmp_path / "import"))

    _engine(sqlite_unit_of_work).reconcile(source())

    property_of_variant = {
        variant.id: variant.property_id for variant in _all(sqlite_engine, PropertyVariant)
    }
    product_of_sku = {sku.id: sku.product_id for sku in _all(sqlite_engine, ProductSku)}
    linked = {(link.product_id, link.property_id) for link in _all(sqlite_engine, ProductProperty)}
    joins = _all(sqlite_engine, ProductSkuPropertyVariant)

    assert len(joins) == 4
    for join in joins:
        assert (
            product_of_sku[join.product_sku_id],
            property_of_variant[join.property_variant_id],
        ) in linked


def test_second_run_changes_nothing(
    tmp_path: Path, sqlite_engine: Engine, sqlite_unit_of_work: UowFactory
) -> None:
    uploader = RecordingUploader()
    source = FilesystemCatalogWalker(build_import_tree(tmp_path / "import"))
    engine = _engine(sqlite_unit_of_work, uploader)
    engine.reconcile(source())
    kinds = (Owner, Multimedia, Property, PropertyVariant, Product, ProductSku, ProductProperty)
    before = {kind: _count(sqlite_engine, kind) for kind in kinds}
    uploads_before = len(uploader.calls)

    report = engine.reconcile(source())

    assert {kind: _count(sqlite_engine, kind) for kind in kinds} == before
    assert len(uploader.calls) == uploads_before
    assert report.total_created == 0
    assert all(counts.updated == 0 for counts in report.counts.values())
    assert report.counts[EntityKind.PRODUCT_SKU].unchanged == 2


def test_local_adjustment_wins_over_other_products(
    sqlite_engine: Engine, sqlite_unit_of_work: UowFactory
) -> None:
    descriptor = company(
        owner=owner_metadata(),
        global_properties=[global_property("COLOR", "RED", "BLUE")],
        products=[
            product("DRESS", "DRESS_RED", properties=[product_property("COLOR", ("RED", 5))]),
            product("SHIRT", "SHIRT_RED", properties=[product_property("COLOR", ("RED", 20))]),
        ],
    )

    _engine(sqlite_unit_of_work).reconcile([descriptor])

    assert _sku(sqlite_engine, "DRESS_RED").price == Decimal(105)
    assert _sku(sqlite_engine, "SHIRT_RED").price == Decimal(120)


def test_sku_without_known_tokens_is_created_without_links(
    sqlite_engine: Engine, sqlite_unit_of_work: UowFactory
) -> None:
    descriptor = company(
        owner=owner_metadata(),
        global_properties=[global_property("COLOR", "RED")],
        products=[product("PRODUCT_X", "PRODUCT_X_ZZZ", base_price=80)],
    )

    report = _engine(sqlite_unit_of_work).reconcile([descriptor])

    sku = _sku(sqlite_engine, "PRODUCT_X_ZZZ")
    assert sku.price == Decimal(80)
    assert _variant_names_of(sqlite_engine, sku) == set()
    assert any("PRODUCT_X_ZZZ" in warning for warning in report.warnings)


def test_unresolved_token_is_warned_and_skipped(
    sqlite_engine: Engine, sqlite_unit_of_work: UowFactory
) -> None:
    descriptor = company(
        owner=owner_metadata(),
        global_properties=[global_property("COLOR", "RED"), global_property("SIZE", "M")],
        products=[product("SHIRT", "SHIRT_RED_XXL")],
    )

    report = _engine(sqlite_unit_of_work).reconcile([descriptor])

    assert _variant_names_of(sqlite_engine, _sku(sqlite_engine, "SHIRT_RED_XXL")) == {"RED"}
    assert any("XXL" in warning for warning in report.warnings)


def test_property_without_global_definition_gets_its_own_variants(
    sqlite_engine: Engine, sqlite_unit_of_work: UowFactory
) -> None:
    descriptor = company(
        owner=owner_metadata(),
        products=[
            product(
                "RING",
                "RING_GOLD",
                base_price=200,
                properties=[product_property("ENGRAVING", ("GOLD", 15))],
            )
        ],
    )

    _engine(sqlite_unit_of_work).reconcile([descriptor])

    [engraving] = _all(sqlite_engine, Property)
    assert not engraving.is_global
    assert _sku(sqlite_engine, "RING_GOLD").price == Decimal(215)


def test_unknown_property_and_variant_references_are_skipped(
    sqlite_engine: Engine, sqlite_unit_of_work: UowFactory
) -> None:
    descriptor = company(
        owner=owner_metadata(),
        global_properties=[global_property("COLOR", "RED")],
        products=[
            product(
                "SHIRT",
                "SHIRT_RED",
                properties=[
                    product_property("MATERIAL"),
                    product_property("COLOR", ("PURPLE", 3), ("RED", 4)),
                ],
            )
        ],
    )

    report = _engine(sqlite_unit_of_work).reconcile([descriptor])

    assert report.succeeded
    assert {prop.name for prop in _all(sqlite_engine, Property)} == {"COLOR"}
    assert "PURPLE" not in {variant.name for variant in _all(sqlite_engine, PropertyVariant)}
    assert _count(sqlite_engine, ProductProperty) == 1
    assert _sku(sqlite_engine, "SHIRT_RED").price == Decimal(104)
    assert any("MATERIAL" in warning for warning in report.warnings)
    assert any("PURPLE" in warning for warning in report.warnings)


def test_company_without_producer_metadata_uses_default_owner(
    sqlite_engine: Engine, sqlite_unit_of_work: UowFactory
) -> None:
    _engine(sqlite_unit_of_work).reconcile([company(products=[product("SHIRT")])])

    [owner] = _all(sqlite_engine, Owner)
    assert owner.email == DEFAULT_OWNER_EMAIL
    assert owner.company_data == {"name": "Test", "surname": "Importer"}
    [shirt] = _all(sqlite_engine, Product)
    assert shirt.owner_id == owner.id


def test_failed_asset_leaves_reference_empty(
    tmp_path: Path, sqlite_engine: Engine, sqlite_unit_of_work: UowFactory
) -> None:
    main_image = write_file(tmp_path / "main.jpg", b"main")
    uploader = RecordingUploader(fail_for={"main.jpg"})
    descriptor = company(
        owner=owner_metadata(),
        products=[product("SHIRT", "SHIRT_A", main_image_path=main_image)],
    )

    report = _engine(sqlite_unit_of_work, uploader).reconcile([descriptor])

    [shirt] = _all(sqlite_engine, Product)
    assert shirt.main_image_id is None
    assert _count(sqlite_engine, Multimedia) == 0
    assert _count(sqlite_engine, ProductSku) == 1
    assert len(report.asset_failures) == 1
    assert not report.succeeded


def test_failing_product_does_not_stop_the_run(
    sqlite_engine: Engine, sqlite_unit_of_work: UowFactory
) -> None:
    descriptor = company(
        owner=owner_metadata(),
        products=[product("   ", "BROKEN_A"), product("SHIRT", "SHIRT_A")],
    )

    report = _engine(sqlite_unit_of_work).reconcile([descriptor])

    assert [failure.entity for failure in report.failed_products] == ["   "]
    assert [shirt.name for shirt in _all(sqlite_engine, Product)] == ["SHIRT"]
    assert report.products == 1


def test_failing_sku_is_rolled_back_alone(
    sqlite_engine: Engine, sqlite_unit_of_work: UowFactory
) -> None:
    descriptor = company(owner=owner_metadata(), products=[product("SHIRT", "  ", "SHIRT_A")])

    report = _engine(sqlite_unit_of_work).reconcile([descriptor])

    assert len(report.failed_skus) == 1
    assert [sku.sku_code for sku in _all(sqlite_engine, ProductSku)] == ["SHIRT_A"]
    assert report.products == 1


def test_stop_request_ends_run_between_products(
    tmp_path: Path, sqlite_engine: Engine, sqlite_unit_of_work: UowFactory
) -> None:
    stop = Event()

    class _StoppingUploader(RecordingUploader):
        def __call__(self, *, filename: str, content: bytes) -> str:
            stop.set()
            return super().__call__(filename=filename, content=content)

    first_image = write_file(tmp_path / "first.jpg", b"first")
    descriptor = company(
        owner=owner_metadata(),
        products=[
            product("FIRST", "FIRST_A", main_image_path=first_image),
            product("SECOND", "SECOND_A"),
        ],
    )

    report = _engine(sqlite_unit_of_work, _StoppingUploader(), stop).reconcile([descriptor])

    assert report.cancelled
    assert [item.name for item in _all(sqlite_engine, Product)] == ["FIRST"]
    assert _count(sqlite_engine, ProductSku) == 1


def test_store_failure_stops_the_run(
    sqlite_engine: Engine, sqlite_unit_of_work: UowFactory
) -> None:
    broken_owner = OwnerMetadata(
        email="shop@acme.test",
        company_name=None,  # type: ignore[arg-type]
    )
    descriptors = [
        company("BROKEN", owner=broken_owner, products=[product("SHIRT", "SHIRT_A")]),
        company("NEXT", owner=owner_metadata("next@shop.test"), products=[product("DRESS")]),
    ]

    with pytest.raises(IntegrityError):
        _engine(sqlite_unit_of_work).reconcile(descriptors)

    assert _count(sqlite_engine, Owner) == 0
    assert _count(sqlite_engine, Product) == 0
