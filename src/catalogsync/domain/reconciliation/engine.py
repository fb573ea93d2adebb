"""Orchestrator for catalog reconciliation.

Per company the engine walks ``OwnerPhase -> GlobalPropertyPhase`` in one
unit of work, then each product in its own unit of work through
``ProductUpsert -> PropertyLinkPhase -> SkuPhase -> JoinPhase``. Every write
is a forward-only upsert, so a run that stopped halfway is repaired by simply
running again.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from decimal import Decimal
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from catalogsync.domain.descriptor import OwnerMetadata
from catalogsync.domain.model import (
    Owner,
    Product,
    ProductProperty,
    ProductSku,
    ProductSkuPropertyVariant,
    Property,
    PropertyVariant,
)
from catalogsync.domain.reconciliation.errors import (
    AssetRegistrationError,
    DescriptorError,
    ReconciliationError,
)
from catalogsync.domain.reconciliation.pricing import PriceCalculator
from catalogsync.domain.reconciliation.report import Failure, ReconciliationReport
from catalogsync.domain.reconciliation.sku_codes import SkuCodeResolver
from catalogsync.domain.reconciliation.upsert import EntityReconciler
from catalogsync.domain.reconciliation.variant_index import (
    VariantIndex,
    build_global_index,
    build_product_index,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from pathlib import Path
    from threading import Event
    from uuid import UUID

    from catalogsync.domain.descriptor import (
        CompanyDescriptor,
        GlobalPropertyDescriptor,
        ProductDescriptor,
        ProductPropertyMetadata,
        SkuDescriptor,
    )
    from catalogsync.domain.ports.unit_of_work import CatalogUnitOfWork
    from catalogsync.domain.reconciliation.assets import MultimediaRegistrar

UnitOfWorkFactory = Callable[[], "CatalogUnitOfWork"]

log = getLogger(__name__)

DEFAULT_OWNER_EMAIL = "test-importer@example.com"
DEFAULT_OWNER_COMPANY = "Test Importer"


def default_owner_metadata(
    email: str = DEFAULT_OWNER_EMAIL, company_name: str = DEFAULT_OWNER_COMPANY
) -> OwnerMetadata:
    """Stand-in owner for companies without producer metadata."""

    return OwnerMetadata(
        email=email,
        company_name=company_name,
        company_data={"name": "Test", "surname": "Importer"},
    )


class EnginePhase(StrEnum):
    OWNER = "owner"
    GLOBAL_PROPERTIES = "global_properties"
    PRODUCT_UPSERT = "product_upsert"
    PROPERTY_LINKS = "property_links"
    SKUS = "skus"
    JOINS = "joins"
    DONE = "done"


@dataclass(slots=True)
class _PhaseContext:
    company: str
    uow: CatalogUnitOfWork
    reconciler: EntityReconciler
    report: ReconciliationReport
    phase: EnginePhase = EnginePhase.OWNER

    def enter(self, phase: EnginePhase) -> None:
        log.debug("%s: entering %s", self.company, phase)
        self.phase = phase


@dataclass(slots=True)
class ReconciliationEngine:
    """Converge the store towards a sequence of company descriptors."""

    unit_of_work_factory: UnitOfWorkFactory
    registrar: MultimediaRegistrar
    resolver: SkuCodeResolver = field(default_factory=SkuCodeResolver)
    pricing: PriceCalculator = field(default_factory=PriceCalculator)
    default_owner: OwnerMetadata = field(default_factory=default_owner_metadata)
    stop_event: Event | None = None

    def reconcile(self, companies: Iterable[CompanyDescriptor]) -> ReconciliationReport:
        """Reconcile every company in order and return the run summary.

        Store failures propagate after the current unit of work is rolled back;
        everything committed before that point stays.
        """

        report = ReconciliationReport()
        for company in companies:
            if self._stop_requested(report):
                break
            self._reconcile_company(company, report)
            if report.cancelled:
                break

        log.info(
            "Reconciliation %s: companies=%d, products=%d, skus=%d, created=%d, "
            "failed_products=%d, failed_skus=%d, asset_failures=%d, warnings=%d",
            "cancelled" if report.cancelled else "finished",
            report.companies,
            report.products,
            report.skus,
            report.total_created,
            len(report.failed_products),
            len(report.failed_skus),
            len(report.asset_failures),
            len(report.warnings),
        )
        return report

    # Company level -----------------------------------------------------------------

    def _reconcile_company(self, company: CompanyDescriptor, report: ReconciliationReport) -> None:
        log.info("Reconciling company %s", company.name)
        with self.unit_of_work_factory() as uow:
            context = self._context(company.name, uow, report)
            owner = self._owner_phase(context, company.owner)
            context.enter(EnginePhase.GLOBAL_PROPERTIES)
            global_index = self._global_property_phase(context, owner.id, company.global_properties)
            uow.commit()
            owner_id = owner.id
        report.companies += 1

        for product in company.products:
            if self._stop_requested(report):
                return
            self._reconcile_product(company.name, owner_id, global_index, product, report)

    def _owner_phase(self, context: _PhaseContext, metadata: OwnerMetadata | None) -> Owner:
        context.enter(EnginePhase.OWNER)
        if metadata is None:
            log.info(
                "No producer metadata for %s, attributing it to %s",
                context.company,
                self.default_owner.email,
            )
            metadata = self.default_owner

        key = {"email": metadata.email}
        owner = context.reconciler.upsert(
            Owner,
            key,
            {"company_name": metadata.company_name, "company_data": dict(metadata.company_data)},
        ).entity

        assets: dict[str, object] = {}
        logo_id = self._register_asset(context, metadata.logo_path, owner.id)
        if logo_id is not None:
            assets["logo_id"] = logo_id
        start_screen_id = self._register_asset(context, metadata.start_screen_path, owner.id)
        if start_screen_id is not None:
            assets["start_screen_image_id"] = start_screen_id
        if assets:
            context.reconciler.upsert(Owner, key, assets)
        return owner

    def _global_property_phase(
        self,
        context: _PhaseContext,
        owner_id: UUID,
        properties: Sequence[GlobalPropertyDescriptor],
    ) -> VariantIndex:
        reconciler = context.reconciler
        for descriptor in properties:
            prop = reconciler.upsert(
                Property, {"owner_id": owner_id, "product_id": None, "name": descriptor.name}
            ).entity
            for variant in descriptor.variants:
                desired: dict[str, object] = {}
                image_id = self._register_asset(context, variant.asset_path, owner_id)
                if image_id is not None:
                    desired["image_id"] = image_id
                reconciler.upsert(
                    PropertyVariant, {"property_id": prop.id, "name": variant.name}, desired
                )
        return build_global_index(reconciler.repository, owner_id)

    # Product level -----------------------------------------------------------------

    def _reconcile_product(
        self,
        company: str,
        owner_id: UUID,
        global_index: VariantIndex,
        product: ProductDescriptor,
        report: ReconciliationReport,
    ) -> None:
        with self.unit_of_work_factory() as uow:
            context = self._context(company, uow, report)
            try:
                self._product_phase(context, owner_id, global_index, product)
            except ReconciliationError as exc:
                uow.rollback()
                log.exception(
                    "Product %s of %s failed during %s", product.name, company, context.phase
                )
                report.failed_products.append(
                    Failure(
                        company=company,
                        entity=product.name,
                        phase=context.phase,
                        reason=str(exc),
                    )
                )
                return
            uow.commit()
        report.products += 1

    def _product_phase(
        self,
        context: _PhaseContext,
        owner_id: UUID,
        global_index: VariantIndex,
        descriptor: ProductDescriptor,
    ) -> None:
        context.enter(EnginePhase.PRODUCT_UPSERT)
        if not descriptor.name.strip():
            raise DescriptorError(f"Product without a name in {context.company}")

        metadata = descriptor.metadata
        desired: dict[str, object] = {
            "base_price": metadata.base_price,
            "suitable_for": list(metadata.suitable_for),
            "style": list(metadata.style),
        }
        main_image_id = self._register_asset(context, descriptor.main_image_path, owner_id)
        if main_image_id is not None:
            desired["main_image_id"] = main_image_id
        product = context.reconciler.upsert(
            Product, {"owner_id": owner_id, "name": descriptor.name}, desired
        ).entity

        context.enter(EnginePhase.PROPERTY_LINKS)
        global_ids: list[UUID] = []
        scoped_ids: list[UUID] = []
        for prop_meta in metadata.properties:
            self._link_property(context, product, prop_meta, global_ids, scoped_ids)

        index = build_product_index(
            global_index,
            context.reconciler.repository,
            global_property_ids=global_ids,
            product_property_ids=scoped_ids,
        )

        context.enter(EnginePhase.SKUS)
        for sku in descriptor.skus:
            self._reconcile_sku(context, product, sku, index)
        context.enter(EnginePhase.DONE)

    def _link_property(
        self,
        context: _PhaseContext,
        product: Product,
        meta: ProductPropertyMetadata,
        global_ids: list[UUID],
        scoped_ids: list[UUID],
    ) -> None:
        repository = context.reconciler.repository
        global_prop = repository.find(
            Property, {"owner_id": product.owner_id, "product_id": None, "name": meta.name}
        )
        if global_prop is not None:
            global_ids.append(global_prop.id)

        target = global_prop
        if meta.variants:
            target = self._reconcile_scoped_property(context, product, meta, global_prop)
            scoped_ids.append(target.id)
        elif global_prop is None:
            self._warn(
                context,
                f"Property {meta.name!r} referenced by product {product.name!r} not found, "
                "skipping",
            )
            return

        hotspot: dict[str, object] = {}
        if meta.hotspot_x is not None:
            hotspot["hotspot_x"] = meta.hotspot_x
        if meta.hotspot_y is not None:
            hotspot["hotspot_y"] = meta.hotspot_y
        context.reconciler.upsert(
            ProductProperty, {"product_id": product.id, "property_id": target.id}, hotspot
        )
        log.info(
            "Linked property %s to product %s with hotspot (%s, %s)",
            meta.name,
            product.name,
            meta.hotspot_x,
            meta.hotspot_y,
        )

    def _reconcile_scoped_property(
        self,
        context: _PhaseContext,
        product: Product,
        meta: ProductPropertyMetadata,
        global_prop: Property | None,
    ) -> Property:
        """Upsert the product's own copy of a property carrying its price overrides.

        The copy mirrors every variant of the global property so the product
        exposes the full choice; unlisted variants get a zero adjustment.
        """

        reconciler = context.reconciler
        scoped = reconciler.upsert(
            Property, {"owner_id": product.owner_id, "product_id": product.id, "name": meta.name}
        ).entity

        overrides = {variant.name: variant.price_adjustment for variant in meta.variants}
        if global_prop is None:
            variants: list[tuple[str, UUID | None]] = [(name, None) for name in overrides]
        else:
            global_variants = reconciler.repository.variants_of([global_prop.id])
            known = {variant.name for variant in global_variants}
            for name in overrides:
                if name not in known:
                    self._warn(
                        context,
                        f"Variant {name!r} not found for property {meta.name!r}, "
                        "skipping price adjustment",
                    )
            variants = [(variant.name, variant.image_id) for variant in global_variants]

        for name, image_id in variants:
            adjustment = overrides.get(name, Decimal(0))
            desired: dict[str, object] = {"price_adjustment": adjustment}
            if image_id is not None:
                desired["image_id"] = image_id
            reconciler.upsert(PropertyVariant, {"property_id": scoped.id, "name": name}, desired)
            log.debug(
                "Price adjustment for %s/%s on %s is %s", meta.name, name, product.name, adjustment
            )
        return scoped

    # SKU level ---------------------------------------------------------------------

    def _reconcile_sku(
        self,
        context: _PhaseContext,
        product: Product,
        descriptor: SkuDescriptor,
        index: VariantIndex,
    ) -> None:
        try:
            with context.uow.savepoint():
                self._sku_phase(context, product, descriptor, index)
        except ReconciliationError as exc:
            log.exception("SKU %s of %s failed", descriptor.code, product.name)
            context.report.failed_skus.append(
                Failure(
                    company=context.company,
                    entity=descriptor.code,
                    phase=context.phase,
                    reason=str(exc),
                )
            )
            return
        context.report.skus += 1

    def _sku_phase(
        self,
        context: _PhaseContext,
        product: Product,
        descriptor: SkuDescriptor,
        index: VariantIndex,
    ) -> None:
        context.enter(EnginePhase.SKUS)
        code = descriptor.code.strip()
        if not code:
            raise DescriptorError(f"Empty SKU code for product {product.name}")

        resolution = self.resolver.resolve(code, index)
        context.report.warnings.extend(resolution.warnings)
        desired: dict[str, object] = {"price": self.pricing.price(product.base_price, resolution)}
        image_id = self._register_asset(context, descriptor.asset_path, product.owner_id)
        if image_id is not None:
            desired["image_id"] = image_id
        sku = context.reconciler.upsert(
            ProductSku, {"product_id": product.id, "sku_code": code}, desired
        ).entity
        log.info(
            "SKU %s: price %s, variants %s",
            code,
            sku.price,
            ", ".join(resolution.matched_tokens) or "none",
        )

        context.enter(EnginePhase.JOINS)
        for variant_id in resolution.variant_ids:
            context.reconciler.upsert(
                ProductSkuPropertyVariant,
                {"product_sku_id": sku.id, "property_variant_id": variant_id},
            )

    # Helpers -----------------------------------------------------------------------

    def _register_asset(
        self, context: _PhaseContext, path: Path | None, owner_id: UUID
    ) -> UUID | None:
        if path is None:
            return None
        try:
            with context.uow.savepoint():
                return self.registrar.register(path, owner_id, reconciler=context.reconciler)
        except AssetRegistrationError as exc:
            log.error("%s: %s", context.company, exc)  # noqa: TRY400
            context.report.asset_failures.append(str(exc))
            return None

    def _context(
        self, company: str, uow: CatalogUnitOfWork, report: ReconciliationReport
    ) -> _PhaseContext:
        reconciler = EntityReconciler(uow.repositories.catalog, observer=report.record)
        return _PhaseContext(company=company, uow=uow, reconciler=reconciler, report=report)

    def _warn(self, context: _PhaseContext, message: str) -> None:
        log.warning(message)
        context.report.warnings.append(message)

    def _stop_requested(self, report: ReconciliationReport) -> bool:
        if self.stop_event is not None and self.stop_event.is_set():
            log.info("Stop requested, ending run after the last completed product")
            report.cancelled = True
        return report.cancelled
