"""Name-keyed lookup of persisted property variants for SKU resolution.

The index is transient: it is rebuilt from the store for every run and passed
explicitly to whoever needs it. A product-level index is derived from the
owner's global index by copying it and overlaying the product's entries, so a
product-scoped variant shadows a global variant of the same name.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from uuid import UUID

    from catalogsync.domain.model import PropertyVariant
    from catalogsync.domain.ports.persistence import CatalogRepository

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class VariantEntry:
    name: str
    variant_id: UUID
    property_id: UUID
    price_adjustment: Decimal = Decimal(0)
    product_scoped: bool = False

    @classmethod
    def from_variant(
        cls, variant: PropertyVariant, *, product_scoped: bool = False
    ) -> VariantEntry:
        adjustment = variant.price_adjustment
        return cls(
            name=variant.name,
            variant_id=variant.id,
            property_id=variant.property_id,
            price_adjustment=Decimal(0) if adjustment is None else Decimal(adjustment),
            product_scoped=product_scoped,
        )


class VariantIndex:
    """Map of variant name to the variant a SKU token should resolve to."""

    __slots__ = ("_entries",)

    def __init__(self, entries: Iterable[VariantEntry] = ()) -> None:
        self._entries: dict[str, VariantEntry] = {}
        self.extend(entries)

    def extend(self, entries: Iterable[VariantEntry]) -> None:
        """Insert ``entries`` in order; a later entry replaces an earlier one of the same name."""

        for entry in entries:
            previous = self._entries.get(entry.name)
            if previous is not None and previous.variant_id != entry.variant_id:
                log.debug(
                    "Variant name %r now resolves to %s (was %s)",
                    entry.name,
                    entry.variant_id,
                    previous.variant_id,
                )
            self._entries[entry.name] = entry

    def scoped(self, entries: Iterable[VariantEntry]) -> VariantIndex:
        """Return a new index holding this index's entries overlaid with ``entries``."""

        derived = VariantIndex()
        derived._entries = dict(self._entries)  # noqa: SLF001
        derived.extend(entries)
        return derived

    def lookup(self, token: str) -> VariantEntry | None:
        return self._entries.get(token)

    def __contains__(self, token: object) -> bool:
        return token in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[VariantEntry]:
        return iter(self._entries.values())


def build_global_index(repository: CatalogRepository, owner_id: UUID) -> VariantIndex:
    """Index every variant of every global property of ``owner_id``."""

    property_ids = [prop.id for prop in repository.global_properties(owner_id)]
    variants = repository.variants_of(property_ids) if property_ids else ()
    index = VariantIndex(VariantEntry.from_variant(variant) for variant in variants)
    log.debug("Global variant index for owner %s holds %d names", owner_id, len(index))
    return index


def build_product_index(
    global_index: VariantIndex,
    repository: CatalogRepository,
    *,
    global_property_ids: Iterable[UUID] = (),
    product_property_ids: Iterable[UUID] = (),
) -> VariantIndex:
    """Derive the index for one product from the owner's global index.

    Variants of global properties referenced by the product are re-read so the
    product sees the adjustments persisted right now; variants of
    product-scoped properties are inserted last and win on name clashes.
    """

    referenced_global = list(dict.fromkeys(global_property_ids))
    product_scoped = list(dict.fromkeys(product_property_ids))
    entries: list[VariantEntry] = []
    if referenced_global:
        entries.extend(
            VariantEntry.from_variant(variant)
            for variant in repository.variants_of(referenced_global)
        )
    if product_scoped:
        entries.extend(
            VariantEntry.from_variant(variant, product_scoped=True)
            for variant in repository.variants_of(product_scoped)
        )
    return global_index.scoped(entries)
