"""Ports for persisting catalog entities."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence
    from uuid import UUID

    from catalogsync.domain.model import Property, PropertyVariant, Reconcilable


@runtime_checkable
class CatalogRepository(Protocol):
    """Natural-key access to every reconciled entity kind.

    ``insert_if_absent`` must be a conditional insert guarded by the store's
    uniqueness constraint for the entity's natural key: it returns ``False``
    (and leaves the store untouched) when another row already holds the key.
    """

    def find[TEntity: Reconcilable](
        self, kind: type[TEntity], key: Mapping[str, object]
    ) -> TEntity | None: ...

    def insert_if_absent(self, entity: Reconcilable) -> bool: ...

    def global_properties(self, owner_id: UUID) -> Sequence[Property]: ...

    def variants_of(self, property_ids: Iterable[UUID]) -> Sequence[PropertyVariant]: ...
