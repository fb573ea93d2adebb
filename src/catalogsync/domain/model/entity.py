"""
Base building blocks:
identity and natural-key (reconciliation) semantics.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar
from uuid import UUID, uuid4

if TYPE_CHECKING:
    from catalogsync.domain.model.enums import EntityKind


def new_id() -> UUID:
    return uuid4()


@dataclass(eq=False, kw_only=True)
class Reconcilable:
    """Anything the reconciler can find by natural key and converge in place.

    ``NATURAL_KEY`` names the attributes that identify a row and are never
    rewritten once created. ``MUTABLE_FIELDS`` names the attributes an upsert
    may overwrite on an existing row; everything else is creation-only.
    """

    # class-level contract; subclasses must override
    ENTITY_KIND: ClassVar[EntityKind]
    NATURAL_KEY: ClassVar[tuple[str, ...]]
    MUTABLE_FIELDS: ClassVar[frozenset[str]] = frozenset()

    @property
    def entity_kind(self) -> EntityKind:
        return self.ENTITY_KIND

    def natural_key(self) -> tuple[object, ...]:
        return tuple(getattr(self, name) for name in self.NATURAL_KEY)


@dataclass(eq=False, kw_only=True)
class Entity(Reconcilable):
    """Internal identity exists immediately in the domain."""

    id: UUID = field(default_factory=new_id)
