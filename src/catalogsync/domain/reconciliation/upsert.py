"""Idempotent create-or-update against a natural-key store.

The reconciler converges one stored row towards a desired attribute set:

1. read the row by natural key (the steady-state fast path),
2. if absent, attempt a conditional insert guarded by the store's
   uniqueness constraint,
3. if the insert lost to a concurrent writer, read the winner back and
   continue on the update path.

Only attributes listed in the kind's ``MUTABLE_FIELDS`` are written on the
update path. Nothing is ever deleted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from catalogsync.domain.reconciliation.errors import UpsertConflictError

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from catalogsync.domain.model import Reconcilable
    from catalogsync.domain.ports.persistence import CatalogRepository

log = getLogger(__name__)


class UpsertOutcome(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


@dataclass(slots=True)
class UpsertResult[TEntity: Reconcilable]:
    entity: TEntity
    outcome: UpsertOutcome
    changed_fields: tuple[str, ...] = field(default=())

    @property
    def was_created(self) -> bool:
        return self.outcome is UpsertOutcome.CREATED


type UpsertObserver = Callable[[Reconcilable, UpsertOutcome], None]


@dataclass(slots=True)
class EntityReconciler:
    """Generic natural-key upsert primitive over a :class:`CatalogRepository`."""

    repository: CatalogRepository
    observer: UpsertObserver | None = None

    def upsert[TEntity: Reconcilable](
        self,
        kind: type[TEntity],
        key: Mapping[str, object],
        desired: Mapping[str, object] | None = None,
    ) -> UpsertResult[TEntity]:
        """Find-or-create ``kind`` by ``key`` and converge its mutable attributes.

        ``key`` must name exactly the kind's ``NATURAL_KEY`` attributes. Keys in
        ``desired`` outside ``MUTABLE_FIELDS`` only take effect on creation;
        attributes omitted from ``desired`` are left untouched on update.
        """

        if set(key) != set(kind.NATURAL_KEY):
            raise ValueError(
                f"{kind.__name__} natural key is {kind.NATURAL_KEY!r}, got {tuple(key)!r}"
            )
        attributes = dict(desired or {})

        existing = self.repository.find(kind, key)
        if existing is None:
            candidate = kind(**key, **attributes)
            if self.repository.insert_if_absent(candidate):
                log.debug("Created %s %r", kind.ENTITY_KIND, candidate.natural_key())
                return self._notify(UpsertResult(candidate, UpsertOutcome.CREATED))
            existing = self.repository.find(kind, key)
            if existing is None:
                raise UpsertConflictError(kind.ENTITY_KIND, tuple(key.values()))
            log.info(
                "Concurrent insert of %s %r detected, updating instead",
                kind.ENTITY_KIND,
                tuple(key.values()),
            )

        changed = _apply_mutable(existing, attributes)
        outcome = UpsertOutcome.UPDATED if changed else UpsertOutcome.UNCHANGED
        return self._notify(UpsertResult(existing, outcome, changed))

    def _notify[TEntity: Reconcilable](
        self, result: UpsertResult[TEntity]
    ) -> UpsertResult[TEntity]:
        if self.observer is not None:
            self.observer(result.entity, result.outcome)
        return result


def _apply_mutable(entity: Reconcilable, desired: Mapping[str, object]) -> tuple[str, ...]:
    changed: list[str] = []
    for name, value in desired.items():
        if name not in entity.MUTABLE_FIELDS:
            continue
        if getattr(entity, name) == value:
            continue
        setattr(entity, name, value)
        changed.append(name)
    return tuple(changed)
