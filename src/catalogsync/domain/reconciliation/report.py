"""Run summaries produced by the reconciliation engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from catalogsync.domain.reconciliation.upsert import UpsertOutcome

if TYPE_CHECKING:
    from catalogsync.domain.model import EntityKind, Reconcilable


@dataclass(slots=True)
class OutcomeCounts:
    created: int = 0
    updated: int = 0
    unchanged: int = 0

    def add(self, outcome: UpsertOutcome) -> None:
        if outcome is UpsertOutcome.CREATED:
            self.created += 1
        elif outcome is UpsertOutcome.UPDATED:
            self.updated += 1
        else:
            self.unchanged += 1


@dataclass(frozen=True, slots=True)
class Failure:
    """An entity the engine gave up on; its siblings were still processed."""

    company: str
    entity: str
    phase: str
    reason: str


@dataclass(slots=True)
class ReconciliationReport:
    companies: int = 0
    products: int = 0
    skus: int = 0
    counts: dict[EntityKind, OutcomeCounts] = field(default_factory=dict)
    failed_products: list[Failure] = field(default_factory=list)
    failed_skus: list[Failure] = field(default_factory=list)
    asset_failures: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    cancelled: bool = False

    def record(self, entity: Reconcilable, outcome: UpsertOutcome) -> None:
        """Upsert observer hook."""
        self.counts.setdefault(entity.entity_kind, OutcomeCounts()).add(outcome)

    def created(self, kind: EntityKind) -> int:
        counts = self.counts.get(kind)
        return counts.created if counts else 0

    @property
    def total_created(self) -> int:
        return sum(counts.created for counts in self.counts.values())

    @property
    def succeeded(self) -> bool:
        return not (self.failed_products or self.failed_skus or self.asset_failures)
