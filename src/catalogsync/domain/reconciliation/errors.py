"""Reconciliation error definitions."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from catalogsync.domain.model import EntityKind


class ReconciliationError(RuntimeError):
    """Raised when one entity cannot be reconciled; siblings may still proceed."""


class UpsertConflictError(ReconciliationError):
    """Raised when a conditional insert lost to a row that cannot be read back."""

    def __init__(self, kind: EntityKind, key: tuple[object, ...]) -> None:
        super().__init__(f"Conflicting {kind} for natural key {key!r} could not be loaded")
        self.kind = kind
        self.key = key


class AssetRegistrationError(ReconciliationError):
    """Raised when an asset file cannot be read, uploaded or recorded."""

    def __init__(self, message: str, *, path: Path) -> None:
        super().__init__(message)
        self.path = path


class DescriptorError(ReconciliationError):
    """Raised when descriptor content is unusable beyond what defaults can repair."""
