"""Ports for reading catalog descriptors."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable

    from catalogsync.domain.descriptor import CompanyDescriptor


@runtime_checkable
class CatalogSource(Protocol):
    """Callable port yielding one descriptor per company, in a stable order."""

    def __call__(self) -> Iterable[CompanyDescriptor]: ...


__all__ = ["CatalogSource"]
