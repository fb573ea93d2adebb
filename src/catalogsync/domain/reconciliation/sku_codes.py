"""Resolution of SKU codes into the property variants they encode.

A SKU code is a delimiter-joined sequence of tokens: a product-name prefix
followed by variant names, e.g. ``PRODUCT_LEMANSKA_01_RED_M``. The prefix is
not compared with the product name. Instead the first token the variant index
recognizes starts the variant sequence; every token from there on is either
matched or reported as unresolved.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from uuid import UUID

    from catalogsync.domain.reconciliation.variant_index import VariantEntry, VariantIndex

log = getLogger(__name__)

SKU_TOKEN_DELIMITER: Final[str] = "_"


@dataclass(frozen=True, slots=True)
class VariantMatch:
    token: str
    entry: VariantEntry

    @property
    def variant_id(self) -> UUID:
        return self.entry.variant_id


@dataclass(frozen=True, slots=True)
class SkuResolution:
    code: str
    prefix: tuple[str, ...] = ()
    matches: tuple[VariantMatch, ...] = ()
    unresolved: tuple[str, ...] = ()
    warnings: tuple[str, ...] = field(default=())

    @property
    def matched_tokens(self) -> tuple[str, ...]:
        return tuple(match.token for match in self.matches)

    @property
    def variant_ids(self) -> tuple[UUID, ...]:
        """Distinct variant ids in first-seen order."""
        return tuple(dict.fromkeys(match.variant_id for match in self.matches))


@dataclass(frozen=True, slots=True)
class SkuCodeResolver:
    delimiter: str = SKU_TOKEN_DELIMITER

    def tokenize(self, code: str) -> list[str]:
        return [token for token in code.split(self.delimiter) if token]

    def resolve(self, code: str, index: VariantIndex) -> SkuResolution:
        tokens = self.tokenize(code)
        start = next((pos for pos, token in enumerate(tokens) if token in index), None)
        if start is None:
            message = f"SKU {code!r}: no token matches a known variant"
            log.warning(message)
            return SkuResolution(code=code, prefix=tuple(tokens), warnings=(message,))

        matches: list[VariantMatch] = []
        unresolved: list[str] = []
        warnings: list[str] = []
        for token in tokens[start:]:
            entry = index.lookup(token)
            if entry is None:
                message = f"SKU {code!r}: token {token!r} does not match a known variant"
                log.warning(message)
                warnings.append(message)
                unresolved.append(token)
                continue
            matches.append(VariantMatch(token=token, entry=entry))

        warnings.extend(_same_property_warnings(code, matches))
        return SkuResolution(
            code=code,
            prefix=tuple(tokens[:start]),
            matches=tuple(matches),
            unresolved=tuple(unresolved),
            warnings=tuple(warnings),
        )


def _same_property_warnings(code: str, matches: list[VariantMatch]) -> list[str]:
    tokens_by_property: dict[UUID, list[str]] = {}
    for match in matches:
        tokens_by_property.setdefault(match.entry.property_id, []).append(match.token)
    warnings: list[str] = []
    for tokens in tokens_by_property.values():
        if len(tokens) < 2:
            continue
        message = f"SKU {code!r}: tokens {', '.join(tokens)} select the same property"
        log.warning(message)
        warnings.append(message)
    return warnings
