"""SKU price derivation."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from catalogsync.domain.reconciliation.sku_codes import SkuResolution

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PriceCalculator:
    """``base price + sum of the adjustments of every matched token``.

    Adjustments come from the index built for the current product, i.e. from
    the values persisted during this run. Negative totals are kept as-is.
    """

    def price(self, base_price: Decimal | None, resolution: SkuResolution) -> Decimal:
        total = Decimal(0) if base_price is None else Decimal(base_price)
        for match in resolution.matches:
            total += match.entry.price_adjustment
        if total < 0:
            log.warning("SKU %r: derived price %s is negative", resolution.code, total)
        return total
