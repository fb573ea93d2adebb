"""Reconciliation core converging the catalog store towards descriptors.

Layered flow per company:
1) upsert the owner and register its branding assets
2) upsert global properties and variants, build the variant index
3) per product: upsert the product, link its properties (creating
   product-scoped copies for price overrides), derive SKUs from their codes
4) link every SKU to the variants its code resolved to
"""

from __future__ import annotations

from .assets import MultimediaRegistrar, file_type_for
from .engine import (
    DEFAULT_OWNER_COMPANY,
    DEFAULT_OWNER_EMAIL,
    EnginePhase,
    ReconciliationEngine,
    default_owner_metadata,
)
from .errors import (
    AssetRegistrationError,
    DescriptorError,
    ReconciliationError,
    UpsertConflictError,
)
from .pricing import PriceCalculator
from .report import Failure, OutcomeCounts, ReconciliationReport
from .sku_codes import SKU_TOKEN_DELIMITER, SkuCodeResolver, SkuResolution, VariantMatch
from .upsert import EntityReconciler, UpsertObserver, UpsertOutcome, UpsertResult
from .variant_index import VariantEntry, VariantIndex, build_global_index, build_product_index

__all__ = [
    "DEFAULT_OWNER_COMPANY",
    "DEFAULT_OWNER_EMAIL",
    "SKU_TOKEN_DELIMITER",
    "AssetRegistrationError",
    "DescriptorError",
    "EnginePhase",
    "EntityReconciler",
    "Failure",
    "MultimediaRegistrar",
    "OutcomeCounts",
    "PriceCalculator",
    "ReconciliationEngine",
    "ReconciliationError",
    "ReconciliationReport",
    "SkuCodeResolver",
    "SkuResolution",
    "UpsertConflictError",
    "UpsertObserver",
    "UpsertOutcome",
    "UpsertResult",
    "VariantEntry",
    "VariantIndex",
    "VariantMatch",
    "build_global_index",
    "build_product_index",
    "default_owner_metadata",
    "file_type_for",
]
