from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

from catalogsync.domain.reconciliation.sku_codes import SkuCodeResolver
from catalogsync.domain.reconciliation.variant_index import VariantEntry, VariantIndex

COLOR_ID = uuid4()
SIZE_ID = uuid4()


def _index() -> VariantIndex:
    return VariantIndex(
        [
            VariantEntry(name="RED", variant_id=uuid4(), property_id=COLOR_ID),
            VariantEntry(name="BLUE", variant_id=uuid4(), property_id=COLOR_ID),
            VariantEntry(
                name="M", variant_id=uuid4(), property_id=SIZE_ID, price_adjustment=Decimal(0)
            ),
        ]
    )


def test_prefix_is_skipped_up_to_first_known_variant() -> None:
    resolution = SkuCodeResolver().resolve("PRODUCT_LEMANSKA_01_RED_M", _index())

    assert resolution.prefix == ("PRODUCT", "LEMANSKA", "01")
    assert resolution.matched_tokens == ("RED", "M")
    assert resolution.unresolved == ()
    assert resolution.warnings == ()


def test_unknown_token_after_variant_sequence_is_reported() -> None:
    resolution = SkuCodeResolver().resolve("SHIRT_RED_XXL", _index())

    assert resolution.matched_tokens == ("RED",)
    assert resolution.unresolved == ("XXL",)
    assert len(resolution.warnings) == 1
    assert "XXL" in resolution.warnings[0]


def test_code_without_any_known_token_resolves_to_nothing() -> None:
    resolution = SkuCodeResolver().resolve("PRODUCT_X_ZZZ", _index())

    assert resolution.matches == ()
    assert resolution.variant_ids == ()
    assert resolution.prefix == ("PRODUCT", "X", "ZZZ")
    assert len(resolution.warnings) == 1


def test_empty_tokens_from_repeated_delimiters_are_ignored() -> None:
    resolver = SkuCodeResolver()

    assert resolver.tokenize("SHIRT__RED_") == ["SHIRT", "RED"]


def test_two_tokens_of_one_property_are_flagged() -> None:
    resolution = SkuCodeResolver().resolve("SHIRT_RED_BLUE", _index())

    assert resolution.matched_tokens == ("RED", "BLUE")
    assert any("same property" in warning for warning in resolution.warnings)


def test_repeated_token_yields_distinct_variant_ids() -> None:
    index = _index()
    resolution = SkuCodeResolver().resolve("SHIRT_RED_M_RED", index)

    red = index.lookup("RED")
    m = index.lookup("M")
    assert red is not None
    assert m is not None
    assert resolution.variant_ids == (red.variant_id, m.variant_id)


def test_custom_delimiter() -> None:
    resolution = SkuCodeResolver(delimiter="-").resolve("SHIRT-RED-M", _index())

    assert resolution.matched_tokens == ("RED", "M")
