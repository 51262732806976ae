"""Unit tests for the QuoteEngine entry point."""

from dataclasses import replace

import pytest

from pricing.application.services import QuoteEngine, option_selects, quote_product
from pricing.domain.entities import AccessorySelection, PricingPreset, QuoteRequest
from pricing.domain.exceptions import ConfigError, ValidationError
from pricing.domain.value_objects import LineItemKind


@pytest.fixture
def engine() -> QuoteEngine:
    return QuoteEngine()


class TestRequestValidation:
    """Malformed requests are ValidationErrors, raised before any pricing."""

    @pytest.mark.parametrize("quantity", [0, -5, 2.5, True, "10"])
    def test_quantity_must_be_positive_integer(self, engine, make_product, stickers_preset, quantity) -> None:
        product = make_product("stickers", stickers_preset)
        with pytest.raises(ValidationError) as exc_info:
            engine.quote(product, QuoteRequest(slug="stickers", quantity=quantity))
        assert exc_info.value.field == "quantity"

    def test_dimensions_must_come_together(self, engine, make_product, banner_preset) -> None:
        product = make_product("banner", banner_preset)
        with pytest.raises(ValidationError) as exc_info:
            engine.quote(product, QuoteRequest(slug="banner", quantity=1, width_in=24))
        assert exc_info.value.field == "heightIn"

    def test_dimensions_must_be_positive(self, engine, make_product, banner_preset) -> None:
        product = make_product("banner", banner_preset)
        request = QuoteRequest(slug="banner", quantity=1, width_in=0, height_in=36)
        with pytest.raises(ValidationError) as exc_info:
            engine.quote(product, request)
        assert exc_info.value.message == "widthIn must be a number > 0"

    def test_dimensions_below_product_minimum(self, engine, make_product, banner_preset) -> None:
        product = make_product("banner", banner_preset, min_width_in=12, min_height_in=12)
        request = QuoteRequest(slug="banner", quantity=1, width_in=6, height_in=6)
        with pytest.raises(ValidationError) as exc_info:
            engine.quote(product, request)

        errors = exc_info.value.details["errors"]
        assert [e["field"] for e in errors] == ["widthIn", "heightIn"]
        assert 'at least 12"' in exc_info.value.message

    def test_accessory_quantity_must_be_positive(self, engine, make_product, cards_preset) -> None:
        product = make_product("cards", cards_preset)
        request = QuoteRequest(
            slug="cards", quantity=250, size_label="3.5x2",
            accessories=(AccessorySelection("foil", 0),),
        )
        with pytest.raises(ValidationError) as exc_info:
            engine.quote(product, request)
        assert exc_info.value.field == "accessories[0].quantity"

    @pytest.mark.parametrize("quantity", [10**400, 10_000_001])
    def test_oversized_quantity_is_rejected(self, engine, make_product, stickers_preset, quantity) -> None:
        product = make_product("stickers", stickers_preset)
        with pytest.raises(ValidationError) as exc_info:
            engine.quote(product, QuoteRequest(slug="stickers", quantity=quantity))

        assert exc_info.value.field == "quantity"
        assert exc_info.value.message == "quantity must be at most 10,000,000"

    def test_largest_quantity_still_quotes(self, engine, make_product, stickers_preset) -> None:
        product = make_product("stickers", stickers_preset)
        quote = engine.quote(product, QuoteRequest(slug="stickers", quantity=10_000_000))
        assert quote.total_cents == 500_000_000

    @pytest.mark.parametrize("width", [10**400, 10**300, 100_001])
    def test_oversized_dimension_is_rejected(self, engine, make_product, banner_preset, width) -> None:
        product = make_product("banner", banner_preset)
        request = QuoteRequest(slug="banner", quantity=1, width_in=width, height_in=36)
        with pytest.raises(ValidationError) as exc_info:
            engine.quote(product, request)
        assert exc_info.value.field == "widthIn"

    def test_oversized_accessory_quantity_is_rejected(self, engine, make_product, cards_preset) -> None:
        product = make_product("cards", cards_preset)
        request = QuoteRequest(
            slug="cards", quantity=250, size_label="3.5x2",
            accessories=(AccessorySelection("foil", 10**400),),
        )
        with pytest.raises(ValidationError) as exc_info:
            engine.quote(product, request)
        assert exc_info.value.field == "accessories[0].quantity"


class TestConfigErrors:
    """Products that cannot be quoted from stored data are ConfigErrors."""

    def test_product_without_preset(self, engine, make_product) -> None:
        with pytest.raises(ConfigError) as exc_info:
            engine.quote(make_product("poster"), QuoteRequest(slug="poster", quantity=1))
        assert exc_info.value.error_type == "unquotable"

    def test_unknown_model_is_never_defaulted(self, engine, make_product, stickers_preset) -> None:
        preset = replace(stickers_preset, model="PER_HOUR")
        with pytest.raises(ConfigError) as exc_info:
            engine.quote(make_product("x", preset), QuoteRequest(slug="x", quantity=100))
        assert exc_info.value.error_type == "unknown_model"

    def test_invalid_stored_config(self, engine, make_product) -> None:
        preset = PricingPreset(key="broken", model="QTY_TIERED", config={"tiers": []})
        with pytest.raises(ConfigError) as exc_info:
            engine.quote(make_product("x", preset), QuoteRequest(slug="x", quantity=100))

        assert exc_info.value.preset_key == "broken"
        assert exc_info.value.details[0]["field"] == "tiers"


class TestQuote:
    """End-to-end pricing through the engine."""

    def test_scenario_a(self, engine, make_product, stickers_preset) -> None:
        product = make_product("stickers", stickers_preset)

        quote = engine.quote(product, QuoteRequest(slug="stickers", quantity=60))
        assert quote.total_cents == 7200
        assert quote.unit_cents == 120
        assert quote.currency == "CAD"
        assert quote.template == "QTY_TIERED"

        small = engine.quote(product, QuoteRequest(slug="stickers", quantity=10))
        assert small.total_cents == 2500
        assert small.unit_cents == 250

    def test_scenario_b(self, engine, make_product, banner_preset) -> None:
        product = make_product("banner", banner_preset)
        quote = engine.quote(product, QuoteRequest(slug="banner", quantity=1, width_in=24, height_in=36))

        assert quote.total_cents == 2500
        assert quote.meta["tierUpToSqft"] == 12

    def test_scenario_c(self, engine, make_product, cards_preset) -> None:
        product = make_product("cards", cards_preset)
        quote = engine.quote(product, QuoteRequest(slug="cards", quantity=500, size_label="3.5x2"))

        assert quote.total_cents == round((0.08 * 500 + 5.0) * 100)
        assert quote.meta["sizeLabel"] == "3.5x2"

        with pytest.raises(ValidationError):
            engine.quote(product, QuoteRequest(slug="cards", quantity=500, size_label="4x6"))

    def test_floor_invariant(self, engine, make_product, stickers_preset) -> None:
        product = make_product("stickers", stickers_preset)
        for quantity in (1, 5, 20, 49, 50):
            quote = engine.quote(product, QuoteRequest(slug="stickers", quantity=quantity))
            assert quote.total_cents >= 2500

    def test_idempotent(self, engine, make_product, banner_preset) -> None:
        product = make_product("banner", banner_preset)
        request = QuoteRequest(
            slug="banner", quantity=3, width_in=30, height_in=40,
            material="Mesh", options={"lamination": True},
        )
        assert engine.quote(product, request) == engine.quote(product, request)

    def test_meta_echoes_request(self, engine, make_product, banner_preset) -> None:
        product = make_product("banner", banner_preset)
        request = QuoteRequest(slug="banner", quantity=2, width_in=24, height_in=36, material="13oz vinyl")
        meta = engine.quote(product, request).meta

        assert meta["slug"] == "banner"
        assert meta["presetKey"] == "largeformat_roll_default"
        assert meta["quantity"] == 2
        assert meta["widthIn"] == 24
        assert meta["material"] == "13oz vinyl"
        assert meta["materialMultiplier"] == 1.0

    def test_quote_product_wrapper(self, make_product, stickers_preset) -> None:
        product = make_product("stickers", stickers_preset)
        assert quote_product(product, QuoteRequest(slug="stickers", quantity=100)).total_cents == 9500


class TestSelections:
    """Materials, finishings, addons and accessories."""

    def test_material_by_case_insensitive_name(self, engine, make_product, stickers_preset) -> None:
        product = make_product("stickers", stickers_preset)
        quote = engine.quote(product, QuoteRequest(slug="stickers", quantity=100, material="holographic"))

        assert quote.total_cents == 14250
        assert quote.meta["materialMultiplier"] == 1.5

    def test_unknown_material_uses_base_rate(self, engine, make_product, stickers_preset) -> None:
        product = make_product("stickers", stickers_preset)
        quote = engine.quote(product, QuoteRequest(slug="stickers", quantity=100, material="gold"))
        assert quote.total_cents == 9500

    def test_product_materials_checked_first(self, engine, make_product, banner_preset) -> None:
        product = make_product(
            "banner", banner_preset,
            options_config={"materials": [{"id": "mesh", "multiplier": 2.0}]},
        )
        request = QuoteRequest(slug="banner", quantity=1, width_in=48, height_in=96, material="mesh")

        # 32 sqft x (1.5 x 2.0) + 5
        assert engine.quote(product, request).total_cents == 10100

    def test_finishing_selected_by_option_value(self, engine, make_product, banner_preset) -> None:
        product = make_product("banner", banner_preset)
        request = QuoteRequest(
            slug="banner", quantity=2, width_in=24, height_in=36, options={"finish": "lamination"}
        )
        quote = engine.quote(product, request)

        assert quote.total_cents == 3500
        assert quote.unit_cents == 1750
        finishing = [line for line in quote.breakdown if line.kind is LineItemKind.FINISHING]
        assert finishing[0].label == "Finishing: Lamination"
        assert finishing[0].amount_cents == 600

    def test_addon_selected_by_option_key(self, engine, make_product, cards_preset) -> None:
        product = make_product("cards", cards_preset)
        request = QuoteRequest(slug="cards", quantity=500, size_label="3.5x2", options={"rounded": True})

        # 40 base + 10 rounded + 5 file fee
        assert engine.quote(product, request).total_cents == 5500

    def test_product_addon_overrides_preset_addon(self, engine, make_product, cards_preset) -> None:
        product = make_product(
            "cards", cards_preset, options_config={"addons": [{"id": "rounded", "price": 0.04}]}
        )
        request = QuoteRequest(slug="cards", quantity=500, size_label="3.5x2", options={"rounded": "yes"})
        assert engine.quote(product, request).total_cents == 6500

    def test_accessories_default_to_order_quantity(self, engine, make_product, cards_preset) -> None:
        product = make_product("cards", cards_preset)
        request = QuoteRequest(
            slug="cards", quantity=500, size_label="3.5x2",
            accessories=(AccessorySelection("rounded"), AccessorySelection("foil")),
        )
        quote = engine.quote(product, request)

        # 40 + 0.02 x 500 + 15 flat + 5
        assert quote.total_cents == 7000
        assert [line.kind for line in quote.breakdown].count(LineItemKind.ACCESSORY) == 2

    def test_accessory_quantity_is_honoured(self, engine, make_product, cards_preset) -> None:
        product = make_product("cards", cards_preset)
        request = QuoteRequest(
            slug="cards", quantity=500, size_label="3.5x2",
            accessories=(AccessorySelection("rounded", 100),),
        )
        assert engine.quote(product, request).total_cents == 4700

    def test_unknown_accessory_is_ignored(self, engine, make_product, cards_preset) -> None:
        product = make_product("cards", cards_preset)
        request = QuoteRequest(
            slug="cards", quantity=500, size_label="3.5x2",
            accessories=(AccessorySelection("magnet"),),
        )
        assert engine.quote(product, request).total_cents == 4500


class TestProductSizes:
    """``optionsConfig.sizes`` narrows and reprices preset sizes."""

    def test_unlisted_preset_size_is_not_quotable(self, engine, make_product, cards_preset) -> None:
        product = make_product("cards", cards_preset, options_config={"sizes": [{"label": "3.5x2"}]})
        request = QuoteRequest(slug="cards", quantity=250, size_label="3.5x2 (Folded)")
        with pytest.raises(ValidationError):
            engine.quote(product, request)

    def test_product_tiers_replace_preset_tiers(self, engine, make_product, cards_preset) -> None:
        product = make_product(
            "cards", cards_preset,
            options_config={"sizes": [{"label": "3.5x2", "tiers": [{"qty": 100, "unitPrice": 0.2}]}]},
        )
        quote = engine.quote(product, QuoteRequest(slug="cards", quantity=100, size_label="3.5x2"))
        assert quote.total_cents == 2500

    def test_unresolvable_product_sizes_keep_preset_sizes(self, engine, make_product, cards_preset) -> None:
        product = make_product("cards", cards_preset, options_config={"sizes": [{"label": "A7"}]})
        quote = engine.quote(product, QuoteRequest(slug="cards", quantity=250, size_label="3.5x2 (Folded)"))
        assert quote.total_cents == 5000


class TestFixedQuantityTotals:
    """``priceByQty`` fixes the order total for exact quantities of a named size."""

    @pytest.fixture
    def product(self, make_product, cards_preset):
        return make_product(
            "cards", cards_preset,
            options_config={"sizes": [{"label": "3.5x2", "priceByQty": {"500": 4599, "100": 900}}]},
        )

    def test_exact_quantity_replaces_tier_and_file_fee(self, engine, product) -> None:
        quote = engine.quote(product, QuoteRequest(slug="cards", quantity=500, size_label="3.5x2"))

        assert quote.total_cents == 4599
        assert quote.unit_cents == 9
        assert quote.meta["exactQuantityPrice"] is True
        assert LineItemKind.FILE_FEE not in [line.kind for line in quote.breakdown]

    def test_extras_added_on_top(self, engine, product) -> None:
        request = QuoteRequest(
            slug="cards", quantity=500, size_label="3.5x2",
            options={"rounded": True}, accessories=(AccessorySelection("foil"),),
        )
        # .99 + 500 x /tmp/qe.pl.02 +  flat
        assert engine.quote(product, request).total_cents == 7099

    def test_minimum_floor_still_applies(self, engine, product) -> None:
        quote = engine.quote(product, QuoteRequest(slug="cards", quantity=100, size_label="3.5x2"))
        assert quote.total_cents == 1500

    def test_other_quantities_use_tiers(self, engine, product) -> None:
        # 250 x /tmp/qe.pl.12 +  file fee
        quote = engine.quote(product, QuoteRequest(slug="cards", quantity=250, size_label="3.5x2"))
        assert quote.total_cents == 3500

    def test_dimension_match_uses_tiers(self, engine, product) -> None:
        request = QuoteRequest(slug="cards", quantity=500, width_in=3.5, height_in=2)
        assert engine.quote(product, request).total_cents == 4500

    def test_product_only_size(self, engine, make_product, cards_preset) -> None:
        product = make_product(
            "cards", cards_preset,
            options_config={"sizes": [{"label": "Square", "priceByQty": {"250": 3000}}]},
        )
        quote = engine.quote(product, QuoteRequest(slug="cards", quantity=250, size_label="Square"))
        assert quote.total_cents == 3000

        with pytest.raises(ValidationError) as exc_info:
            engine.quote(product, QuoteRequest(slug="cards", quantity=100, size_label="Square"))
        assert exc_info.value.field == "quantity"
        assert exc_info.value.details == {"available": [250]}


class TestOptionSelects:
    def test_truthy_key(self) -> None:
        assert option_selects({"grommets": True}, "grommets")
        assert option_selects({"grommets": 1}, "grommets")
        assert option_selects({"grommets": "yes"}, "grommets")

    def test_falsy_key(self) -> None:
        for value in (False, 0, "", "no", "false", "None", "0"):
            assert not option_selects({"grommets": value}, "grommets")

    def test_string_value_names_id(self) -> None:
        assert option_selects({"finish": "lamination"}, "lamination")
        assert not option_selects({"finish": "matte"}, "lamination")
