"""Unit tests for parsing stored configs into typed domain configs."""

import pytest

from pricing.application.config import parse_preset_config, parse_product_options
from pricing.domain.exceptions import ConfigError
from pricing.domain.value_objects import (
    AreaTieredConfig,
    ChargeType,
    QtyOptionsConfig,
    QtyTier,
    QtyTieredConfig,
)


class TestParsePresetConfig:
    """Raw JSON either becomes one typed variant or a ConfigError."""

    def test_area_tiered(self) -> None:
        config = parse_preset_config(
            "AREA_TIERED",
            {
                "tiers": [{"upToSqft": 4, "rate": 2.5}],
                "fileFee": 5,
                "materials": [{"id": "mesh", "multiplier": 1.5}],
                "finishings": [{"id": "lam", "price": 0.5, "type": "per_sqft"}],
            },
        )

        assert isinstance(config, AreaTieredConfig)
        assert config.tiers[0].up_to_sqft == 4
        assert config.file_fee == 5
        assert config.materials[0].multiplier == 1.5
        assert config.finishings[0].type is ChargeType.PER_SQFT

    def test_qty_tiered(self) -> None:
        config = parse_preset_config("QTY_TIERED", {"tiers": [{"minQty": 50, "unitPrice": 1.2}]})

        assert isinstance(config, QtyTieredConfig)
        assert config.tiers == (QtyTier(50, 1.2),)
        assert config.minimum_price == 0

    def test_qty_options(self) -> None:
        config = parse_preset_config(
            "QTY_OPTIONS",
            {"sizes": [{"label": "3.5x2", "widthIn": 3.5, "heightIn": 2, "tiers": [{"qty": 250, "unitPrice": 0.12}]}]},
        )

        assert isinstance(config, QtyOptionsConfig)
        size = config.find_size("3.5x2")
        assert size is not None
        assert size.matches(3.5, 2)

    def test_unknown_keys_are_ignored(self) -> None:
        config = parse_preset_config(
            "QTY_TIERED", {"tiers": [{"minQty": 1, "unitPrice": 1, "note": "x"}], "legacy": True}
        )
        assert isinstance(config, QtyTieredConfig)

    def test_missing_config_is_unquotable(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            parse_preset_config("QTY_TIERED", None, preset_key="stickers")

        assert exc_info.value.error_type == "unquotable"
        assert exc_info.value.preset_key == "stickers"

    def test_unknown_model(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            parse_preset_config("PER_HOUR", {})
        assert exc_info.value.error_type == "unknown_model"

    def test_invalid_config_carries_field_errors(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            parse_preset_config("AREA_TIERED", {"tiers": [{"upToSqft": -1, "rate": 2}]}, "banner")

        error = exc_info.value
        assert error.error_type == "invalid_config"
        assert error.details[0]["field"] == "tiers[0].upToSqft"
        assert "tiers[0].upToSqft" in error.message


class TestParseProductOptions:
    """Product-level overrides."""

    def test_empty_options(self) -> None:
        options = parse_product_options({})
        assert options.sizes == ()
        assert options.display_min_size is None

    def test_sizes_accept_label_or_id_and_min_qty(self) -> None:
        options = parse_product_options(
            {
                "sizes": [
                    {"id": "3.5x2", "tiers": [{"minQty": 100, "unitPrice": 0.2}]},
                    {"label": "2x2", "quantityChoices": [500, 250]},
                    {"name": "no label"},
                ]
            }
        )

        assert [s.label for s in options.sizes] == ["3.5x2", "2x2"]
        assert options.sizes[0].tiers == (QtyTier(100, 0.2),)
        assert options.sizes[1].tiers is None
        assert options.sizes[1].quantity_choices == (250, 500)

    def test_display_min_size_materials_and_addons(self) -> None:
        options = parse_product_options(
            {
                "displayMinSize": {"widthIn": 48, "heightIn": 96},
                "materials": [{"id": "mesh", "name": "Mesh", "multiplier": 1.2}],
                "addons": [{"id": "rounded", "price": 0.04}],
                "colors": ["red"],
            }
        )

        assert options.display_min_size == (48, 96)
        assert options.materials[0].id == "mesh"
        assert options.addons[0].price == 0.04

    def test_malformed_options(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            parse_product_options({"materials": [{"id": "mesh", "multiplier": -1}]}, "banner")
        assert exc_info.value.error_type == "invalid_product_options"

    def test_non_object_options(self) -> None:
        with pytest.raises(ConfigError):
            parse_product_options(["sizes"], "banner")

    def test_price_by_qty_keys_become_quantities(self) -> None:
        options = parse_product_options(
            {"sizes": [{"label": "3.5x2", "priceByQty": {"500": 4599.4, "250": 3000}}]}
        )
        assert options.sizes[0].price_by_qty == ((250, 3000), (500, 4599))

    @pytest.mark.parametrize("prices", [{"abc": 100}, {"0": 100}, {"100": 0}, {"100": "9"}, [100]])
    def test_malformed_price_by_qty(self, prices) -> None:
        with pytest.raises(ConfigError) as exc_info:
            parse_product_options({"sizes": [{"label": "3.5x2", "priceByQty": prices}]}, "cards")

        assert exc_info.value.error_type == "invalid_product_options"
        assert exc_info.value.details[0]["field"] == "sizes[0].priceByQty"
