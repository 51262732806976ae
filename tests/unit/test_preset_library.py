"""Unit tests for the bundled seed preset library."""

import json

import pytest

from pricing.application.config import validate_preset_config
from pricing.application.presets import PresetLibrary, PresetNotFoundError
from pricing.infrastructure.catalog_store import InMemoryCatalogStore


@pytest.fixture
def library() -> PresetLibrary:
    return PresetLibrary()


class TestPresetLibrary:
    """Tests for listing, loading and seeding bundled presets."""

    def test_lists_one_preset_per_model(self, library) -> None:
        keys = [key for key, _ in library.list_presets()]
        assert keys == ["largeformat_roll_default", "stickers_default", "business_cards_default"]

    @pytest.mark.parametrize("key", ["largeformat_roll_default", "stickers_default", "business_cards_default"])
    def test_seed_presets_are_valid(self, library, key) -> None:
        preset = library.load_preset(key)

        assert preset.key == key
        assert validate_preset_config(preset.model, preset.config).is_valid

    def test_unknown_preset(self, library) -> None:
        assert not library.preset_exists("nope")
        with pytest.raises(PresetNotFoundError):
            library.get_preset_json("nope")

    def test_init_writes_config(self, library, tmp_path) -> None:
        output = tmp_path / "stickers.json"
        library.init_preset("stickers_default", output)

        assert json.loads(output.read_text())["tiers"][0] == {"minQty": 50, "unitPrice": 1.2}

    def test_init_refuses_to_overwrite(self, library, tmp_path) -> None:
        output = tmp_path / "stickers.json"
        output.write_text("{}")

        with pytest.raises(FileExistsError):
            library.init_preset("stickers_default", output)
        library.init_preset("stickers_default", output, overwrite=True)
        assert "tiers" in json.loads(output.read_text())

    def test_seed_is_idempotent(self, library) -> None:
        store = InMemoryCatalogStore()

        assert len(library.seed(store)) == 3
        assert library.seed(store) == []
        assert store.get_preset("stickers_default").model == "QTY_TIERED"

    def test_seed_keeps_edited_presets(self, library, stickers_preset) -> None:
        store = InMemoryCatalogStore(presets=[stickers_preset])
        written = library.seed(store)

        assert "stickers_default" not in written
        assert store.get_preset("stickers_default").name == "Stickers & Labels"
