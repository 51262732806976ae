"""Unit tests for catalog storage."""

import json
import threading
import time
from datetime import datetime, timezone
from pathlib import Path

import pytest

from pricing.application.config.loader import dump_json_file
from pricing.domain.entities import PricingPreset, Product
from pricing.domain.exceptions import ConfigError, NotFoundError
from pricing.domain.value_objects import CachedPrice
from pricing.infrastructure import catalog_store
from pricing.infrastructure.catalog_store import (
    InMemoryCatalogStore,
    JsonCatalogStore,
    parse_catalog,
)


@pytest.fixture
def catalog_file(tmp_path: Path, stickers_preset: PricingPreset) -> Path:
    path = tmp_path / "catalog.json"
    path.write_text(
        json.dumps(
            {
                "presets": [
                    {
                        "key": stickers_preset.key,
                        "name": stickers_preset.name,
                        "model": stickers_preset.model,
                        "config": stickers_preset.config,
                    }
                ],
                "products": [
                    {"slug": "stickers", "name": "Stickers", "pricingPresetKey": "stickers_default",
                     "minPrice": 4200, "optionsConfig": None},
                    {"slug": "poster", "basePrice": 1500, "minPrice": None},
                ],
            }
        )
    )
    return path


class TestInMemoryCatalogStore:
    """Reads always attach the current preset."""

    def test_product_reads_attach_preset(self, store) -> None:
        product = store.get_product("stickers")

        assert product.pricing_preset is not None
        assert product.pricing_preset.key == "stickers_default"
        assert store.get_product("legacy-poster").pricing_preset is None
        assert store.get_product("nope") is None

    def test_saved_preset_visible_to_next_read(self, store, stickers_preset) -> None:
        store.save_preset(PricingPreset(key="stickers_default", model="QTY_TIERED", config={"tiers": []}))
        assert store.get_product("stickers").pricing_preset.config == {"tiers": []}

    def test_reads_are_detached_copies(self, store) -> None:
        store.get_preset("stickers_default").name = "changed"
        assert store.get_preset("stickers_default").name == "Stickers & Labels"

    def test_active_filters(self, store) -> None:
        assert "retired-labels" not in [p.slug for p in store.list_products()]
        assert "retired-labels" in [p.slug for p in store.list_products(active_only=False)]
        assert [p.slug for p in store.products_for_preset("stickers_default")] == ["stickers"]

    def test_save_min_price_unknown_product(self, store) -> None:
        with pytest.raises(NotFoundError):
            store.save_min_price("nope", CachedPrice(100))

    def test_presets_listed_by_key(self) -> None:
        store = InMemoryCatalogStore(
            presets=[
                PricingPreset(key="b", model="QTY_TIERED", config={}),
                PricingPreset(key="a", model="QTY_TIERED", config={}, is_active=False),
            ]
        )
        assert [p.key for p in store.list_presets()] == ["a", "b"]
        assert [p.key for p in store.list_presets(active_only=True)] == ["b"]

    def test_embedded_preset_is_stored_by_key(self, stickers_preset) -> None:
        store = InMemoryCatalogStore(presets=[stickers_preset], products=[Product(slug="s", pricing_preset=stickers_preset)])
        assert store.get_product("s").pricing_preset_key == "stickers_default"


class TestParseCatalog:
    def test_bare_integer_min_price(self, catalog_file) -> None:
        presets, products = parse_catalog(json.loads(catalog_file.read_text()))

        assert presets[0].key == "stickers_default"
        assert products[0].min_price == CachedPrice(4200)
        assert products[0].options_config == {}
        assert products[1].min_price is None

    def test_invalid_catalog(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            parse_catalog({"products": [{"slug": "x", "basePrice": -1}]})

        assert exc_info.value.error_type == "validation"
        assert exc_info.value.details[0]["field"] == "products[0].basePrice"


class TestJsonCatalogStore:
    """Writes go back to the catalog file."""

    def test_load(self, catalog_file) -> None:
        store = JsonCatalogStore(catalog_file)
        assert store.get_product("stickers").pricing_preset.model == "QTY_TIERED"

    def test_min_price_persisted(self, catalog_file) -> None:
        refreshed = datetime(2026, 3, 1, tzinfo=timezone.utc)
        JsonCatalogStore(catalog_file).save_min_price("stickers", CachedPrice(6000, refreshed))

        reloaded = JsonCatalogStore(catalog_file)
        assert reloaded.get_product("stickers").min_price == CachedPrice(6000, refreshed)

    def test_preset_persisted(self, catalog_file) -> None:
        store = JsonCatalogStore(catalog_file)
        preset = store.get_preset("stickers_default")
        preset.name = "Renamed"
        store.save_preset(preset)

        data = json.loads(catalog_file.read_text())
        assert data["presets"][0]["name"] == "Renamed"
        assert data["products"][0]["pricingPresetKey"] == "stickers_default"

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(ConfigError) as exc_info:
            JsonCatalogStore(tmp_path / "missing.json")
        assert exc_info.value.error_type == "file_not_found"

    def test_malformed_json(self, tmp_path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError) as exc_info:
            JsonCatalogStore(path)
        assert exc_info.value.error_type == "json_parse"

    def test_concurrent_writes_reach_disk_in_order(self, catalog_file, monkeypatch) -> None:
        store = JsonCatalogStore(catalog_file)
        writer = threading.Thread(
            target=store.save_min_price, args=("stickers", CachedPrice(4242))
        )
        calls = []

        def slow_dump(path, data) -> None:
            calls.append(path)
            if len(calls) == 1:
                # The second save starts while the first is still writing
                writer.start()
                time.sleep(0.2)
            dump_json_file(path, data)

        monkeypatch.setattr(catalog_store, "dump_json_file", slow_dump)

        preset = store.get_preset("stickers_default")
        preset.name = "Renamed"
        store.save_preset(preset)
        writer.join(timeout=5)

        reloaded = JsonCatalogStore(catalog_file)
        assert reloaded.get_preset("stickers_default").name == "Renamed"
        assert reloaded.get_product("stickers").min_price == CachedPrice(4242)
