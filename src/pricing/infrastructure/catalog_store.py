"""Catalog storage implementing the product and preset repositories.

``InMemoryCatalogStore`` backs tests and the seeded default app.
``JsonCatalogStore`` loads a catalog JSON file and writes preset edits and
refreshed min-price cache entries back to it.

Catalog file format (camelCase, money in integer cents)::

    {
      "presets": [{"key": "...", "name": "...", "model": "QTY_TIERED",
                   "config": {...}, "isActive": true}],
      "products": [{"slug": "...", "name": "...", "category": "...",
                    "basePrice": 0, "pricingPresetKey": "...",
                    "minPrice": {"cents": 2500, "refreshedAt": "..."}}]
    }
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from pricing.application.config.loader import (
    dump_json_file,
    extract_validation_errors,
    format_validation_error_message,
    load_json_file,
)
from pricing.domain.entities import PricingPreset, Product
from pricing.domain.exceptions import ConfigError, NotFoundError
from pricing.domain.value_objects import CachedPrice, PricingUnit

logger = logging.getLogger(__name__)


class InMemoryCatalogStore:
    """Thread-safe in-memory product and preset storage.

    Reads take a short lock. Writes are also serialized with each other, so
    a write-through subclass persists them in the order they happened.

    Products are stored with a preset key only. Every read attaches the
    current preset, so a quote always sees one consistent preset snapshot
    and a saved preset is visible to the next read.
    """

    def __init__(
        self,
        presets: Iterable[PricingPreset] = (),
        products: Iterable[Product] = (),
    ) -> None:
        self._lock = threading.Lock()
        self._write_lock = threading.RLock()
        self._presets: dict[str, PricingPreset] = {}
        self._products: dict[str, Product] = {}
        for preset in presets:
            self._presets[preset.key] = replace(preset)
        for product in products:
            self._products[product.slug] = self._detach(product)

    @staticmethod
    def _detach(product: Product) -> Product:
        key = product.pricing_preset_key
        if key is None and product.pricing_preset is not None:
            key = product.pricing_preset.key
        return replace(product, pricing_preset_key=key, pricing_preset=None)

    def _attach(self, product: Product) -> Product:
        preset = None
        if product.pricing_preset_key is not None:
            stored = self._presets.get(product.pricing_preset_key)
            preset = replace(stored) if stored is not None else None
        return replace(product, pricing_preset=preset)

    # -- ProductRepository -------------------------------------------------

    def get_product(self, slug: str) -> Product | None:
        with self._lock:
            product = self._products.get(slug)
            return self._attach(product) if product is not None else None

    def list_products(self, active_only: bool = True) -> list[Product]:
        with self._lock:
            return [
                self._attach(p)
                for p in self._products.values()
                if p.is_active or not active_only
            ]

    def products_for_preset(self, preset_key: str, active_only: bool = True) -> list[Product]:
        with self._lock:
            return [
                self._attach(p)
                for p in self._products.values()
                if p.pricing_preset_key == preset_key and (p.is_active or not active_only)
            ]

    def save_min_price(self, slug: str, price: CachedPrice) -> None:
        with self._write_lock:
            with self._lock:
                product = self._products.get(slug)
                if product is None:
                    raise NotFoundError("Product not found", key=slug)
                self._products[slug] = replace(product, min_price=price)
            self._persist()

    def save_product(self, product: Product) -> None:
        with self._write_lock:
            with self._lock:
                self._products[product.slug] = self._detach(product)
            self._persist()

    # -- PresetRepository --------------------------------------------------

    def get_preset(self, key: str) -> PricingPreset | None:
        with self._lock:
            preset = self._presets.get(key)
            return replace(preset) if preset is not None else None

    def list_presets(self, active_only: bool = False) -> list[PricingPreset]:
        with self._lock:
            return [
                replace(p)
                for key, p in sorted(self._presets.items())
                if p.is_active or not active_only
            ]

    def save_preset(self, preset: PricingPreset) -> None:
        with self._write_lock:
            with self._lock:
                self._presets[preset.key] = replace(preset)
            self._persist()

    def _persist(self) -> None:
        """Hook for stores that write through to disk."""

    def snapshot(self) -> tuple[list[PricingPreset], list[Product]]:
        """Return detached copies of all presets and products."""
        with self._lock:
            return (
                [replace(p) for _, p in sorted(self._presets.items())],
                [replace(p) for p in self._products.values()],
            )


# =============================================================================
# Catalog file format
# =============================================================================


class _RecordSchema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class CachedPriceRecord(_RecordSchema):
    cents: int = Field(..., ge=0)
    refreshed_at: datetime | None = None


class PresetRecord(_RecordSchema):
    key: str = Field(..., min_length=1)
    name: str = ""
    model: str
    config: Any = None
    is_active: bool = True


class ProductRecord(_RecordSchema):
    slug: str = Field(..., min_length=1)
    name: str = ""
    category: str | None = None
    is_active: bool = True
    base_price: int = Field(default=0, ge=0)
    pricing_unit: PricingUnit = PricingUnit.PER_PIECE
    display_from_price: int | None = None
    min_price: CachedPriceRecord | None = None
    min_width_in: float | None = None
    min_height_in: float | None = None
    options_config: dict[str, Any] = Field(default_factory=dict)
    pricing_preset_key: str | None = None

    @field_validator("min_price", mode="before")
    @classmethod
    def _bare_cents(cls, value: Any) -> Any:
        # A bare integer is a cache entry with no timestamp
        if isinstance(value, int) and not isinstance(value, bool):
            return {"cents": value}
        return value

    @field_validator("options_config", mode="before")
    @classmethod
    def _null_options(cls, value: Any) -> Any:
        return {} if value is None else value


class CatalogFile(_RecordSchema):
    presets: list[PresetRecord] = Field(default_factory=list)
    products: list[ProductRecord] = Field(default_factory=list)


def preset_from_record(record: PresetRecord) -> PricingPreset:
    return PricingPreset(
        key=record.key,
        model=record.model,
        config=record.config,
        name=record.name,
        is_active=record.is_active,
    )


def product_from_record(record: ProductRecord) -> Product:
    min_price = None
    if record.min_price is not None:
        min_price = CachedPrice(record.min_price.cents, record.min_price.refreshed_at)
    return Product(
        slug=record.slug,
        name=record.name,
        category=record.category,
        is_active=record.is_active,
        base_price=record.base_price,
        pricing_unit=record.pricing_unit,
        display_from_price=record.display_from_price,
        min_price=min_price,
        min_width_in=record.min_width_in,
        min_height_in=record.min_height_in,
        options_config=record.options_config,
        pricing_preset_key=record.pricing_preset_key,
    )


def preset_to_dict(preset: PricingPreset) -> dict[str, Any]:
    return {
        "key": preset.key,
        "name": preset.name,
        "model": preset.model,
        "config": preset.config,
        "isActive": preset.is_active,
    }


def product_to_dict(product: Product) -> dict[str, Any]:
    data: dict[str, Any] = {
        "slug": product.slug,
        "name": product.name,
        "category": product.category,
        "isActive": product.is_active,
        "basePrice": product.base_price,
        "pricingUnit": product.pricing_unit.value,
        "displayFromPrice": product.display_from_price,
        "minPrice": None,
        "minWidthIn": product.min_width_in,
        "minHeightIn": product.min_height_in,
        "optionsConfig": product.options_config,
        "pricingPresetKey": product.pricing_preset_key,
    }
    if product.min_price is not None:
        refreshed = product.min_price.refreshed_at
        data["minPrice"] = {
            "cents": product.min_price.cents,
            "refreshedAt": refreshed.isoformat() if refreshed else None,
        }
    return data


def parse_catalog(data: Any, path: Path | None = None) -> tuple[list[PricingPreset], list[Product]]:
    """Validate a catalog document.

    Raises:
        ConfigError: If the document does not match the catalog format.
    """
    try:
        catalog = CatalogFile.model_validate(data)
    except PydanticValidationError as e:
        details = extract_validation_errors(e)
        raise ConfigError(
            message=format_validation_error_message(details, heading="Invalid catalog file:"),
            error_type="validation",
            path=path,
            details=details,
        )
    return (
        [preset_from_record(r) for r in catalog.presets],
        [product_from_record(r) for r in catalog.products],
    )


class JsonCatalogStore(InMemoryCatalogStore):
    """Catalog store backed by a JSON file.

    Every write rewrites the whole file. Suitable for the CLI and small
    deployments, not for concurrent writers in several processes.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        presets, products = parse_catalog(load_json_file(path), path)
        super().__init__(presets, products)
        logger.debug(f"Loaded catalog {path}: {len(presets)} presets, {len(products)} products")

    def _persist(self) -> None:
        presets, products = self.snapshot()
        dump_json_file(
            self.path,
            {
                "presets": [preset_to_dict(p) for p in presets],
                "products": [product_to_dict(p) for p in products],
            },
        )
