"""Pytest configuration and shared fixtures for pricing tests."""

from __future__ import annotations

import copy
from typing import Any, Callable

import pytest

from pricing.application.factory import ServiceFactory, reset_factory
from pricing.domain.entities import PricingPreset, Product
from pricing.infrastructure.catalog_store import InMemoryCatalogStore
from pricing.settings import Settings


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "slow: tests that take a long time to run")


# =============================================================================
# Preset configs
# =============================================================================

STICKERS_CONFIG: dict[str, Any] = {
    "tiers": [
        {"minQty": 50, "unitPrice": 1.2},
        {"minQty": 100, "unitPrice": 0.95},
        {"minQty": 250, "unitPrice": 0.8},
        {"minQty": 500, "unitPrice": 0.65},
        {"minQty": 1000, "unitPrice": 0.5},
    ],
    "fileFee": 0,
    "minimumPrice": 25.0,
    "materials": [{"id": "holo", "name": "Holographic", "multiplier": 1.5}],
}

BANNER_CONFIG: dict[str, Any] = {
    "tiers": [
        {"upToSqft": 4, "rate": 2.5},
        {"upToSqft": 12, "rate": 2.0},
        {"upToSqft": 32, "rate": 1.5},
        {"upToSqft": 100, "rate": 1.2},
        {"upToSqft": 9999, "rate": 1.0},
    ],
    "fileFee": 5.0,
    "minimumPrice": 25.0,
    "materials": [
        {"id": "vinyl13", "name": "13oz Vinyl", "multiplier": 1.0},
        {"id": "mesh", "name": "Mesh", "multiplier": 1.5},
    ],
    "finishings": [
        {"id": "lamination", "name": "Lamination", "price": 0.5, "type": "per_sqft"},
        {"id": "hemming", "name": "Hemming", "price": 3.0, "type": "per_unit"},
    ],
    "addons": [{"id": "grommets", "name": "Grommets", "price": 2.0, "type": "per_unit"}],
}

CARDS_CONFIG: dict[str, Any] = {
    "sizes": [
        {
            "label": "3.5x2",
            "widthIn": 3.5,
            "heightIn": 2,
            "tiers": [
                {"qty": 250, "unitPrice": 0.12},
                {"qty": 500, "unitPrice": 0.08},
                {"qty": 1000, "unitPrice": 0.06},
            ],
        },
        {
            "label": "3.5x2 (Folded)",
            "tiers": [
                {"qty": 250, "unitPrice": 0.18},
                {"qty": 500, "unitPrice": 0.14},
            ],
        },
    ],
    "addons": [
        {"id": "rounded", "name": "Rounded Corners", "price": 0.02, "type": "per_unit"},
        {"id": "foil", "name": "Foil Stamping", "price": 15.0, "type": "flat"},
    ],
    "fileFee": 5.0,
    "minimumPrice": 15.0,
}


# =============================================================================
# Domain object builders
# =============================================================================


@pytest.fixture
def stickers_preset() -> PricingPreset:
    return PricingPreset(
        key="stickers_default",
        model="QTY_TIERED",
        config=copy.deepcopy(STICKERS_CONFIG),
        name="Stickers & Labels",
    )


@pytest.fixture
def banner_preset() -> PricingPreset:
    return PricingPreset(
        key="largeformat_roll_default",
        model="AREA_TIERED",
        config=copy.deepcopy(BANNER_CONFIG),
        name="Large Format Roll",
    )


@pytest.fixture
def cards_preset() -> PricingPreset:
    return PricingPreset(
        key="business_cards_default",
        model="QTY_OPTIONS",
        config=copy.deepcopy(CARDS_CONFIG),
        name="Business Cards",
    )


@pytest.fixture
def make_product() -> Callable[..., Product]:
    """Build a Product with an optional attached preset."""

    def build(slug: str = "test-product", preset: PricingPreset | None = None, **kwargs: Any) -> Product:
        return Product(
            slug=slug,
            pricing_preset=preset,
            pricing_preset_key=preset.key if preset is not None else None,
            **kwargs,
        )

    return build


# =============================================================================
# Catalog and services
# =============================================================================


@pytest.fixture
def store(
    stickers_preset: PricingPreset,
    banner_preset: PricingPreset,
    cards_preset: PricingPreset,
) -> InMemoryCatalogStore:
    """A small catalog covering all three pricing models."""
    products = [
        Product(slug="stickers", name="Die-cut Stickers", category="stickers",
                pricing_preset_key=stickers_preset.key),
        Product(slug="vinyl-banner", name="Vinyl Banner", category="banners",
                pricing_preset_key=banner_preset.key),
        Product(slug="business-cards", name="Business Cards", category="cards",
                pricing_preset_key=cards_preset.key),
        Product(slug="legacy-poster", name="Poster", category="posters", base_price=1500),
        Product(slug="retired-labels", name="Old Labels", category="stickers",
                is_active=False, pricing_preset_key=stickers_preset.key),
    ]
    return InMemoryCatalogStore(
        presets=[stickers_preset, banner_preset, cards_preset],
        products=products,
    )


@pytest.fixture
def factory(store: InMemoryCatalogStore) -> ServiceFactory:
    """A ServiceFactory wired to the test catalog."""
    return ServiceFactory(settings=Settings(catalog_path=None), store=store)


@pytest.fixture(autouse=True)
def _reset_default_factory():
    """Keep the module-level default factory from leaking across tests."""
    yield
    reset_factory()
