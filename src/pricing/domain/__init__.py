"""Domain layer - pricing entities, value objects and math."""

from .entities import AccessorySelection, LineItem, PricingPreset, Product, Quote, QuoteRequest
from .exceptions import ConfigError, NotFoundError, PricingError, ValidationError
from .value_objects import (
    AreaTier,
    AreaTieredConfig,
    CachedPrice,
    Charge,
    ChargeType,
    LineItemKind,
    MaterialOption,
    PresetConfig,
    PresetTerms,
    PricingModel,
    PricingUnit,
    ProductOptions,
    QtyOptionsConfig,
    QtyTier,
    QtyTieredConfig,
    SizeOption,
    SizeOverride,
)

__all__ = [
    "AccessorySelection",
    "AreaTier",
    "AreaTieredConfig",
    "CachedPrice",
    "Charge",
    "ChargeType",
    "ConfigError",
    "LineItem",
    "LineItemKind",
    "MaterialOption",
    "NotFoundError",
    "PresetConfig",
    "PresetTerms",
    "PricingError",
    "PricingModel",
    "PricingPreset",
    "PricingUnit",
    "Product",
    "ProductOptions",
    "QtyOptionsConfig",
    "QtyTier",
    "QtyTieredConfig",
    "Quote",
    "QuoteRequest",
    "SizeOption",
    "SizeOverride",
    "ValidationError",
]
