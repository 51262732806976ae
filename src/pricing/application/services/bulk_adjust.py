"""Percentage price adjustments on raw preset configs.

Adjustments work on the stored JSON document so fields the pricing core
does not model survive untouched. Unit prices and rates keep 3 decimals,
fees and minimums 2. Results are clamped at 0; the caller re-validates the
adjusted config before saving it.
"""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass
from typing import Any

from pricing.domain.value_objects import PricingModel

PRICE_DECIMALS = 3
FEE_DECIMALS = 2


@dataclass(frozen=True)
class AdjustFlags:
    """Which parts of a config a bulk adjustment touches."""

    tiers: bool = True
    addons: bool = False
    finishings: bool = False
    minimum_price: bool = False
    file_fee: bool = False


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def round_half_up(value: float, decimals: int) -> float:
    factor = 10**decimals
    return math.floor(value * factor + 0.5) / factor


def adjust_by_percent(value: float, percent: float, decimals: int = PRICE_DECIMALS) -> float:
    """Scale ``value`` by ``percent``, clamp at 0 and round."""
    return round_half_up(max(0.0, value * (1 + percent / 100)), decimals)


def _adjust_items(items: Any, key: str, percent: float) -> Any:
    if not isinstance(items, list):
        return items
    for item in items:
        if isinstance(item, dict) and _is_number(item.get(key)):
            item[key] = adjust_by_percent(item[key], percent)
    return items


def adjust_config(
    model: PricingModel, config: Any, percent: float, flags: AdjustFlags
) -> dict[str, Any]:
    """Return an adjusted deep copy of a preset config."""
    adjusted = copy.deepcopy(config) if isinstance(config, dict) else {}

    if flags.minimum_price and _is_number(adjusted.get("minimumPrice")):
        adjusted["minimumPrice"] = adjust_by_percent(adjusted["minimumPrice"], percent, FEE_DECIMALS)
    if flags.file_fee and _is_number(adjusted.get("fileFee")):
        adjusted["fileFee"] = adjust_by_percent(adjusted["fileFee"], percent, FEE_DECIMALS)
    if flags.addons:
        _adjust_items(adjusted.get("addons"), "price", percent)
    if flags.finishings:
        _adjust_items(adjusted.get("finishings"), "price", percent)

    if flags.tiers:
        match model:
            case PricingModel.AREA_TIERED:
                _adjust_items(adjusted.get("tiers"), "rate", percent)
            case PricingModel.QTY_TIERED:
                _adjust_items(adjusted.get("tiers"), "unitPrice", percent)
            case PricingModel.QTY_OPTIONS:
                for size in adjusted.get("sizes") or []:
                    if isinstance(size, dict):
                        _adjust_items(size.get("tiers"), "unitPrice", percent)
    return adjusted


def _first_tier_value(config: Any, model: PricingModel) -> tuple[str, Any]:
    try:
        match model:
            case PricingModel.AREA_TIERED:
                return "tiers[0].rate", config["tiers"][0]["rate"]
            case PricingModel.QTY_TIERED:
                return "tiers[0].unitPrice", config["tiers"][0]["unitPrice"]
            case PricingModel.QTY_OPTIONS:
                return "sizes[0].tiers[0].unitPrice", config["sizes"][0]["tiers"][0]["unitPrice"]
    except (KeyError, IndexError, TypeError):
        pass
    return "", None


def sample_delta(model: PricingModel, before: Any, after: Any) -> dict[str, Any] | None:
    """Before/after of the first tier price, for previews."""
    field, old = _first_tier_value(before, model)
    _, new = _first_tier_value(after, model)
    if not field or not _is_number(old) or not _is_number(new):
        return None
    return {"field": field, "before": old, "after": new}
