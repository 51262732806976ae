"""Price-series extraction and advisory checks on raw preset configs.

These helpers read stored config documents as-is, without parsing them
first, so they also work on presets that no longer validate. They back both
the non-blocking validator warnings and the anomaly scanner.
"""

from __future__ import annotations

import math
from typing import Any, Sequence

from pricing.domain.value_objects import PricingModel

from .results import ValidationResult

# (threshold key, price key) per model
_SERIES_KEYS: dict[PricingModel, tuple[str, str]] = {
    PricingModel.AREA_TIERED: ("upToSqft", "rate"),
    PricingModel.QTY_TIERED: ("minQty", "unitPrice"),
    PricingModel.QTY_OPTIONS: ("qty", "unitPrice"),
}


def _number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    return number if math.isfinite(number) else None


def _tier_points(
    tiers: Any, threshold_key: str, price_key: str
) -> list[tuple[int, float | None, float]]:
    """Return ``(index, threshold, price)`` for every tier with a numeric price."""
    if not isinstance(tiers, list):
        return []
    points = []
    for i, tier in enumerate(tiers):
        if not isinstance(tier, dict):
            continue
        price = _number(tier.get(price_key))
        if price is None:
            continue
        points.append((i, _number(tier.get(threshold_key)), price))
    return points


def _ordered_prices(points: list[tuple[int, float | None, float]]) -> list[float]:
    if points and all(threshold is not None for _, threshold, _ in points):
        points = sorted(points, key=lambda p: p[1])
    return [price for _, _, price in points]


def _series_tiers(model: PricingModel, config: Any) -> Any:
    if not isinstance(config, dict):
        return None
    if model is PricingModel.QTY_OPTIONS:
        sizes = config.get("sizes")
        if not isinstance(sizes, list) or not sizes or not isinstance(sizes[0], dict):
            return None
        return sizes[0].get("tiers")
    return config.get("tiers")


def extract_price_series(model: PricingModel | str, config: Any) -> list[float]:
    """Extract the ordered price series of a stored preset config.

    Unit prices across quantity tiers, rates across area tiers, or the first
    size's unit prices for ``QTY_OPTIONS``. Non-numeric entries are dropped.
    When every threshold is numeric the series is ordered by threshold,
    otherwise it keeps the stored order.

    Returns:
        The price series, or an empty list for an unknown model or a config
        with no usable tiers.
    """
    try:
        model = PricingModel(model)
    except ValueError:
        return []
    threshold_key, price_key = _SERIES_KEYS[model]
    points = _tier_points(_series_tiers(model, config), threshold_key, price_key)
    return _ordered_prices(points)


def is_monotonic_non_increasing(values: Sequence[float]) -> bool:
    """Check that no value is greater than the one before it."""
    return all(later <= earlier for earlier, later in zip(values, values[1:]))


def _check_tiers(
    result: ValidationResult,
    tiers: Any,
    path: str,
    threshold_key: str,
    price_key: str,
) -> None:
    points = _tier_points(tiers, threshold_key, price_key)

    seen: dict[float, int] = {}
    for index, threshold, _ in points:
        if threshold is None:
            continue
        if threshold in seen:
            result.add_warning(
                f"{path}[{index}].{threshold_key}",
                f"Duplicate tier threshold {threshold:g} (also used by {path}[{seen[threshold]}])",
                suggestion="Merge the tiers or change one threshold",
            )
        else:
            seen[threshold] = index

    if not is_monotonic_non_increasing(_ordered_prices(points)):
        result.add_warning(
            path,
            "Tier prices are not monotonic non-increasing",
            suggestion=f"A higher {threshold_key} should never cost more per unit",
        )


def check_price_advisories(model: PricingModel, config: Any) -> ValidationResult:
    """Collect non-blocking warnings for a preset config.

    Args:
        model: The preset's pricing model.
        config: The raw config document.

    Returns:
        A ValidationResult holding only warnings.
    """
    result = ValidationResult()
    if not isinstance(config, dict):
        return result

    threshold_key, price_key = _SERIES_KEYS[model]
    if model is not PricingModel.QTY_OPTIONS:
        _check_tiers(result, config.get("tiers"), "tiers", threshold_key, price_key)
        return result

    sizes = config.get("sizes")
    if not isinstance(sizes, list):
        return result

    labels: dict[str, int] = {}
    for i, size in enumerate(sizes):
        if not isinstance(size, dict):
            continue
        label = size.get("label")
        if isinstance(label, str) and label:
            if label in labels:
                result.add_warning(
                    f"sizes[{i}].label",
                    f'Duplicate size label "{label}" (also used by sizes[{labels[label]}])',
                    suggestion="Only the first size with a label can be quoted",
                )
            else:
                labels[label] = i
        _check_tiers(result, size.get("tiers"), f"sizes[{i}].tiers", threshold_key, price_key)
    return result
