"""Shared tier selection, charge and rounding primitives.

Quantity tiers and area tiers select in opposite directions:

- quantity tiers unlock "starting at" a breakpoint (floor lookup), and a
  quantity below the smallest breakpoint clamps up to the smallest tier;
- area tiers cap "up to" a breakpoint (ceiling lookup), and an area above
  every breakpoint uses the largest tier.

All money here is in dollars as floats. Conversion to cents happens once,
at the end of a calculation, through :func:`to_cents`.
"""

from __future__ import annotations

import math
from typing import Sequence

from ..exceptions import ConfigError
from ..value_objects import AreaTier, Charge, ChargeType, MaterialOption, QtyTier

__all__ = [
    "area_sqft",
    "charge_amount",
    "resolve_material",
    "select_area_tier",
    "select_qty_tier",
    "to_cents",
]


def select_qty_tier(tiers: Sequence[QtyTier], quantity: float) -> QtyTier:
    """Select the tier with the largest ``min_qty`` that is <= ``quantity``.

    Args:
        tiers: Quantity tiers, in any order.
        quantity: Requested quantity.

    Returns:
        The matching tier, or the smallest tier when ``quantity`` is below
        every breakpoint.

    Raises:
        ConfigError: If ``tiers`` is empty.
    """
    if not tiers:
        raise ConfigError("No quantity tiers configured", error_type="missing_tiers")

    ordered = sorted(tiers, key=lambda t: t.min_qty)
    selected = ordered[0]
    for tier in ordered:
        if quantity >= tier.min_qty:
            selected = tier
        else:
            break
    return selected


def select_area_tier(tiers: Sequence[AreaTier], area: float) -> AreaTier:
    """Select the first tier whose ``up_to_sqft`` is >= ``area``.

    Args:
        tiers: Area tiers, in any order.
        area: Per-unit area in square feet.

    Returns:
        The matching tier, or the largest tier when ``area`` exceeds every
        breakpoint.

    Raises:
        ConfigError: If ``tiers`` is empty.
    """
    if not tiers:
        raise ConfigError("No area tiers configured", error_type="missing_tiers")

    ordered = sorted(tiers, key=lambda t: t.up_to_sqft)
    for tier in ordered:
        if area <= tier.up_to_sqft:
            return tier
    return ordered[-1]


def area_sqft(width_in: float, height_in: float) -> float:
    """Area of one piece in square feet."""
    return (width_in * height_in) / 144


def charge_amount(
    charge: Charge, quantity: float, sqft_per_unit: float = 0.0
) -> float:
    """Dollar amount of a charge for an order.

    Args:
        charge: The addon, accessory or finishing definition.
        quantity: Units the charge scales with.
        sqft_per_unit: Per-unit area, used by ``per_sqft`` charges.
    """
    if charge.type is ChargeType.FLAT:
        return charge.price
    if charge.type is ChargeType.PER_SQFT:
        return charge.price * sqft_per_unit * quantity
    return charge.price * quantity


def resolve_material(
    materials: Sequence[MaterialOption], material: str | None
) -> MaterialOption | None:
    """Find the first material matching an alias, or None."""
    if not material:
        return None
    for option in materials:
        if option.matches(material):
            return option
    return None


def to_cents(dollars: float) -> int:
    """Round a dollar amount to the nearest cent, halves rounding up."""
    return int(math.floor(dollars * 100 + 0.5))
