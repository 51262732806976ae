"""Domain services - pure pricing math."""

from .calculators import (
    AreaTieredCalculator,
    CalculatorInput,
    Computation,
    QtyOptionsCalculator,
    QtyTieredCalculator,
    SelectedAccessory,
)
from .tier_math import (
    area_sqft,
    charge_amount,
    resolve_material,
    select_area_tier,
    select_qty_tier,
    to_cents,
)

__all__ = [
    "AreaTieredCalculator",
    "CalculatorInput",
    "Computation",
    "QtyOptionsCalculator",
    "QtyTieredCalculator",
    "SelectedAccessory",
    "area_sqft",
    "charge_amount",
    "resolve_material",
    "select_area_tier",
    "select_qty_tier",
    "to_cents",
]
