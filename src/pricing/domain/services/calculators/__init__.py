"""One calculator per pricing model."""

from .area_tiered import AreaTieredCalculator
from .base import CalculatorInput, Computation, PriceLedger, SelectedAccessory
from .qty_options import QtyOptionsCalculator
from .qty_tiered import QtyTieredCalculator

__all__ = [
    "AreaTieredCalculator",
    "CalculatorInput",
    "Computation",
    "PriceLedger",
    "QtyOptionsCalculator",
    "QtyTieredCalculator",
    "SelectedAccessory",
]
