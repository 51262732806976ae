"""AREA_TIERED: price by square footage of each piece."""

from __future__ import annotations

from ...exceptions import ValidationError
from ...value_objects import AreaTier, AreaTieredConfig, LineItemKind
from ..tier_math import area_sqft, select_area_tier, to_cents
from .base import CalculatorInput, Computation, PriceLedger


class AreaTieredCalculator:
    """Calculator for large-format, roll and sheet products.

    The rate bracket is chosen from the area of a single piece, so a larger
    piece unlocks a cheaper rate no matter how many copies are ordered.
    The material multiplier scales every tier's rate before the lookup.
    """

    def compute(self, config: AreaTieredConfig, data: CalculatorInput) -> Computation:
        if data.width_in is None or data.height_in is None:
            raise ValidationError(
                "widthIn and heightIn are required for area-priced products",
                field="widthIn",
            )

        sqft = area_sqft(data.width_in, data.height_in)
        multiplier = data.material_multiplier
        tiers = [AreaTier(t.up_to_sqft, t.rate * multiplier) for t in config.tiers]
        tier = select_area_tier(tiers, sqft)

        unit_cost = tier.rate * sqft

        ledger = PriceLedger()
        ledger.add(
            LineItemKind.BASE,
            f'{data.width_in:g}" x {data.height_in:g}" ({sqft:.3f} sqft) x '
            f"{data.quantity} @ ${tier.rate:.2f}/sqft",
            unit_cost * data.quantity,
        )
        if multiplier != 1.0:
            ledger.add(
                LineItemKind.MATERIAL,
                f"Material: {data.material} ({multiplier:g}x)",
                0.0,
            )
        ledger.add_extras(data, sqft_per_unit=sqft)

        return ledger.close(
            config,
            {
                "model": config.model.value,
                "sqftPerUnit": round(sqft, 4),
                "tierUpToSqft": tier.up_to_sqft,
                "tierRate": tier.rate,
                "tierLabel": f"<= {tier.up_to_sqft:g} sqft @ ${tier.rate:.2f}/sqft",
                "materialMultiplier": multiplier,
                "unitCostCents": to_cents(unit_cost),
            },
        )
