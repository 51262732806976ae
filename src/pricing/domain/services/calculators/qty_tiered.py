"""QTY_TIERED: price per piece, cheaper with volume."""

from __future__ import annotations

from ...value_objects import LineItemKind, QtyTieredConfig
from ..tier_math import select_qty_tier, to_cents
from .base import CalculatorInput, Computation, PriceLedger


class QtyTieredCalculator:
    """Calculator for small fixed-size goods such as stickers and labels.

    Dimensions are ignored. A quantity below the first breakpoint is billed
    as requested at the first tier's unit price; the minimum price floor
    covers small orders.
    """

    def compute(self, config: QtyTieredConfig, data: CalculatorInput) -> Computation:
        tier = select_qty_tier(config.tiers, data.quantity)
        unit_price = tier.unit_price * data.material_multiplier

        ledger = PriceLedger()
        ledger.add(
            LineItemKind.BASE,
            f"{data.quantity} pcs @ ${unit_price:.2f}/ea",
            unit_price * data.quantity,
        )
        if data.material_multiplier != 1.0:
            ledger.add(
                LineItemKind.MATERIAL,
                f"Material: {data.material} ({data.material_multiplier:g}x)",
                0.0,
            )
        ledger.add_extras(data)

        return ledger.close(
            config,
            {
                "model": config.model.value,
                "tierMinQty": tier.min_qty,
                "tierUnitPrice": tier.unit_price,
                "tierLabel": f">= {tier.min_qty:g} pcs @ ${tier.unit_price:.2f}/ea",
                "materialMultiplier": data.material_multiplier,
                "unitCostCents": to_cents(unit_price),
            },
        )
