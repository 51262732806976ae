"""QTY_OPTIONS: a price matrix of named sizes by quantity."""

from __future__ import annotations

from ...exceptions import ValidationError
from ...value_objects import LineItemKind, QtyOptionsConfig, SizeOption
from ..tier_math import area_sqft, select_qty_tier, to_cents
from .base import CalculatorInput, Computation, PriceLedger


class QtyOptionsCalculator:
    """Calculator for business cards, postcards, envelopes and the like.

    Each size carries its own tier table. Sizes are never interpolated: a
    request either names a size exactly or gives dimensions equal to a
    size's declared ones.

    A size named by label may also fix the order total for exact
    quantities. That total replaces the tier price and the file fee;
    extras and the minimum floor still apply.
    """

    def compute(self, config: QtyOptionsConfig, data: CalculatorInput) -> Computation:
        size = self.resolve_size(config, data)
        sqft = self._sqft_per_unit(size, data)

        if data.size_label is not None:
            exact_cents = size.exact_total_cents(data.quantity)
            if exact_cents is not None:
                return self._compute_exact(config, data, size, exact_cents, sqft)

        if not size.tiers:
            available = size.quantities
            raise ValidationError(
                f'Quantity {data.quantity} not available for size "{size.label}". '
                f"Options: {', '.join(str(q) for q in available)}",
                field="quantity",
                details={"available": available},
            )
        tier = select_qty_tier(size.tiers, data.quantity)

        ledger = PriceLedger()
        ledger.add(
            LineItemKind.BASE,
            f"{size.label} x {data.quantity} pcs @ ${tier.unit_price:.2f}/ea",
            tier.unit_price * data.quantity,
        )
        ledger.add_extras(data, sqft_per_unit=sqft)

        return ledger.close(
            config,
            {
                "model": config.model.value,
                "sizeLabel": size.label,
                "tierQty": tier.min_qty,
                "tierUnitPrice": tier.unit_price,
                "tierLabel": f"{size.label} >= {tier.min_qty:g} pcs @ ${tier.unit_price:.2f}/ea",
                "unitCostCents": to_cents(tier.unit_price),
            },
        )

    def _compute_exact(
        self,
        config: QtyOptionsConfig,
        data: CalculatorInput,
        size: SizeOption,
        exact_cents: int,
        sqft: float,
    ) -> Computation:
        unit_cents = (2 * exact_cents + data.quantity) // (2 * data.quantity)

        ledger = PriceLedger()
        ledger.add(
            LineItemKind.BASE,
            f"{size.label} x {data.quantity} pcs (fixed price)",
            exact_cents / 100,
        )
        ledger.add_extras(data, sqft_per_unit=sqft)

        return ledger.close(
            config,
            {
                "model": config.model.value,
                "sizeLabel": size.label,
                "exactQuantityPrice": True,
                "baseTotalCents": exact_cents,
                "unitCostCents": unit_cents,
            },
            include_file_fee=False,
        )

    @staticmethod
    def _sqft_per_unit(size: SizeOption, data: CalculatorInput) -> float:
        if size.area_sqft:
            return size.area_sqft
        if data.width_in is not None and data.height_in is not None:
            return area_sqft(data.width_in, data.height_in)
        return 0.0

    def resolve_size(self, config: QtyOptionsConfig, data: CalculatorInput) -> SizeOption:
        """Find the size a request refers to.

        Raises:
            ValidationError: If the label is unknown, no size has the given
                dimensions, or neither a label nor dimensions were given.
        """
        available = [s.label for s in config.sizes]

        if data.size_label is not None:
            size = config.find_size(data.size_label)
            if size is None:
                raise ValidationError(
                    f'Size "{data.size_label}" not available. '
                    f"Options: {', '.join(available) or 'none'}",
                    field="sizeLabel",
                    details={"available": available},
                )
            return size

        if data.width_in is None or data.height_in is None:
            raise ValidationError(
                "sizeLabel or widthIn/heightIn is required for this product",
                field="sizeLabel",
                details={"available": available},
            )

        for size in config.sizes:
            if size.matches(data.width_in, data.height_in):
                return size

        raise ValidationError(
            f'No size matches {data.width_in:g}" x {data.height_in:g}"',
            field="widthIn",
            details={"available": available},
        )
