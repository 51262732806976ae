"""Shared input, output and accumulation types for the model calculators."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ...entities import LineItem
from ...value_objects import Charge, LineItemKind, PresetTerms
from ..tier_math import charge_amount, to_cents


@dataclass(frozen=True)
class SelectedAccessory:
    """An accessory definition resolved against the customer's selection."""

    charge: Charge
    quantity: int | None = None


@dataclass(frozen=True)
class CalculatorInput:
    """Normalized request handed to a calculator.

    Material aliases, finishing options and accessory ids have already been
    resolved against the preset and product by the quote engine.
    """

    quantity: int
    width_in: float | None = None
    height_in: float | None = None
    size_label: str | None = None
    material: str | None = None
    material_multiplier: float = 1.0
    finishings: tuple[Charge, ...] = ()
    addons: tuple[Charge, ...] = ()
    accessories: tuple[SelectedAccessory, ...] = ()


@dataclass(frozen=True)
class Computation:
    """Calculator output before the engine wraps it into a Quote."""

    total_cents: int
    breakdown: tuple[LineItem, ...]
    meta: dict[str, Any] = field(default_factory=dict)


class PriceLedger:
    """Accumulates dollar amounts and rounds once when closed."""

    def __init__(self) -> None:
        self._lines: list[tuple[LineItemKind, str, float]] = []

    def add(self, kind: LineItemKind, label: str, dollars: float) -> None:
        self._lines.append((kind, label, dollars))

    def total_of(self, kind: LineItemKind) -> float:
        return sum(amount for k, _, amount in self._lines if k is kind)

    @property
    def subtotal(self) -> float:
        return sum(amount for _, _, amount in self._lines)

    def add_extras(
        self,
        data: CalculatorInput,
        sqft_per_unit: float = 0.0,
    ) -> None:
        """Add selected finishings, addons and accessories."""
        for finishing in data.finishings:
            self.add(
                LineItemKind.FINISHING,
                f"Finishing: {finishing.label}",
                charge_amount(finishing, data.quantity, sqft_per_unit),
            )
        for addon in data.addons:
            self.add(
                LineItemKind.ADDON,
                f"Add-on: {addon.label}",
                charge_amount(addon, data.quantity, sqft_per_unit),
            )
        for accessory in data.accessories:
            qty = accessory.quantity if accessory.quantity is not None else data.quantity
            self.add(
                LineItemKind.ACCESSORY,
                f"Accessory: {accessory.charge.label}",
                charge_amount(accessory.charge, qty, sqft_per_unit),
            )

    def close(
        self, terms: PresetTerms, meta: dict[str, Any], include_file_fee: bool = True
    ) -> Computation:
        """Add the file fee, apply the minimum floor and round to cents."""
        file_fee = terms.file_fee if include_file_fee else 0.0
        if file_fee > 0:
            self.add(LineItemKind.FILE_FEE, "File / setup fee", file_fee)

        subtotal = self.subtotal
        lines = [LineItem(kind, label, to_cents(amount)) for kind, label, amount in self._lines]

        if subtotal < terms.minimum_price:
            lines.append(
                LineItem(
                    LineItemKind.MINIMUM_ADJUSTMENT,
                    "Minimum order adjustment",
                    to_cents(terms.minimum_price - subtotal),
                )
            )

        total_cents = max(0, to_cents(max(subtotal, terms.minimum_price)))
        meta = {
            **meta,
            "fileFeeCents": to_cents(file_fee),
            "extrasCents": to_cents(
                self.total_of(LineItemKind.FINISHING)
                + self.total_of(LineItemKind.ADDON)
                + self.total_of(LineItemKind.ACCESSORY)
            ),
            "minimumApplied": subtotal < terms.minimum_price,
        }
        return Computation(total_cents=total_cents, breakdown=tuple(lines), meta=meta)
