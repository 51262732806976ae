"""Domain entities for pricing."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from .value_objects import CachedPrice, LineItemKind, PricingUnit

OptionValue = str | bool | int | float


@dataclass
class PricingPreset:
    """A named, reusable pricing rule set.

    ``config`` is kept exactly as stored. It is parsed into a typed config
    every time it is used, so a malformed write can never be trusted at
    read time.

    Attributes:
        key: Unique stable identifier
        model: Pricing model tag as stored (may be unknown)
        config: Raw config document
        name: Display name
        is_active: Inactive presets are skipped by scans
    """

    key: str
    model: str
    config: Any
    name: str = ""
    is_active: bool = True


@dataclass
class Product:
    """The pricing-relevant fields of a catalog product.

    Money fields are integer cents.
    """

    slug: str
    name: str = ""
    category: str | None = None
    is_active: bool = True
    base_price: int = 0
    pricing_unit: PricingUnit = PricingUnit.PER_PIECE
    display_from_price: int | None = None
    min_price: CachedPrice | None = None
    min_width_in: float | None = None
    min_height_in: float | None = None
    options_config: dict[str, Any] = field(default_factory=dict)
    pricing_preset_key: str | None = None
    pricing_preset: PricingPreset | None = None


@dataclass(frozen=True)
class AccessorySelection:
    """An accessory picked by the customer.

    ``quantity`` defaults to the order quantity for per-unit accessories.
    """

    id: str
    quantity: int | None = None


@dataclass(frozen=True)
class QuoteRequest:
    """Ephemeral input to the quote engine."""

    slug: str
    quantity: int
    width_in: float | None = None
    height_in: float | None = None
    material: str | None = None
    size_label: str | None = None
    options: Mapping[str, OptionValue] = field(default_factory=dict)
    accessories: tuple[AccessorySelection, ...] = ()

    @property
    def has_dimensions(self) -> bool:
        return self.width_in is not None and self.height_in is not None


@dataclass(frozen=True)
class LineItem:
    """One itemized line of a quote breakdown.

    ``amount_cents`` is rounded for display; the quote total is computed from
    the unrounded sum.
    """

    kind: LineItemKind
    label: str
    amount_cents: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "label": self.label,
            "amountCents": self.amount_cents,
        }


@dataclass(frozen=True)
class Quote:
    """Result of pricing one request.

    Attributes:
        total_cents: Authoritative order total in cents
        unit_cents: Display-only per-unit price (total / quantity, rounded)
        template: Pricing model that produced the quote
        breakdown: Itemized lines
        meta: Resolved material/size/tier echoed for display
        currency: Always "CAD"
    """

    total_cents: int
    unit_cents: int
    template: str
    breakdown: tuple[LineItem, ...]
    meta: dict[str, Any]
    currency: str = "CAD"

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalCents": self.total_cents,
            "unitCents": self.unit_cents,
            "currency": self.currency,
            "template": self.template,
            "breakdown": [line.to_dict() for line in self.breakdown],
            "meta": dict(self.meta),
        }
