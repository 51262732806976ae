"""Value objects for the pricing domain."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import ClassVar


class PricingModel(str, Enum):
    """Pricing models a preset can declare.

    The model tag is fixed when a preset is created and decides which fields
    its config must carry.

    Attributes:
        AREA_TIERED: Price per square foot, bracketed by single-piece area.
        QTY_TIERED: Price per piece, bracketed by order quantity.
        QTY_OPTIONS: Named sizes, each with its own quantity/price table.
    """

    AREA_TIERED = "AREA_TIERED"
    QTY_TIERED = "QTY_TIERED"
    QTY_OPTIONS = "QTY_OPTIONS"


class PricingUnit(str, Enum):
    """Unit the legacy flat ``basePrice`` is expressed in."""

    PER_PIECE = "per_piece"
    PER_SQFT = "per_sqft"


class ChargeType(str, Enum):
    """How an addon, accessory or finishing charge scales with the order.

    Attributes:
        PER_UNIT: Price is multiplied by the quantity.
        FLAT: Price is applied once regardless of quantity.
        PER_SQFT: Price is multiplied by per-unit area and quantity.
    """

    PER_UNIT = "per_unit"
    FLAT = "flat"
    PER_SQFT = "per_sqft"


class LineItemKind(str, Enum):
    """Categories of lines in a quote breakdown."""

    BASE = "base"
    MATERIAL = "material"
    FINISHING = "finishing"
    ADDON = "addon"
    ACCESSORY = "accessory"
    FILE_FEE = "file_fee"
    MINIMUM_ADJUSTMENT = "minimum_adjustment"


@dataclass(frozen=True)
class AreaTier:
    """Square-foot rate that applies up to and including ``up_to_sqft``."""

    up_to_sqft: float
    rate: float


@dataclass(frozen=True)
class QtyTier:
    """Unit price unlocked once the quantity reaches ``min_qty``."""

    min_qty: float
    unit_price: float


@dataclass(frozen=True)
class SizeOption:
    """A named fixed size with its own quantity/price table.

    Attributes:
        label: Exact label customers select (case-sensitive).
        tiers: Quantity tiers for this size.
        width_in: Declared width in inches, used for dimension matching.
        height_in: Declared height in inches, used for dimension matching.
        price_by_qty: Fixed order totals in cents, as (quantity, cents) pairs.
            An exact quantity match takes precedence over the tiers.
    """

    label: str
    tiers: tuple[QtyTier, ...]
    width_in: float | None = None
    height_in: float | None = None
    price_by_qty: tuple[tuple[int, int], ...] = ()

    def exact_total_cents(self, quantity: int) -> int | None:
        for qty, cents in self.price_by_qty:
            if qty == quantity:
                return cents
        return None

    @property
    def quantities(self) -> list[int]:
        """Quantities with a fixed total, ascending."""
        return sorted(qty for qty, _ in self.price_by_qty)

    def matches(self, width_in: float, height_in: float) -> bool:
        """Check whether the declared dimensions equal the requested ones."""
        if self.width_in is None or self.height_in is None:
            return False
        return self.width_in == width_in and self.height_in == height_in

    @property
    def area_sqft(self) -> float:
        """Per-unit area in square feet, or 0 when dimensions are unknown."""
        if self.width_in is None or self.height_in is None:
            return 0.0
        return (self.width_in * self.height_in) / 144


@dataclass(frozen=True)
class MaterialOption:
    """Material that scales the base rate by ``multiplier``."""

    id: str
    multiplier: float = 1.0
    name: str | None = None

    def matches(self, material: str) -> bool:
        """Match by exact id or case-insensitive display name."""
        if self.id == material:
            return True
        return self.name is not None and self.name.lower() == material.lower()


@dataclass(frozen=True)
class Charge:
    """Priced extra: an addon, accessory or finishing."""

    id: str
    price: float
    type: ChargeType = ChargeType.PER_UNIT
    name: str | None = None

    @property
    def label(self) -> str:
        return self.name or self.id


@dataclass(frozen=True, kw_only=True)
class PresetTerms:
    """Fields every pricing model config may carry.

    Attributes:
        file_fee: One-off setup fee in dollars.
        minimum_price: Order total floor in dollars (0 disables the floor).
        materials: Material multipliers selectable by alias.
        finishings: Finishing charges selectable through request options.
        addons: Addon/accessory charges selectable by id.
    """

    file_fee: float = 0.0
    minimum_price: float = 0.0
    materials: tuple[MaterialOption, ...] = ()
    finishings: tuple[Charge, ...] = ()
    addons: tuple[Charge, ...] = ()


@dataclass(frozen=True, kw_only=True)
class AreaTieredConfig(PresetTerms):
    """Typed config for ``AREA_TIERED`` presets."""

    model: ClassVar[PricingModel] = PricingModel.AREA_TIERED
    tiers: tuple[AreaTier, ...]


@dataclass(frozen=True, kw_only=True)
class QtyTieredConfig(PresetTerms):
    """Typed config for ``QTY_TIERED`` presets."""

    model: ClassVar[PricingModel] = PricingModel.QTY_TIERED
    tiers: tuple[QtyTier, ...]


@dataclass(frozen=True, kw_only=True)
class QtyOptionsConfig(PresetTerms):
    """Typed config for ``QTY_OPTIONS`` presets."""

    model: ClassVar[PricingModel] = PricingModel.QTY_OPTIONS
    sizes: tuple[SizeOption, ...]

    def find_size(self, label: str) -> SizeOption | None:
        for size in self.sizes:
            if size.label == label:
                return size
        return None


PresetConfig = AreaTieredConfig | QtyTieredConfig | QtyOptionsConfig


@dataclass(frozen=True)
class SizeOverride:
    """A product's entry in ``optionsConfig.sizes``.

    Listing sizes on a product narrows which preset sizes it sells. An entry
    with its own ``tiers`` reprices that size for this product only, and
    ``price_by_qty`` fixes the order total for exact quantities.
    """

    label: str
    tiers: tuple[QtyTier, ...] | None = None
    width_in: float | None = None
    height_in: float | None = None
    quantity_choices: tuple[float, ...] = ()
    price_by_qty: tuple[tuple[int, int], ...] = ()

    def apply_to(self, size: SizeOption | None) -> SizeOption | None:
        """Layer this override onto a preset size.

        Returns None when there is no preset size and the override carries
        no prices of its own.
        """
        if size is None:
            if not self.tiers and not self.price_by_qty:
                return None
            return SizeOption(
                self.label, self.tiers or (), self.width_in, self.height_in, self.price_by_qty
            )
        return replace(
            size,
            tiers=self.tiers or size.tiers,
            price_by_qty=self.price_by_qty or size.price_by_qty,
            width_in=self.width_in if self.width_in is not None else size.width_in,
            height_in=self.height_in if self.height_in is not None else size.height_in,
        )


@dataclass(frozen=True)
class ProductOptions:
    """Product-level pricing overrides layered on top of a preset.

    Attributes:
        sizes: Size overrides, in display order.
        materials: Material multipliers, checked before the preset's.
        addons: Addon definitions, replacing preset addons with the same id.
        display_min_size: (width, height) used for the listing "from" price.
    """

    sizes: tuple[SizeOverride, ...] = ()
    materials: tuple[MaterialOption, ...] = ()
    addons: tuple[Charge, ...] = ()
    display_min_size: tuple[float, float] | None = None


@dataclass(frozen=True)
class CachedPrice:
    """A computed "from" price persisted for catalog listings.

    Attributes:
        cents: Cached price in cents.
        refreshed_at: When the value was last recomputed, if known.
    """

    cents: int
    refreshed_at: datetime | None = None
