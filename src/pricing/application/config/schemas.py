"""Pydantic schema models for pricing preset configs.

Stored configs use camelCase keys (``upToSqft``, ``minQty``, ``fileFee``),
so every model validates by alias and reports error locations by alias.
Numbers must be real JSON numbers: booleans and numeric strings are
rejected instead of being coerced. Field validators raise the exact
messages shown to admins editing a preset.
"""

from __future__ import annotations

import math
from typing import Annotated, Any, Callable

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

from pricing.domain.value_objects import ChargeType, PricingModel


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # Integers too large for a float
        return False


def _positive_number(value: Any) -> Any:
    if not _is_number(value) or value <= 0:
        raise ValueError("Must be a number > 0")
    return value


def _non_negative_number(value: Any) -> Any:
    if not _is_number(value) or value < 0:
        raise ValueError("Must be a number >= 0")
    return value


def _positive_integer(value: Any) -> Any:
    if not _is_number(value) or value <= 0 or not float(value).is_integer():
        raise ValueError("Must be a positive integer")
    return int(value)


def _non_empty_string(value: Any) -> Any:
    if not isinstance(value, str) or not value.strip():
        raise ValueError("Must be a non-empty string")
    return value


def _optional(check: Callable[[Any], Any]) -> Callable[[Any], Any]:
    def validate(value: Any) -> Any:
        return None if value is None else check(value)

    return validate


def _non_empty_list(description: str) -> Callable[[Any], Any]:
    def validate(value: Any) -> Any:
        if not isinstance(value, list) or not value:
            raise ValueError(f"Must be a non-empty array of {description}")
        return value

    return validate


def _price_by_qty(value: Any) -> Any:
    if not isinstance(value, dict):
        raise ValueError("Must be an object of quantity to total cents")
    prices = {}
    for key, cents in value.items():
        if not (isinstance(key, str) and key.isdigit() and int(key) > 0):
            raise ValueError(f'Quantity "{key}" must be a positive integer')
        if not _is_number(cents) or cents <= 0:
            raise ValueError(f"Total for quantity {key} must be a number of cents > 0")
        prices[int(key)] = math.floor(cents + 0.5)
    return prices


def _object(value: Any) -> Any:
    if not isinstance(value, (dict, BaseModel)):
        raise ValueError("Must be an object")
    return value


PositiveNumber = Annotated[float, BeforeValidator(_positive_number)]
NonNegativeNumber = Annotated[float, BeforeValidator(_non_negative_number)]
PositiveInteger = Annotated[int, BeforeValidator(_positive_integer)]
NonEmptyString = Annotated[str, BeforeValidator(_non_empty_string)]
OptionalPositiveNumber = Annotated[
    float | None, BeforeValidator(_optional(_positive_number))
]
PriceByQty = Annotated[
    dict[int, int] | None, BeforeValidator(_optional(_price_by_qty))
]


class ConfigSchema(BaseModel):
    """Base for all preset config schemas.

    Unknown keys are ignored so presets can carry fields that newer
    storefront features read.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class MaterialSchema(ConfigSchema):
    """Material alias with a rate multiplier."""

    id: NonEmptyString
    name: str | None = None
    multiplier: PositiveNumber = 1.0


class ChargeSchema(ConfigSchema):
    """Addon, accessory or finishing definition."""

    id: NonEmptyString
    name: str | None = None
    price: NonNegativeNumber = 0.0
    type: ChargeType = ChargeType.PER_UNIT


class PresetTermsSchema(ConfigSchema):
    """Fields shared by every pricing model."""

    file_fee: NonNegativeNumber = 0.0
    minimum_price: NonNegativeNumber = 0.0
    materials: list[Annotated[MaterialSchema, BeforeValidator(_object)]] = Field(
        default_factory=list
    )
    finishings: list[Annotated[ChargeSchema, BeforeValidator(_object)]] = Field(
        default_factory=list
    )
    addons: list[Annotated[ChargeSchema, BeforeValidator(_object)]] = Field(
        default_factory=list
    )


class AreaTierSchema(ConfigSchema):
    up_to_sqft: PositiveNumber
    rate: PositiveNumber


class AreaTieredSchema(PresetTermsSchema):
    """Config for ``AREA_TIERED`` presets."""

    tiers: Annotated[
        list[Annotated[AreaTierSchema, BeforeValidator(_object)]],
        BeforeValidator(_non_empty_list("area tiers")),
    ] = Field(default=None, validate_default=True)


class QtyTierSchema(ConfigSchema):
    min_qty: PositiveInteger
    unit_price: PositiveNumber


class QtyTieredSchema(PresetTermsSchema):
    """Config for ``QTY_TIERED`` presets."""

    tiers: Annotated[
        list[Annotated[QtyTierSchema, BeforeValidator(_object)]],
        BeforeValidator(_non_empty_list("quantity tiers")),
    ] = Field(default=None, validate_default=True)


class SizeTierSchema(ConfigSchema):
    qty: PositiveNumber
    unit_price: PositiveNumber


class SizeSchema(ConfigSchema):
    """One named size of a ``QTY_OPTIONS`` preset."""

    label: NonEmptyString = Field(default=None, validate_default=True)
    tiers: Annotated[
        list[Annotated[SizeTierSchema, BeforeValidator(_object)]],
        BeforeValidator(_non_empty_list("qty tiers")),
    ] = Field(default=None, validate_default=True)
    width_in: OptionalPositiveNumber = None
    height_in: OptionalPositiveNumber = None


class QtyOptionsSchema(PresetTermsSchema):
    """Config for ``QTY_OPTIONS`` presets."""

    sizes: Annotated[
        list[Annotated[SizeSchema, BeforeValidator(_object)]],
        BeforeValidator(_non_empty_list("size options")),
    ] = Field(default=None, validate_default=True)


PRESET_SCHEMAS: dict[PricingModel, type[PresetTermsSchema]] = {
    PricingModel.AREA_TIERED: AreaTieredSchema,
    PricingModel.QTY_TIERED: QtyTieredSchema,
    PricingModel.QTY_OPTIONS: QtyOptionsSchema,
}


# =============================================================================
# Product-level overrides (Product.optionsConfig)
# =============================================================================


class ProductSizeTierSchema(ConfigSchema):
    """Product size tier; accepts ``qty`` or ``minQty`` as the threshold."""

    qty: OptionalPositiveNumber = None
    min_qty: OptionalPositiveNumber = None
    unit_price: PositiveNumber

    @property
    def threshold(self) -> float:
        return self.qty if self.qty is not None else (self.min_qty or 1)


class ProductSizeSchema(ConfigSchema):
    """A product's narrowed or repriced size entry.

    ``label`` falls back to ``id``. ``priceByQty`` maps an exact quantity
    (as a string key) to the order total in cents.
    """

    label: str | None = None
    id: str | None = None
    tiers: list[ProductSizeTierSchema] | None = None
    width_in: OptionalPositiveNumber = None
    height_in: OptionalPositiveNumber = None
    quantity_choices: list[PositiveNumber] = Field(default_factory=list)
    price_by_qty: PriceByQty = None

    @property
    def resolved_label(self) -> str | None:
        return self.label or self.id


class DisplaySizeSchema(ConfigSchema):
    width_in: PositiveNumber
    height_in: PositiveNumber


class ProductOptionsSchema(ConfigSchema):
    """The parts of ``Product.optionsConfig`` the pricing core reads."""

    sizes: list[ProductSizeSchema] = Field(default_factory=list)
    materials: list[MaterialSchema] = Field(default_factory=list)
    addons: list[ChargeSchema] = Field(default_factory=list)
    display_min_size: DisplaySizeSchema | None = None
