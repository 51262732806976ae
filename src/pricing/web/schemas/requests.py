"""Pydantic request schemas for the REST API."""

from typing import Any

from pydantic import Field, StrictBool, StrictFloat, StrictInt, StrictStr

from pricing.application.services import AdjustFlags
from pricing.domain.entities import AccessorySelection, QuoteRequest
from pricing.web.schemas.common import CamelModel

# Strict members keep ``true`` a bool and ``"1"`` a string
OptionValueSchema = StrictBool | StrictInt | StrictFloat | StrictStr


class AccessorySchema(CamelModel):
    """An accessory picked by the customer."""

    id: str = Field(..., min_length=1, description="Accessory id from the preset")
    quantity: Any = Field(
        default=None, description="Accessory quantity; defaults to the order quantity"
    )


class QuoteRequestBody(CamelModel):
    """Request for a live quote.

    Numbers are range-checked by the quote engine so a bad value gets the
    same field-level message on every entry point.
    """

    slug: str = Field(..., min_length=1, description="Product slug")
    quantity: Any = Field(..., description="Number of pieces, an integer > 0")
    width_in: Any = Field(default=None, description="Width in inches")
    height_in: Any = Field(default=None, description="Height in inches")
    material: str | None = Field(default=None, description="Material id or name")
    size_label: str | None = Field(default=None, description="Named size for QTY_OPTIONS")
    options: dict[str, OptionValueSchema] = Field(
        default_factory=dict, description="Finishing and addon selections"
    )
    accessories: list[AccessorySchema] = Field(
        default_factory=list, description="Selected accessories"
    )

    def to_domain(self) -> QuoteRequest:
        return QuoteRequest(
            slug=self.slug,
            quantity=self.quantity,
            width_in=self.width_in,
            height_in=self.height_in,
            material=self.material,
            size_label=self.size_label,
            options=dict(self.options),
            accessories=tuple(
                AccessorySelection(a.id, a.quantity) for a in self.accessories
            ),
        )


class PresetUpdateBody(CamelModel):
    """Admin update of a pricing preset. The model tag cannot change."""

    name: str | None = Field(default=None, description="Display name")
    config: Any = Field(default=None, description="New config document")
    is_active: bool | None = Field(default=None, description="Active flag")


class ValidateConfigBody(CamelModel):
    """Request for validating a preset config without saving it."""

    model: str = Field(..., description="Pricing model tag")
    config: Any = Field(..., description="Config document")


class BulkRollbackBody(CamelModel):
    """Request to restore presets from an applied bulk adjustment."""

    snapshots: list[Any] = Field(
        ..., description="The ``snapshots`` list of an applied bulk-adjust response"
    )


class BulkAdjustBody(CamelModel):
    """Request for a bulk percentage adjustment."""

    percent: float = Field(..., description="Change in percent, in (-95, 500]")
    category: str | None = Field(default=None, description="Limit to one category")
    include_shared: bool = Field(
        default=False, description="Also adjust presets shared with other categories"
    )
    apply: bool = Field(default=False, description="Save changes; preview when false")
    tiers: bool = True
    addons: bool = False
    finishings: bool = False
    minimum_price: bool = False
    file_fee: bool = False

    def flags(self) -> AdjustFlags:
        return AdjustFlags(
            tiers=self.tiers,
            addons=self.addons,
            finishings=self.finishings,
            minimum_price=self.minimum_price,
            file_fee=self.file_fee,
        )
