"""Pydantic response schemas for the REST API."""

from typing import Any

from pydantic import Field

from pricing.web.schemas.common import CamelModel


class LineItemSchema(CamelModel):
    """One itemized quote line."""

    kind: str = Field(..., description="BASE, MATERIAL, FINISHING, ADDON, ACCESSORY, ...")
    label: str = Field(..., description="Display label")
    amount_cents: int = Field(..., description="Display-rounded amount in cents")


class QuoteSchema(CamelModel):
    """Response for a live quote."""

    total_cents: int = Field(..., description="Authoritative order total in cents")
    unit_cents: int = Field(..., description="Display-only per-unit price in cents")
    currency: str = Field(default="CAD", description="Currency code")
    template: str = Field(..., description="Pricing model that produced the quote")
    breakdown: list[LineItemSchema] = Field(default_factory=list)
    meta: dict[str, Any] = Field(default_factory=dict)


class FromPriceSchema(CamelModel):
    """Response for a listing from-price."""

    slug: str
    from_price_cents: int = Field(..., description="Starting price in cents, 0 if none")
    source: str | None = Field(default=None, description="Strategy that produced it")


class ValidationResultSchema(CamelModel):
    """Response for config validation."""

    valid: bool = Field(..., description="Whether the config can be saved")
    errors: list[dict[str, Any]] = Field(default_factory=list)
    warnings: list[dict[str, Any]] = Field(default_factory=list)


class PresetSchema(CamelModel):
    """A stored pricing preset."""

    key: str
    name: str
    model: str
    config: Any = None
    is_active: bool = True


class PresetUpdateResponseSchema(CamelModel):
    """Response for a preset update."""

    preset: PresetSchema
    affected_products: list[str] = Field(
        default_factory=list, description="Active products using the preset"
    )
    refresh_scheduled: bool = Field(
        default=False, description="Whether a minPrice refresh was queued"
    )


class ErrorResponseSchema(CamelModel):
    """Standard error response."""

    error: str = Field(..., description="Error message")
    details: dict[str, Any] | None = Field(default=None, description="Additional error details")
