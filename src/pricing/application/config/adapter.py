"""Adapters from raw stored JSON to typed domain configs.

Stored preset configs are never trusted to be well-shaped. Every quote
parses the preset through ``parse_preset_config``, which either returns one
of the three typed config variants or raises ``ConfigError``.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError as PydanticValidationError

from pricing.domain.exceptions import ConfigError
from pricing.domain.value_objects import (
    AreaTier,
    AreaTieredConfig,
    Charge,
    MaterialOption,
    PresetConfig,
    ProductOptions,
    QtyOptionsConfig,
    QtyTier,
    QtyTieredConfig,
    SizeOption,
    SizeOverride,
)

from .loader import extract_validation_errors, format_validation_error_message
from .schemas import (
    PRESET_SCHEMAS,
    AreaTieredSchema,
    ChargeSchema,
    MaterialSchema,
    PresetTermsSchema,
    ProductOptionsSchema,
    QtyOptionsSchema,
    QtyTieredSchema,
)
from .validator import coerce_model


def _materials(items: list[MaterialSchema]) -> tuple[MaterialOption, ...]:
    return tuple(MaterialOption(m.id, m.multiplier, m.name) for m in items)


def _charges(items: list[ChargeSchema]) -> tuple[Charge, ...]:
    return tuple(Charge(c.id, c.price, c.type, c.name) for c in items)


def _terms(schema: PresetTermsSchema) -> dict[str, Any]:
    return {
        "file_fee": schema.file_fee,
        "minimum_price": schema.minimum_price,
        "materials": _materials(schema.materials),
        "finishings": _charges(schema.finishings),
        "addons": _charges(schema.addons),
    }


def schema_to_config(schema: PresetTermsSchema) -> PresetConfig:
    """Convert a validated schema model into its domain config variant."""
    match schema:
        case AreaTieredSchema():
            return AreaTieredConfig(
                tiers=tuple(AreaTier(t.up_to_sqft, t.rate) for t in schema.tiers),
                **_terms(schema),
            )
        case QtyTieredSchema():
            return QtyTieredConfig(
                tiers=tuple(QtyTier(t.min_qty, t.unit_price) for t in schema.tiers),
                **_terms(schema),
            )
        case QtyOptionsSchema():
            return QtyOptionsConfig(
                sizes=tuple(
                    SizeOption(
                        label=s.label,
                        tiers=tuple(QtyTier(t.qty, t.unit_price) for t in s.tiers),
                        width_in=s.width_in,
                        height_in=s.height_in,
                    )
                    for s in schema.sizes
                ),
                **_terms(schema),
            )
    raise TypeError(f"Unsupported schema: {type(schema).__name__}")


def parse_preset_config(
    model: Any, config: Any, preset_key: str | None = None
) -> PresetConfig:
    """Parse a stored preset config into its typed variant.

    Args:
        model: The preset's model tag.
        config: The raw config document.
        preset_key: Key of the preset, for error reporting.

    Returns:
        AreaTieredConfig, QtyTieredConfig or QtyOptionsConfig.

    Raises:
        ConfigError: If the model tag is missing or unknown, or the config
            does not match the model's schema. ``details`` lists every field
            error.
    """
    label = f"Preset '{preset_key}'" if preset_key else "Preset"

    if not model or config is None:
        raise ConfigError(
            f"{label} has no pricing model/config; product is not quotable",
            error_type="unquotable",
            preset_key=preset_key,
        )

    pricing_model = coerce_model(model)
    if pricing_model is None:
        raise ConfigError(
            f"{label} has unknown pricing model: {model}",
            error_type="unknown_model",
            preset_key=preset_key,
            details=[{"field": "model", "message": f"Unknown pricing model: {model}", "value": model}],
        )

    if not isinstance(config, dict):
        raise ConfigError(
            f"{label} config must be a JSON object",
            preset_key=preset_key,
            details=[{"field": "config", "message": "Config must be a JSON object"}],
        )

    schema_type = PRESET_SCHEMAS[pricing_model]

    try:
        schema = schema_type.model_validate(config)
    except PydanticValidationError as e:
        details = extract_validation_errors(e)
        raise ConfigError(
            format_validation_error_message(
                details, heading=f"{label} has an invalid {pricing_model.value} config:"
            ),
            preset_key=preset_key,
            details=details,
        )

    return schema_to_config(schema)


def parse_product_options(options_config: Any, slug: str | None = None) -> ProductOptions:
    """Parse the pricing-relevant parts of ``Product.optionsConfig``.

    Keys the pricing core does not read are ignored. Size entries without a
    ``label`` or ``id`` are skipped.

    Raises:
        ConfigError: If a pricing-relevant field is malformed.
    """
    if not options_config:
        return ProductOptions()
    if not isinstance(options_config, dict):
        raise ConfigError(
            f"Product '{slug}' optionsConfig must be a JSON object",
            error_type="invalid_product_options",
        )

    try:
        schema = ProductOptionsSchema.model_validate(options_config)
    except PydanticValidationError as e:
        details = extract_validation_errors(e)
        raise ConfigError(
            format_validation_error_message(
                details, heading=f"Product '{slug}' has invalid optionsConfig:"
            ),
            error_type="invalid_product_options",
            details=details,
        )

    sizes = tuple(
        SizeOverride(
            label=entry.resolved_label,
            tiers=(
                tuple(QtyTier(t.threshold, t.unit_price) for t in entry.tiers)
                if entry.tiers
                else None
            ),
            width_in=entry.width_in,
            height_in=entry.height_in,
            quantity_choices=tuple(sorted(entry.quantity_choices)),
            price_by_qty=tuple(sorted((entry.price_by_qty or {}).items())),
        )
        for entry in schema.sizes
        if entry.resolved_label
    )
    display_min_size = None
    if schema.display_min_size is not None:
        display_min_size = (
            schema.display_min_size.width_in,
            schema.display_min_size.height_in,
        )

    return ProductOptions(
        sizes=sizes,
        materials=_materials(schema.materials),
        addons=_charges(schema.addons),
        display_min_size=display_min_size,
    )
