"""Preset config validation.

``validate_preset_config`` is the gate every preset write goes through. It
collects every problem instead of stopping at the first one, so an admin
editing a config sees the complete list, and it never raises.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from pricing.domain.value_objects import PricingModel

from .advisories import check_price_advisories
from .loader import extract_validation_errors
from .results import ValidationResult
from .schemas import PRESET_SCHEMAS

logger = logging.getLogger(__name__)


def coerce_model(model: Any) -> PricingModel | None:
    """Return the PricingModel for a stored tag, or None if unknown."""
    if isinstance(model, PricingModel):
        return model
    try:
        return PricingModel(model)
    except ValueError:
        return None


def validate_preset_config(model: Any, config: Any) -> ValidationResult:
    """Validate a preset config against the shape its model requires.

    Args:
        model: The preset's model tag (a PricingModel or its string value).
        config: The raw config document.

    Returns:
        ValidationResult with blocking errors (``field``, ``message``,
        ``value``) and, for configs without errors, non-blocking pricing
        advisories.
    """
    result = ValidationResult()

    pricing_model = coerce_model(model)
    if pricing_model is None:
        return result.add_error("model", f"Unknown pricing model: {model}", model)

    if not isinstance(config, dict):
        return result.add_error("config", "Config must be a JSON object", config)

    try:
        PRESET_SCHEMAS[pricing_model].model_validate(config)
    except PydanticValidationError as e:
        for detail in extract_validation_errors(e):
            result.add_error(detail["field"], detail["message"], detail["value"])
        logger.debug(
            f"{pricing_model.value} config rejected with {len(result.errors)} error(s)"
        )
        return result

    return result.merge(check_price_advisories(pricing_model, config))
