"""Preset config parsing, validation and loading.

Public API:
    - validate_preset_config: Collect every error/warning for a preset config
    - parse_preset_config: Turn a stored config into its typed variant
    - parse_product_options: Parse product-level overrides
    - extract_price_series: Ordered price series of a raw config
    - ValidationResult: Container for validation results
    - ValidationError: Blocking validation error
    - ValidationWarning: Non-blocking validation warning
    - load_json_file: Read a JSON document with ConfigError reporting

Example:
    >>> from pricing.application.config import validate_preset_config
    >>> result = validate_preset_config("AREA_TIERED", {"tiers": [{"upToSqft": -1, "rate": 2}]})
    >>> result.errors[0].field
    'tiers[0].upToSqft'
"""

from pricing.application.config.adapter import (
    parse_preset_config,
    parse_product_options,
    schema_to_config,
)
from pricing.application.config.advisories import (
    check_price_advisories,
    extract_price_series,
    is_monotonic_non_increasing,
)
from pricing.application.config.loader import (
    dump_json_file,
    extract_validation_errors,
    format_json_path,
    load_json_file,
)
from pricing.application.config.results import (
    ValidationError,
    ValidationResult,
    ValidationWarning,
)
from pricing.application.config.validator import coerce_model, validate_preset_config

__all__ = [
    "ValidationError",
    "ValidationResult",
    "ValidationWarning",
    "check_price_advisories",
    "coerce_model",
    "dump_json_file",
    "extract_price_series",
    "extract_validation_errors",
    "format_json_path",
    "is_monotonic_non_increasing",
    "load_json_file",
    "parse_preset_config",
    "parse_product_options",
    "schema_to_config",
    "validate_preset_config",
]
