"""Application services - quoting, from-prices, scans and adjustments."""

from .anomalies import AnomalyReport, AnomalyScanner, AnomalyType, PresetAnomaly
from .bulk_adjust import AdjustFlags, adjust_by_percent, adjust_config, sample_delta
from .from_price import (
    CachedMinPriceStrategy,
    DisplayOverrideStrategy,
    FromPrice,
    FromPriceResolver,
    LegacyBasePriceStrategy,
    LiveQuoteStrategy,
    MinPriceRefresher,
    RefreshReport,
    build_minimal_request,
    compute_from_price,
    default_strategies,
)
from .quote_engine import QuoteEngine, layer_product_sizes, option_selects, quote_product
from .request_validator import RequestValidatorService

__all__ = [
    "AdjustFlags",
    "AnomalyReport",
    "AnomalyScanner",
    "AnomalyType",
    "CachedMinPriceStrategy",
    "DisplayOverrideStrategy",
    "FromPrice",
    "FromPriceResolver",
    "LegacyBasePriceStrategy",
    "LiveQuoteStrategy",
    "MinPriceRefresher",
    "PresetAnomaly",
    "QuoteEngine",
    "RefreshReport",
    "RequestValidatorService",
    "adjust_by_percent",
    "adjust_config",
    "build_minimal_request",
    "compute_from_price",
    "default_strategies",
    "layer_product_sizes",
    "option_selects",
    "quote_product",
    "sample_delta",
]
