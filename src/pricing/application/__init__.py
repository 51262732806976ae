"""Application layer - use cases and orchestration."""

from .commands import (
    BulkAdjustPresetsCommand,
    QuoteProductCommand,
    RefreshMinPricesCommand,
    ResolveFromPriceCommand,
    RollbackBulkAdjustCommand,
    UpdatePresetCommand,
)
from .services import FromPriceResolver, QuoteEngine

__all__ = [
    "BulkAdjustPresetsCommand",
    "FromPriceResolver",
    "QuoteEngine",
    "QuoteProductCommand",
    "RefreshMinPricesCommand",
    "ResolveFromPriceCommand",
    "RollbackBulkAdjustCommand",
    "UpdatePresetCommand",
]
