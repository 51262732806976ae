"""Infrastructure layer - storage and output formatting."""

from .catalog_store import InMemoryCatalogStore, JsonCatalogStore, parse_catalog
from .formatters import (
    AnomalyReportFormatter,
    PresetFormatter,
    QuoteFormatter,
    format_cents,
)

__all__ = [
    "AnomalyReportFormatter",
    "InMemoryCatalogStore",
    "JsonCatalogStore",
    "PresetFormatter",
    "QuoteFormatter",
    "format_cents",
    "parse_catalog",
]
