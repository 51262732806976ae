"""Pricing anomaly scan.

A read-only diagnostic sweep over every active preset and product. It runs
independently of any quote and never raises for a single preset: a preset
that cannot be scanned is reported as a ``scan_failed`` anomaly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from pricing.application.config.advisories import (
    extract_price_series,
    is_monotonic_non_increasing,
)
from pricing.application.config.validator import validate_preset_config
from pricing.domain.entities import PricingPreset, Product

if TYPE_CHECKING:
    from pricing.contracts.protocols import PresetRepository, ProductRepository

logger = logging.getLogger(__name__)


class AnomalyType(str, Enum):
    """Kinds of preset defects the scan reports."""

    MISSING_TIERS = "missing_tiers"
    NON_POSITIVE_PRICE = "non_positive_price"
    NON_MONOTONIC_TIERS = "non_monotonic_tiers"
    INVALID_CONFIG = "invalid_config"
    SCAN_FAILED = "scan_failed"


@dataclass(frozen=True)
class PresetAnomaly:
    type: AnomalyType
    key: str
    name: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "key": self.key,
            "name": self.name,
            "message": self.message,
        }


@dataclass
class AnomalyReport:
    """Result of a scan.

    Attributes:
        total_presets_checked: Active presets examined
        preset_anomalies: Defects found, capped at the scanner's limit
        products_missing_price: Active products with no preset and no
            positive ``basePrice`` (unquotable products)
        anomaly_count: Defects found before capping
    """

    total_presets_checked: int = 0
    preset_anomalies: list[PresetAnomaly] = field(default_factory=list)
    products_missing_price: list[Product] = field(default_factory=list)
    anomaly_count: int = 0

    @property
    def is_clean(self) -> bool:
        return not self.preset_anomalies and not self.products_missing_price

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": {
                "totalPresetsChecked": self.total_presets_checked,
                "presetAnomalies": self.anomaly_count,
                "productsMissingPrice": len(self.products_missing_price),
            },
            "presetAnomalies": [a.to_dict() for a in self.preset_anomalies],
            "productsMissingPrice": [
                {
                    "slug": p.slug,
                    "name": p.name,
                    "category": p.category,
                    "basePrice": p.base_price,
                }
                for p in self.products_missing_price
            ],
        }


class AnomalyScanner:
    """Flags pricing defects across the catalog."""

    def __init__(
        self,
        presets: "PresetRepository",
        products: "ProductRepository",
        max_preset_anomalies: int = 120,
        max_products: int = 80,
    ) -> None:
        self._presets = presets
        self._products = products
        self._max_preset_anomalies = max_preset_anomalies
        self._max_products = max_products

    def scan_preset(self, preset: PricingPreset) -> list[PresetAnomaly]:
        """Return the anomalies of one preset."""

        def anomaly(kind: AnomalyType, message: str) -> PresetAnomaly:
            return PresetAnomaly(kind, preset.key, preset.name, message)

        series = extract_price_series(preset.model, preset.config)
        if not series:
            return [anomaly(AnomalyType.MISSING_TIERS, "No numeric tiers/rates found")]

        found: list[PresetAnomaly] = []
        lowest = min(series)
        if lowest <= 0:
            found.append(
                anomaly(
                    AnomalyType.NON_POSITIVE_PRICE,
                    f"Contains non-positive price ({lowest:g})",
                )
            )
        if not is_monotonic_non_increasing(series):
            found.append(
                anomaly(
                    AnomalyType.NON_MONOTONIC_TIERS,
                    "Tier prices are not monotonic non-increasing",
                )
            )
        if not found:
            result = validate_preset_config(preset.model, preset.config)
            if not result.is_valid:
                first = result.errors[0]
                found.append(
                    anomaly(
                        AnomalyType.INVALID_CONFIG,
                        f"{first.field}: {first.message}"
                        + (f" (+{len(result.errors) - 1} more)" if len(result.errors) > 1 else ""),
                    )
                )
        return found

    def scan(self) -> AnomalyReport:
        """Scan all active presets and unquotable products."""
        report = AnomalyReport()
        anomalies: list[PresetAnomaly] = []

        for preset in self._presets.list_presets(active_only=True):
            report.total_presets_checked += 1
            try:
                anomalies.extend(self.scan_preset(preset))
            except Exception as e:
                logger.warning(f"Anomaly scan failed for preset {preset.key}: {e!r}")
                anomalies.append(
                    PresetAnomaly(AnomalyType.SCAN_FAILED, preset.key, preset.name, f"Scan failed: {e}")
                )

        report.anomaly_count = len(anomalies)
        report.preset_anomalies = anomalies[: self._max_preset_anomalies]
        report.products_missing_price = [
            p
            for p in self._products.list_products(active_only=True)
            if p.pricing_preset_key is None and p.base_price <= 0
        ][: self._max_products]

        logger.info(
            f"Anomaly scan: {report.total_presets_checked} presets, "
            f"{report.anomaly_count} anomalies, "
            f"{len(report.products_missing_price)} products missing price"
        )
        return report
