"""Plain-text and JSON formatters for CLI output."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from pricing.domain.entities import PricingPreset, Quote

if TYPE_CHECKING:
    from pricing.application.services.anomalies import AnomalyReport
    from pricing.application.services.from_price import FromPrice, RefreshReport


def format_cents(cents: int, currency: str = "CAD") -> str:
    """Format integer cents as ``$12.34 CAD``."""
    sign = "-" if cents < 0 else ""
    cents = abs(cents)
    return f"{sign}${cents // 100:,}.{cents % 100:02d} {currency}"


class QuoteFormatter:
    """Formats quotes as an itemized table."""

    def format(self, quote: Quote) -> str:
        meta = quote.meta
        lines = [
            f"QUOTE: {meta.get('slug', '')} ({quote.template})",
            "=" * 70,
        ]
        if meta.get("tierLabel"):
            lines.append(f"Tier: {meta['tierLabel']}")
        if meta.get("material"):
            lines.append(f"Material: {meta['material']}")
        lines.append("-" * 70)

        for line in quote.breakdown:
            lines.append(f"{line.label:<56} {line.amount_cents / 100:>12,.2f}")

        lines.append("-" * 70)
        lines.append(f"{'TOTAL':<44} {format_cents(quote.total_cents, quote.currency):>25}")
        lines.append(
            f"{'Per unit (display)':<44} {format_cents(quote.unit_cents, quote.currency):>25}"
        )
        if meta.get("minimumApplied"):
            lines.append("(minimum order price applied)")
        return "\n".join(lines)

    def format_json(self, quote: Quote) -> str:
        return json.dumps(quote.to_dict(), indent=2)


class AnomalyReportFormatter:
    """Formats anomaly scan reports."""

    def format(self, report: "AnomalyReport") -> str:
        lines = [
            "PRICING ANOMALIES",
            "=" * 70,
            f"Presets checked:          {report.total_presets_checked}",
            f"Preset anomalies:         {report.anomaly_count}",
            f"Products missing price:   {len(report.products_missing_price)}",
        ]
        if report.preset_anomalies:
            lines.append("")
            lines.append(f"{'Type':<22} {'Preset':<28} Message")
            lines.append("-" * 70)
            for anomaly in report.preset_anomalies:
                lines.append(f"{anomaly.type.value:<22} {anomaly.key:<28} {anomaly.message}")
        if report.products_missing_price:
            lines.append("")
            lines.append("Unquotable products (no preset, no base price):")
            for product in report.products_missing_price:
                lines.append(f"  - {product.slug} ({product.category or 'uncategorized'})")
        if report.is_clean:
            lines.append("")
            lines.append("No anomalies found.")
        return "\n".join(lines)


class PresetFormatter:
    """Formats preset listings."""

    def format_list(self, presets: list[PricingPreset]) -> str:
        if not presets:
            return "No pricing presets."
        lines = [f"{'Key':<30} {'Model':<12} {'Active':<7} Name", "-" * 70]
        for preset in presets:
            active = "yes" if preset.is_active else "no"
            lines.append(f"{preset.key:<30} {preset.model:<12} {active:<7} {preset.name}")
        return "\n".join(lines)

    def format_detail(self, preset: PricingPreset) -> str:
        return json.dumps(
            {
                "key": preset.key,
                "name": preset.name,
                "model": preset.model,
                "isActive": preset.is_active,
                "config": preset.config,
            },
            indent=2,
        )


def format_from_price(slug: str, from_price: "FromPrice", currency: str = "CAD") -> str:
    if from_price.source is None:
        return f"{slug}: no from-price available"
    return f"{slug}: from {format_cents(from_price.cents, currency)} ({from_price.source})"


def format_refresh_report(report: "RefreshReport", currency: str = "CAD") -> str:
    lines = [f"Refreshed {len(report.refreshed)} product(s), {len(report.failed)} failed."]
    for slug, cents in report.refreshed.items():
        lines.append(f"  ok    {slug}: {format_cents(cents, currency)}")
    for slug, message in report.failed.items():
        first_line = message.splitlines()[0] if message else ""
        lines.append(f"  FAIL  {slug}: {first_line}")
    return "\n".join(lines)


def to_json(data: Any) -> str:
    return json.dumps(data, indent=2, default=str)
