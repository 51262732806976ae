"""Application commands (use cases) for pricing."""

from __future__ import annotations

import copy
import logging
import math
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from pricing.application.config.validator import coerce_model, validate_preset_config
from pricing.domain.entities import PricingPreset, Product, Quote, QuoteRequest
from pricing.domain.exceptions import NotFoundError, ValidationError

from .services.bulk_adjust import AdjustFlags, adjust_config, sample_delta
from .services.from_price import FromPrice, FromPriceResolver, MinPriceRefresher, RefreshReport
from .services.quote_engine import QuoteEngine

if TYPE_CHECKING:
    from pricing.contracts.protocols import (
        PresetRepository,
        ProductRepository,
        QuoteEngineProtocol,
    )

logger = logging.getLogger(__name__)


def _active_product(products: "ProductRepository", slug: str) -> Product:
    product = products.get_product(slug)
    if product is None or not product.is_active:
        raise NotFoundError("Product not found", key=slug)
    return product


def _get_preset(presets: "PresetRepository", key: str) -> PricingPreset:
    preset = presets.get_preset(key)
    if preset is None:
        raise NotFoundError(f"Pricing preset not found: {key}", key=key)
    return preset


def _products_for_presets(products: "ProductRepository", keys: list[str]) -> list[Product]:
    affected: list[Product] = []
    for key in keys:
        affected.extend(products.products_for_preset(key, active_only=True))
    return affected


class QuoteProductCommand:
    """Command to quote a request for a catalog product by slug."""

    def __init__(
        self,
        products: "ProductRepository",
        engine: "QuoteEngineProtocol | None" = None,
    ) -> None:
        self.products = products
        self.engine = engine or QuoteEngine()

    def execute(self, request: QuoteRequest) -> Quote:
        """Look up the product and quote the request.

        Raises:
            NotFoundError: If the slug is unknown or the product is inactive.
            ValidationError: If the request is malformed.
            ConfigError: If the product is not quotable.
        """
        product = _active_product(self.products, request.slug)
        return self.engine.quote(product, request)


class ResolveFromPriceCommand:
    """Command to resolve a listing from-price by slug."""

    def __init__(
        self,
        products: "ProductRepository",
        resolver: FromPriceResolver | None = None,
    ) -> None:
        self.products = products
        self.resolver = resolver or FromPriceResolver()

    def execute(self, slug: str) -> FromPrice:
        return self.resolver.resolve(_active_product(self.products, slug))


class RefreshMinPricesCommand:
    """Command to recompute the ``minPrice`` cache."""

    def __init__(
        self,
        products: "ProductRepository",
        refresher: MinPriceRefresher | None = None,
    ) -> None:
        self.products = products
        self.refresher = refresher or MinPriceRefresher(products)

    def execute(self, preset_key: str | None = None) -> RefreshReport:
        """Refresh active products, optionally only those using one preset."""
        if preset_key is not None:
            targets = self.products.products_for_preset(preset_key, active_only=True)
        else:
            targets = [
                p
                for p in self.products.list_products(active_only=True)
                if p.pricing_preset is not None
            ]
        return self.refresher.refresh(targets)


@dataclass
class PresetUpdateResult:
    """Outcome of a preset update.

    Attributes:
        preset: The saved preset
        affected_slugs: Active products referencing the preset
        refresh: minPrice refresh outcome, or None if not run inline
    """

    preset: PricingPreset
    affected_slugs: list[str] = field(default_factory=list)
    refresh: RefreshReport | None = None


class UpdatePresetCommand:
    """Command for the admin preset write path.

    The model tag is immutable: a new config is validated against the
    stored preset's model before anything is persisted.
    """

    def __init__(
        self,
        presets: "PresetRepository",
        products: "ProductRepository",
        refresher: MinPriceRefresher | None = None,
    ) -> None:
        self.presets = presets
        self.products = products
        self.refresh_command = RefreshMinPricesCommand(products, refresher)

    def execute(
        self,
        preset_key: str,
        name: str | None = None,
        config: Any = None,
        is_active: bool | None = None,
        refresh: bool = True,
    ) -> PresetUpdateResult:
        """Validate and save a preset update.

        Args:
            preset_key: Key of the preset to update.
            name: New display name.
            config: New config document.
            is_active: New active flag.
            refresh: Refresh affected products' minPrice inline. The HTTP
                layer passes False and schedules the refresh as a
                background task instead.

        Raises:
            NotFoundError: If the preset does not exist.
            ValidationError: If there is nothing to update or the config is
                invalid for the preset's model.
        """
        preset = _get_preset(self.presets, preset_key)

        if name is None and config is None and is_active is None:
            raise ValidationError("No fields to update")

        if config is not None:
            result = validate_preset_config(preset.model, config)
            if not result.is_valid:
                raise ValidationError(
                    f"Invalid {preset.model} config",
                    field="config",
                    details={"errors": [e.to_dict() for e in result.errors]},
                )
            for warning in result.warnings:
                logger.info(f"Preset {preset_key}: {warning.field}: {warning.message}")

        updated = replace(
            preset,
            name=preset.name if name is None else name,
            config=preset.config if config is None else config,
            is_active=preset.is_active if is_active is None else bool(is_active),
        )
        self.presets.save_preset(updated)
        logger.info(f"Saved pricing preset {preset_key}")

        affected = [
            p.slug for p in self.products.products_for_preset(preset_key, active_only=True)
        ]
        report = self.refresh_command.execute(preset_key) if refresh else None
        return PresetUpdateResult(updated, affected, report)


@dataclass
class BulkAdjustResult:
    key: str
    name: str
    model: str
    status: str  # ready | invalid | skipped_shared
    sample: dict[str, Any] | None = None
    errors: list[dict[str, Any]] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "key": self.key,
            "name": self.name,
            "model": self.model,
            "status": self.status,
            "categories": self.categories,
        }
        if self.sample is not None:
            data["sample"] = self.sample
        if self.errors:
            data["errors"] = self.errors
        return data


@dataclass
class PresetSnapshot:
    """A preset config before and after an applied bulk adjustment."""

    preset_key: str
    before: Any
    after: Any

    def to_dict(self) -> dict[str, Any]:
        return {"presetKey": self.preset_key, "before": self.before, "after": self.after}


@dataclass
class BulkAdjustReport:
    mode: str
    percent: float
    category: str | None
    results: list[BulkAdjustResult] = field(default_factory=list)
    applied: int = 0
    refresh: RefreshReport | None = None
    snapshots: list[PresetSnapshot] = field(default_factory=list)

    def count(self, status: str) -> int:
        return sum(1 for r in self.results if r.status == status)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "mode": self.mode,
            "percent": self.percent,
            "category": self.category,
            "touchedPresets": len(self.results),
            "skippedShared": self.count("skipped_shared"),
            "invalidConfigs": self.count("invalid"),
            "applied": self.applied,
            "minPriceRefreshed": len(self.refresh.refreshed) if self.refresh else 0,
            "results": [r.to_dict() for r in self.results],
        }
        if self.mode == "apply":
            data["snapshots"] = [s.to_dict() for s in self.snapshots]
        return data


class BulkAdjustPresetsCommand:
    """Command to raise or lower preset prices by a percentage.

    A dry run (the default) only previews. Presets whose adjusted config
    fails validation are reported and never saved. With a category, presets
    shared with products in other categories are skipped unless
    ``include_shared`` is set.
    An applied run reports a before/after snapshot of every saved preset,
    which ``RollbackBulkAdjustCommand`` can restore.
    """

    MIN_PERCENT = -95.0
    MAX_PERCENT = 500.0

    def __init__(
        self,
        presets: "PresetRepository",
        products: "ProductRepository",
        refresher: MinPriceRefresher | None = None,
    ) -> None:
        self.presets = presets
        self.products = products
        self.refresh_command = RefreshMinPricesCommand(products, refresher)

    def _targets(self, category: str | None) -> list[tuple[PricingPreset, set[str]]]:
        usage: dict[str, set[str]] = {}
        for product in self.products.list_products(active_only=True):
            if product.pricing_preset_key:
                usage.setdefault(product.pricing_preset_key, set()).add(product.category or "")

        targets = []
        for preset in self.presets.list_presets(active_only=True):
            categories = usage.get(preset.key, set())
            if category is not None and category not in categories:
                continue
            targets.append((preset, categories))
        return targets

    def execute(
        self,
        percent: float,
        flags: AdjustFlags | None = None,
        category: str | None = None,
        include_shared: bool = False,
        apply: bool = False,
    ) -> BulkAdjustReport:
        """Preview or apply an adjustment.

        Raises:
            ValidationError: If ``percent`` is outside (-95, 500].
        """
        if (
            isinstance(percent, bool)
            or not isinstance(percent, (int, float))
            or not math.isfinite(percent)
            or percent <= self.MIN_PERCENT
            or percent > self.MAX_PERCENT
        ):
            raise ValidationError("percent must be between -95 and 500", field="percent")

        flags = flags or AdjustFlags()
        category = category.strip() if category and category.strip() else None
        report = BulkAdjustReport("apply" if apply else "preview", percent, category)
        to_save: list[tuple[PricingPreset, Any]] = []

        for preset, categories in self._targets(category):
            result = BulkAdjustResult(
                preset.key, preset.name, preset.model, "ready", categories=sorted(categories)
            )
            report.results.append(result)

            if category is not None and len(categories) > 1 and not include_shared:
                result.status = "skipped_shared"
                continue

            model = coerce_model(preset.model)
            if model is None:
                result.status = "invalid"
                result.errors = [{"field": "model", "message": f"Unknown pricing model: {preset.model}"}]
                continue

            adjusted = adjust_config(model, preset.config, percent, flags)
            validation = validate_preset_config(model, adjusted)
            if not validation.is_valid:
                result.status = "invalid"
                result.errors = [e.to_dict() for e in validation.errors]
                continue

            result.sample = sample_delta(model, preset.config, adjusted)
            to_save.append((replace(preset, config=adjusted), preset.config))

        if apply and to_save:
            for preset, before in to_save:
                self.presets.save_preset(preset)
                report.snapshots.append(PresetSnapshot(preset.key, before, preset.config))
            report.applied = len(to_save)
            logger.info(f"Bulk adjust {percent:+g}% applied to {report.applied} preset(s)")
            report.refresh = self.refresh_command.refresher.refresh(
                _products_for_presets(self.products, [p.key for p, _ in to_save])
            )

        return report


@dataclass
class RollbackResult:
    """Outcome of restoring bulk adjustment snapshots.

    Attributes:
        restored: Keys of presets whose config was restored
        skipped: ``{"presetKey", "reason"}`` for snapshots left unrestored
        refresh: minPrice refresh outcome for affected products
    """

    restored: list[str] = field(default_factory=list)
    skipped: list[dict[str, Any]] = field(default_factory=list)
    refresh: RefreshReport | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": True,
            "restoredPresets": len(self.restored),
            "restored": self.restored,
            "skipped": self.skipped,
            "minPriceRefreshed": len(self.refresh.refreshed) if self.refresh else 0,
        }


class RollbackBulkAdjustCommand:
    """Command to restore preset configs from bulk adjustment snapshots.

    Accepts the ``snapshots`` list of an applied bulk adjustment report.
    Each ``before`` config is validated against the stored preset's model;
    snapshots for unknown presets or with an invalid config are skipped.
    """

    def __init__(
        self,
        presets: "PresetRepository",
        products: "ProductRepository",
        refresher: MinPriceRefresher | None = None,
    ) -> None:
        self.presets = presets
        self.products = products
        self.refresh_command = RefreshMinPricesCommand(products, refresher)

    def execute(self, snapshots: Any) -> RollbackResult:
        """Restore every usable snapshot and refresh affected products.

        Raises:
            ValidationError: If ``snapshots`` is not a non-empty list, or no
                snapshot could be restored.
        """
        if not isinstance(snapshots, list) or not snapshots:
            raise ValidationError("snapshots must be a non-empty array", field="snapshots")

        result = RollbackResult()
        to_restore: list[PricingPreset] = []
        for i, snapshot in enumerate(snapshots):
            key = snapshot.get("presetKey") if isinstance(snapshot, dict) else None
            before = snapshot.get("before") if isinstance(snapshot, dict) else None
            if not isinstance(key, str) or not key or not isinstance(before, dict):
                result.skipped.append({"presetKey": key, "reason": f"snapshots[{i}] is malformed"})
                continue

            preset = self.presets.get_preset(key)
            if preset is None:
                result.skipped.append({"presetKey": key, "reason": "preset not found"})
                continue
            if not validate_preset_config(preset.model, before).is_valid:
                result.skipped.append({"presetKey": key, "reason": f"invalid {preset.model} config"})
                continue
            to_restore.append(replace(preset, config=copy.deepcopy(before)))

        if not to_restore:
            raise ValidationError(
                "No snapshot could be restored",
                field="snapshots",
                details={"skipped": result.skipped},
            )

        for preset in to_restore:
            self.presets.save_preset(preset)
            result.restored.append(preset.key)
        logger.info(f"Bulk adjust rollback restored {len(result.restored)} preset(s)")

        result.refresh = self.refresh_command.refresher.refresh(
            _products_for_presets(self.products, result.restored)
        )
        return result
