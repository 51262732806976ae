"""Listing "from" prices.

Catalog pages show a cheap "from $X" figure per product. It comes from an
ordered chain of named strategies, the first positive value winning:

1. ``display_override``  - admin-curated ``displayFromPrice``
2. ``cached_min_price``  - the ``minPrice`` cache entry
3. ``live_quote``        - a minimal-configuration quote through the engine
4. ``legacy_base_price`` - the legacy flat ``basePrice``

Resolution is read-only with respect to the cache. ``MinPriceRefresher`` is
the separate, explicit job that recomputes and persists ``minPrice``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Iterable, Sequence

from pricing.application.config.adapter import (
    parse_preset_config,
    parse_product_options,
)
from pricing.domain.entities import Product, QuoteRequest
from pricing.domain.exceptions import ConfigError, PricingError
from pricing.domain.value_objects import (
    AreaTieredConfig,
    CachedPrice,
    QtyOptionsConfig,
    QtyTieredConfig,
)

from .quote_engine import QuoteEngine

if TYPE_CHECKING:
    from pricing.contracts.protocols import ProductRepository
    from pricing.contracts.strategies import FromPriceStrategy

logger = logging.getLogger(__name__)

DEFAULT_AREA_SIZE_IN: tuple[float, float] = (24.0, 36.0)


@dataclass(frozen=True)
class FromPrice:
    """A resolved from-price and the strategy that produced it.

    ``source`` is None when no strategy yielded a value and ``cents`` is 0.
    """

    cents: int
    source: str | None = None


def build_minimal_request(
    product: Product,
    default_area_size: tuple[float, float] = DEFAULT_AREA_SIZE_IN,
) -> QuoteRequest:
    """Synthesize the cheapest realistic request for a product's preset.

    - ``QTY_TIERED``: the smallest tier quantity.
    - ``AREA_TIERED``: quantity 1 at ``optionsConfig.displayMinSize``, else
      the product minimum dimensions, else ``default_area_size``.
    - ``QTY_OPTIONS``: the first product size (its smallest quantity
      choice, else its smallest fixed-price quantity, else its smallest
      tier), else the first preset size at its smallest tier quantity.

    Raises:
        ConfigError: If the product has no usable preset.
    """
    preset = product.pricing_preset
    if preset is None:
        raise ConfigError(f"Product '{product.slug}' has no pricing preset", error_type="unquotable")

    config = parse_preset_config(preset.model, preset.config, preset.key)
    overrides = parse_product_options(product.options_config, product.slug)

    match config:
        case QtyTieredConfig():
            min_qty = min(t.min_qty for t in config.tiers)
            return QuoteRequest(slug=product.slug, quantity=max(1, int(min_qty)))

        case AreaTieredConfig():
            default_w, default_h = default_area_size
            if overrides.display_min_size is not None:
                width, height = overrides.display_min_size
            else:
                width = product.min_width_in or default_w
                height = product.min_height_in or default_h
            return QuoteRequest(slug=product.slug, quantity=1, width_in=width, height_in=height)

        case QtyOptionsConfig():
            for override in overrides.sizes:
                size = override.apply_to(config.find_size(override.label))
                if size is None:
                    continue
                if override.quantity_choices:
                    quantity = override.quantity_choices[0]
                elif size.price_by_qty:
                    quantity = size.quantities[0]
                else:
                    quantity = min(t.min_qty for t in size.tiers)
                return QuoteRequest(
                    slug=product.slug,
                    quantity=max(1, int(quantity)),
                    size_label=size.label,
                )
            first = config.sizes[0]
            return QuoteRequest(
                slug=product.slug,
                quantity=max(1, int(min(t.min_qty for t in first.tiers))),
                size_label=first.label,
            )

    raise ConfigError(f"Unsupported config for '{product.slug}'")


class DisplayOverrideStrategy:
    """Admin-curated ``displayFromPrice`` always wins."""

    name = "display_override"

    def price(self, product: Product) -> int | None:
        value = product.display_from_price
        return value if value is not None and value > 0 else None


class CachedMinPriceStrategy:
    """The ``minPrice`` cache populated by the refresh job."""

    name = "cached_min_price"

    def price(self, product: Product) -> int | None:
        cached = product.min_price
        return cached.cents if cached is not None and cached.cents > 0 else None


class LiveQuoteStrategy:
    """Quote a minimal configuration through the engine.

    Any failure counts as "no value": a listing page must never fail
    because of one product's bad config.
    """

    name = "live_quote"

    def __init__(
        self,
        engine: QuoteEngine | None = None,
        default_area_size: tuple[float, float] = DEFAULT_AREA_SIZE_IN,
    ) -> None:
        self._engine = engine or QuoteEngine()
        self._default_area_size = default_area_size

    def compute(self, product: Product) -> int:
        """Compute the live value, letting errors propagate."""
        request = build_minimal_request(product, self._default_area_size)
        return self._engine.quote(product, request).total_cents

    def price(self, product: Product) -> int | None:
        if product.pricing_preset is None:
            return None
        try:
            cents = self.compute(product)
        except PricingError as e:
            logger.debug(f"Live from-price failed for {product.slug}: {e}")
            return None
        except Exception as e:
            logger.info(f"Unexpected error computing from-price for {product.slug}: {e!r}")
            return None
        return cents if cents > 0 else None


class LegacyBasePriceStrategy:
    """The legacy flat ``basePrice`` as a last resort."""

    name = "legacy_base_price"

    def price(self, product: Product) -> int | None:
        return product.base_price if product.base_price and product.base_price > 0 else None


def default_strategies(
    engine: QuoteEngine | None = None,
    default_area_size: tuple[float, float] = DEFAULT_AREA_SIZE_IN,
) -> tuple["FromPriceStrategy", ...]:
    """Return the standard priority chain."""
    return (
        DisplayOverrideStrategy(),
        CachedMinPriceStrategy(),
        LiveQuoteStrategy(engine, default_area_size),
        LegacyBasePriceStrategy(),
    )


class FromPriceResolver:
    """Resolves from-prices by trying strategies in order.

    Example:
        >>> resolver = FromPriceResolver()
        >>> resolver.resolve(product)
        FromPrice(cents=1999, source='display_override')
    """

    def __init__(self, strategies: Sequence["FromPriceStrategy"] | None = None) -> None:
        self._strategies = tuple(strategies) if strategies is not None else default_strategies()

    @property
    def strategy_names(self) -> list[str]:
        return [s.name for s in self._strategies]

    def resolve(self, product: Product | None) -> FromPrice:
        """Return the first positive price in the chain, or ``FromPrice(0)``."""
        if product is None:
            return FromPrice(0)
        for strategy in self._strategies:
            cents = strategy.price(product)
            if cents is not None and cents > 0:
                return FromPrice(cents, strategy.name)
        return FromPrice(0)

    def compute_from_price(self, product: Product | None) -> int:
        """Return the from-price in cents (0 when nothing is usable)."""
        return self.resolve(product).cents


def compute_from_price(product: Product | None) -> int:
    """Resolve a from-price with the default strategy chain."""
    return FromPriceResolver().compute_from_price(product)


@dataclass
class RefreshReport:
    """Outcome of a min-price refresh run.

    Attributes:
        refreshed: slug -> new cached cents
        failed: slug -> error message
    """

    refreshed: dict[str, int] = field(default_factory=dict)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed

    def to_dict(self) -> dict[str, object]:
        return {"refreshed": dict(self.refreshed), "failed": dict(self.failed)}


class MinPriceRefresher:
    """Recomputes and persists the ``minPrice`` cache.

    Only the live computation is used, so a stale cache value can never
    refresh itself. Each product is refreshed independently: one failure is
    recorded in the report and never stops the rest.
    """

    def __init__(
        self,
        products: "ProductRepository",
        live: LiveQuoteStrategy | None = None,
        clock=None,
    ) -> None:
        self._products = products
        self._live = live or LiveQuoteStrategy()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def refresh_product(self, product: Product) -> CachedPrice:
        """Recompute and persist one product's cache entry.

        Raises:
            PricingError: If the product cannot be quoted.
        """
        cents = self._live.compute(product)
        cached = CachedPrice(cents=cents, refreshed_at=self._clock())
        self._products.save_min_price(product.slug, cached)
        return cached

    def refresh(self, products: Iterable[Product]) -> RefreshReport:
        """Refresh every product, isolating failures per product."""
        report = RefreshReport()
        for product in products:
            try:
                cached = self.refresh_product(product)
            except Exception as e:
                logger.warning(f"minPrice refresh failed for {product.slug}: {e}")
                report.failed[product.slug] = str(e)
                continue
            report.refreshed[product.slug] = cached.cents
        logger.info(
            f"minPrice refresh: {len(report.refreshed)} refreshed, {len(report.failed)} failed"
        )
        return report
