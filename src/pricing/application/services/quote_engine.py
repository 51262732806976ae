"""Live quote computation.

The QuoteEngine is the single entry point for checkout and configurator
quotes. It parses the product's preset into a typed config, layers the
product's overrides on top, resolves the customer's selections and
dispatches to exactly one calculator. Errors always propagate: a checkout
quote must never silently come back wrong or zero.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Mapping, assert_never

from pricing.application.config.adapter import (
    parse_preset_config,
    parse_product_options,
)
from pricing.domain.entities import (
    AccessorySelection,
    OptionValue,
    Product,
    Quote,
    QuoteRequest,
)
from pricing.domain.exceptions import ConfigError
from pricing.domain.services import (
    AreaTieredCalculator,
    CalculatorInput,
    Computation,
    QtyOptionsCalculator,
    QtyTieredCalculator,
    SelectedAccessory,
    resolve_material,
)
from pricing.domain.value_objects import (
    AreaTieredConfig,
    Charge,
    PresetConfig,
    ProductOptions,
    QtyOptionsConfig,
    QtyTieredConfig,
)

from .request_validator import RequestValidatorService

logger = logging.getLogger(__name__)

# Option values that never select a finishing or addon
_UNSELECTED = frozenset({"", "none", "false", "no", "0"})


def option_selects(options: Mapping[str, OptionValue], charge_id: str) -> bool:
    """Check whether request options select a finishing or addon.

    A charge is selected by an option keyed by its id with a truthy value
    (``{"grommets": true}``), or by any string option whose value is its id
    (``{"finish": "lamination"}``).
    """
    value = options.get(charge_id)
    if isinstance(value, str):
        if value.strip().lower() not in _UNSELECTED:
            return True
    elif value is not None and value is not False and value != 0:
        return True
    return any(isinstance(v, str) and v == charge_id for v in options.values())


def layer_product_sizes(config: QtyOptionsConfig, options: ProductOptions) -> QtyOptionsConfig:
    """Narrow and reprice preset sizes with the product's size list.

    Only sizes the product lists stay quotable. When none of the product's
    entries resolve to a size, the preset sizes are kept unchanged.
    """
    if not options.sizes:
        return config

    sizes = []
    for override in options.sizes:
        size = override.apply_to(config.find_size(override.label))
        if size is not None:
            sizes.append(size)

    if not sizes:
        logger.debug("Product sizes match no preset size; using preset sizes")
        return config
    return replace(config, sizes=tuple(sizes))


class QuoteEngine:
    """Prices quote requests for products.

    Example:
        >>> engine = QuoteEngine()
        >>> quote = engine.quote(product, QuoteRequest(slug="stickers", quantity=100))
        >>> quote.total_cents
        9500
    """

    def __init__(
        self,
        currency: str = "CAD",
        request_validator: RequestValidatorService | None = None,
    ) -> None:
        self._currency = currency
        self._request_validator = request_validator or RequestValidatorService()
        self._area_tiered = AreaTieredCalculator()
        self._qty_tiered = QtyTieredCalculator()
        self._qty_options = QtyOptionsCalculator()

    def quote(self, product: Product, request: QuoteRequest) -> Quote:
        """Compute a quote.

        Args:
            product: The product, with its preset attached.
            request: The customer's configuration.

        Returns:
            The priced Quote.

        Raises:
            ValidationError: If the request is malformed, names an unknown
                size, or lacks the dimensions the model needs.
            ConfigError: If the product has no preset or the preset cannot
                be parsed.
        """
        self._request_validator.validate(product, request)

        preset = product.pricing_preset
        if preset is None:
            raise ConfigError(
                f"Product '{product.slug}' has no pricing preset; product is not quotable",
                error_type="unquotable",
            )

        config = parse_preset_config(preset.model, preset.config, preset.key)
        overrides = parse_product_options(product.options_config, product.slug)
        if isinstance(config, QtyOptionsConfig):
            config = layer_product_sizes(config, overrides)

        data = self.build_input(config, overrides, request)
        logger.debug(
            f"Quoting {product.slug} (preset={preset.key}, model={config.model.value}, "
            f"qty={request.quantity})"
        )
        computation = self.dispatch(config, data)

        meta = {
            **computation.meta,
            "slug": product.slug,
            "presetKey": preset.key,
            "quantity": request.quantity,
            "material": request.material,
            "widthIn": request.width_in,
            "heightIn": request.height_in,
        }
        if request.size_label is not None:
            meta.setdefault("sizeLabel", request.size_label)
        if request.options:
            meta["options"] = dict(request.options)

        return Quote(
            total_cents=computation.total_cents,
            unit_cents=_unit_cents(computation.total_cents, request.quantity),
            template=config.model.value,
            breakdown=computation.breakdown,
            meta=meta,
            currency=self._currency,
        )

    def dispatch(self, config: PresetConfig, data: CalculatorInput) -> Computation:
        """Run the calculator matching the config variant."""
        match config:
            case AreaTieredConfig():
                return self._area_tiered.compute(config, data)
            case QtyTieredConfig():
                return self._qty_tiered.compute(config, data)
            case QtyOptionsConfig():
                return self._qty_options.compute(config, data)
            case _:
                assert_never(config)

    def build_input(
        self,
        config: PresetConfig,
        overrides: ProductOptions,
        request: QuoteRequest,
    ) -> CalculatorInput:
        """Resolve material, finishings, addons and accessories for a request."""
        multiplier = 1.0
        material_id = None
        if not isinstance(config, QtyOptionsConfig):
            material = resolve_material(overrides.materials, request.material) or (
                resolve_material(config.materials, request.material)
            )
            if material is not None:
                multiplier = material.multiplier
                material_id = material.id
            elif request.material:
                logger.debug(f"Unknown material '{request.material}', using 1.0x")

        addons = {a.id: a for a in config.addons}
        addons.update({a.id: a for a in overrides.addons})

        accessory_ids = {a.id for a in request.accessories}
        selected_addons = tuple(
            a
            for a in addons.values()
            if a.id not in accessory_ids and option_selects(request.options, a.id)
        )

        return CalculatorInput(
            quantity=request.quantity,
            width_in=request.width_in,
            height_in=request.height_in,
            size_label=request.size_label,
            material=material_id or request.material,
            material_multiplier=multiplier,
            finishings=tuple(
                f for f in config.finishings if option_selects(request.options, f.id)
            ),
            addons=selected_addons,
            accessories=_select_accessories(addons, request.accessories),
        )


def _select_accessories(
    addons: dict[str, Charge], selections: tuple[AccessorySelection, ...]
) -> tuple[SelectedAccessory, ...]:
    selected = []
    for selection in selections:
        charge = addons.get(selection.id)
        if charge is None:
            logger.debug(f"Ignoring unknown accessory '{selection.id}'")
            continue
        selected.append(SelectedAccessory(charge, selection.quantity))
    return tuple(selected)


def _unit_cents(total_cents: int, quantity: int) -> int:
    """total / quantity, halves rounding up."""
    return (2 * total_cents + quantity) // (2 * quantity)


def quote_product(
    product: Product, request: QuoteRequest, engine: QuoteEngine | None = None
) -> Quote:
    """Convenience wrapper around :meth:`QuoteEngine.quote`."""
    return (engine or QuoteEngine()).quote(product, request)
