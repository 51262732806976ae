"""Storage protocols for dependency injection.

The pricing core never talks to a database. The host application supplies
product and preset storage through these protocols, and the bundled
infrastructure store implements them for the CLI, the HTTP app and tests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pricing.domain.entities import PricingPreset, Product, Quote, QuoteRequest
    from pricing.domain.value_objects import CachedPrice


@runtime_checkable
class ProductRepository(Protocol):
    """Protocol for product lookup and min-price cache writes.

    Products returned by the repository carry their attached preset (or
    None) so the engine can quote without a second lookup.
    """

    def get_product(self, slug: str) -> "Product | None":
        """Return the product with this slug, active or not, or None."""
        ...

    def list_products(self, active_only: bool = True) -> "list[Product]":
        """Return products in catalog order."""
        ...

    def products_for_preset(
        self, preset_key: str, active_only: bool = True
    ) -> "list[Product]":
        """Return products referencing a preset."""
        ...

    def save_min_price(self, slug: str, price: "CachedPrice") -> None:
        """Persist a refreshed from-price cache entry.

        Raises:
            NotFoundError: If the product does not exist.
        """
        ...


@runtime_checkable
class PresetRepository(Protocol):
    """Protocol for pricing preset storage."""

    def get_preset(self, key: str) -> "PricingPreset | None":
        """Return the preset with this key, or None."""
        ...

    def list_presets(self, active_only: bool = False) -> "list[PricingPreset]":
        """Return presets ordered by key."""
        ...

    def save_preset(self, preset: "PricingPreset") -> None:
        """Insert or replace a preset by key."""
        ...


@runtime_checkable
class QuoteEngineProtocol(Protocol):
    """Protocol for the live quote computation."""

    def quote(self, product: "Product", request: "QuoteRequest") -> "Quote":
        """Price a request for a product.

        Raises:
            ValidationError: If the request is malformed for this product.
            ConfigError: If the product's preset cannot be used to quote.
        """
        ...
