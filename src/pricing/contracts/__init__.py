"""Contracts module - protocols shared across layers.

By depending on protocols rather than concrete implementations, the
application layer stays independent of storage and remains testable with
in-memory fakes.

Example:
    ```python
    from pricing.contracts import ProductRepository

    def active_slugs(products: ProductRepository) -> list[str]:
        return [p.slug for p in products.list_products()]
    ```
"""

from .protocols import (
    PresetRepository as PresetRepository,
    ProductRepository as ProductRepository,
    QuoteEngineProtocol as QuoteEngineProtocol,
)
from .strategies import FromPriceStrategy as FromPriceStrategy
