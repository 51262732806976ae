"""Strategy protocol for listing "from" prices.

The from-price chain is an ordered list of named strategies. Each one either
produces a positive price in cents or passes, and the first price wins.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pricing.domain.entities import Product


@runtime_checkable
class FromPriceStrategy(Protocol):
    """Protocol for one step of the from-price priority chain.

    Example:
        ```python
        class LegacyBasePriceStrategy:
            name = "legacy_base_price"

            def price(self, product: Product) -> int | None:
                return product.base_price if product.base_price > 0 else None
        ```
    """

    @property
    def name(self) -> str:
        """Return the unique source name reported with the price."""
        ...

    def price(self, product: "Product") -> int | None:
        """Return a positive price in cents, or None to fall through."""
        ...
