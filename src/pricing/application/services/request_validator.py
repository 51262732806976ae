"""Quote request validation.

Checks the request fields that do not depend on the pricing model: the
quantity, the dimension pair, product minimum dimensions and accessory
quantities. Model-specific checks (a missing size label, unknown sizes)
belong to the calculators.
"""

from __future__ import annotations

import math
from typing import Any

from pricing.domain.entities import Product, QuoteRequest
from pricing.domain.exceptions import ValidationError


MAX_QUANTITY = 10_000_000
MAX_DIMENSION_IN = 100_000


def _is_positive_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value) and value > 0
    except OverflowError:
        return False


def _is_positive_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _quantity_error(field: str, value: Any, noun: str) -> dict[str, str] | None:
    if not _is_positive_integer(value):
        return {"field": field, "message": f"{noun} must be a positive integer"}
    if value > MAX_QUANTITY:
        return {"field": field, "message": f"{noun} must be at most {MAX_QUANTITY:,}"}
    return None


class RequestValidatorService:
    """Service for validating quote requests against a product."""

    def collect_errors(
        self, product: Product, request: QuoteRequest
    ) -> list[dict[str, str]]:
        """Return every problem with a request as ``{field, message}`` dicts."""
        errors: list[dict[str, str]] = []

        error = _quantity_error("quantity", request.quantity, "quantity")
        if error:
            errors.append(error)

        width, height = request.width_in, request.height_in
        if (width is None) != (height is None):
            errors.append(
                {
                    "field": "widthIn" if width is None else "heightIn",
                    "message": "widthIn and heightIn must be provided together",
                }
            )
        else:
            errors.extend(self._dimension_errors(product, width, height))

        for i, accessory in enumerate(request.accessories):
            if accessory.quantity is None:
                continue
            error = _quantity_error(
                f"accessories[{i}].quantity", accessory.quantity, "accessory quantity"
            )
            if error:
                errors.append(error)
        return errors

    def _dimension_errors(
        self, product: Product, width: Any, height: Any
    ) -> list[dict[str, str]]:
        errors: list[dict[str, str]] = []
        for field, value, minimum in (
            ("widthIn", width, product.min_width_in),
            ("heightIn", height, product.min_height_in),
        ):
            if value is None:
                continue
            if not _is_positive_number(value):
                errors.append({"field": field, "message": f"{field} must be a number > 0"})
            elif value > MAX_DIMENSION_IN:
                errors.append(
                    {"field": field, "message": f'{field} must be at most {MAX_DIMENSION_IN:,}"'}
                )
            elif minimum and value < minimum:
                errors.append(
                    {
                        "field": field,
                        "message": f'{field} must be at least {minimum:g}" for this product',
                    }
                )
        return errors

    def validate(self, product: Product, request: QuoteRequest) -> None:
        """Validate a request.

        Raises:
            ValidationError: With the first problem as the message and the
                full list under ``details["errors"]``.
        """
        errors = self.collect_errors(product, request)
        if errors:
            raise ValidationError(
                errors[0]["message"],
                field=errors[0]["field"],
                details={"errors": errors},
            )
