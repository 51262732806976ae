"""Exceptions raised by the pricing core.

``ValidationError`` is caused by the client and fixed by changing the
request. ``ConfigError`` is caused by stored preset or product data and
fixed by an admin. ``NotFoundError`` covers unknown or inactive records.
"""

from __future__ import annotations

from typing import Any


class PricingError(Exception):
    """Base class for all pricing errors."""

    def __init__(self, message: str, details: Any = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class ValidationError(PricingError):
    """Raised when a quote request or admin input is malformed.

    Attributes:
        message: Human-readable description of the problem
        field: Request field the problem relates to, if any
        details: Extra structured information for the caller
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: Any = None,
    ) -> None:
        self.field = field
        super().__init__(message, details)


class ConfigError(PricingError):
    """Raised when stored pricing data cannot be used to quote.

    Attributes:
        message: The primary error message
        error_type: Category of error (unquotable, unknown_model, invalid_config,
            file_not_found, json_parse, validation, ...)
        preset_key: Key of the preset at fault, if known
        path: File the data came from, if loaded from disk
        details: Field-level errors (``{"field", "message", "value"}`` dicts)
    """

    def __init__(
        self,
        message: str,
        error_type: str = "invalid_config",
        preset_key: str | None = None,
        path: Any = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        self.error_type = error_type
        self.preset_key = preset_key
        self.path = path
        super().__init__(message, details or [])


class NotFoundError(PricingError):
    """Raised when a product or preset does not exist or is inactive."""

    def __init__(self, message: str, key: str | None = None) -> None:
        self.key = key
        super().__init__(message)
