"""Pydantic schemas for the REST API."""

from pricing.web.schemas.common import CamelModel
from pricing.web.schemas.requests import (
    AccessorySchema,
    BulkAdjustBody,
    BulkRollbackBody,
    PresetUpdateBody,
    QuoteRequestBody,
    ValidateConfigBody,
)
from pricing.web.schemas.responses import (
    ErrorResponseSchema,
    FromPriceSchema,
    LineItemSchema,
    PresetSchema,
    PresetUpdateResponseSchema,
    QuoteSchema,
    ValidationResultSchema,
)

__all__ = [
    # Common
    "CamelModel",
    # Requests
    "AccessorySchema",
    "BulkAdjustBody",
    "BulkRollbackBody",
    "PresetUpdateBody",
    "QuoteRequestBody",
    "ValidateConfigBody",
    # Responses
    "ErrorResponseSchema",
    "FromPriceSchema",
    "LineItemSchema",
    "PresetSchema",
    "PresetUpdateResponseSchema",
    "QuoteSchema",
    "ValidationResultSchema",
]
