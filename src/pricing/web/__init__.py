"""FastAPI REST API for print pricing.

This module exposes live quotes, listing from-prices and the admin preset
operations over HTTP.

Usage:
    uvicorn pricing.web:app --reload
"""

from pricing.web.app import app, create_app

__all__ = ["app", "create_app"]
