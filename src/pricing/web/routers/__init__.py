"""API routers for the REST API."""

from pricing.web.routers.admin import router as admin_router
from pricing.web.routers.pricing import router as pricing_router
from pricing.web.routers.products import router as products_router

__all__ = [
    "admin_router",
    "pricing_router",
    "products_router",
]
