"""Quote computation core for a custom-printing storefront."""

__version__ = "1.0.0"
