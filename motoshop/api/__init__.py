"""API routers."""

from motoshop.api import categories, products

__all__ = ["categories", "products"]
