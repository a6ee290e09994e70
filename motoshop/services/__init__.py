"""Business logic services."""

from motoshop.services.category_service import CategoryService
from motoshop.services.product_service import ProductService

__all__ = [
    "CategoryService",
    "ProductService",
]
