"""Storage collaborators for the catalog services."""

from motoshop.repositories.category_repository import CategoryStore, SqlCategoryStore
from motoshop.repositories.product_repository import (
    ProductCountProvider,
    SqlProductCountProvider,
)

__all__ = [
    "CategoryStore",
    "SqlCategoryStore",
    "ProductCountProvider",
    "SqlProductCountProvider",
]
