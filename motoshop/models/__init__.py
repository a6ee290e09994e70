"""Database models."""

from motoshop.models.database import Base, engine, get_db
from motoshop.models.category import Category
from motoshop.models.product import Product

__all__ = ["Base", "engine", "get_db", "Category", "Product"]
