"""Pydantic schemas for request/response validation."""

from motoshop.schemas.category import (
    CategoryCreate,
    CategoryUpdate,
    CategoryMove,
    CategoryResponse,
    CategoryTreeNode,
    CategoryStats,
    IntegrityReport,
    ParentCheckResponse,
)
from motoshop.schemas.product import ProductCreate, ProductUpdate, ProductResponse, ProductListResponse

__all__ = [
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryMove",
    "CategoryResponse",
    "CategoryTreeNode",
    "CategoryStats",
    "IntegrityReport",
    "ParentCheckResponse",
    "ProductCreate",
    "ProductUpdate",
    "ProductResponse",
    "ProductListResponse",
]
